from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from ulid import ULID

from dairybill.constants import IST
from dairybill.models.bill import Bill
from dairybill.models.billing import BillCalculation
from dairybill.models.client import Client
from dairybill.models.delivery import Delivery
from dairybill.models.payment import Payment, PaymentMethod
from dairybill.repositories.base import (
    BillRepository,
    ClientRepository,
    DeliveryRepository,
    DuplicateBillError,
    PaymentRepository,
)


def _now() -> datetime:
    return datetime.now(IST)


def _decimal(value: object) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


class SQLAlchemyClientRepository(ClientRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, client: Client) -> Client:
        now = _now()
        result = self.conn.execute(
            text(
                "INSERT INTO clients (uuid, user_id, name, phone, address, milk_quantity, rate, "
                "is_active, created_at, updated_at) "
                "VALUES (:uuid, :user_id, :name, :phone, :address, :milk_quantity, :rate, "
                ":is_active, :created_at, :updated_at)"
            ),
            {
                "uuid": str(ULID()),
                "user_id": client.user_id,
                "name": client.name,
                "phone": client.phone,
                "address": client.address,
                "milk_quantity": str(client.milk_quantity),
                "rate": client.rate,
                "is_active": 1 if client.is_active else 0,
                "created_at": client.created_at or now,
                "updated_at": now,
            },
        )
        client_id = result.lastrowid
        self.conn.commit()
        created = self.get_by_id(client_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve client after create (id={client_id})")
        return created

    @staticmethod
    def _row_to_client(row: RowMapping) -> Client:
        return Client(
            id=row["id"],
            uuid=row["uuid"],
            user_id=row["user_id"],
            name=row["name"],
            phone=row["phone"],
            address=row["address"],
            milk_quantity=_decimal(row["milk_quantity"]),
            rate=row["rate"],
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_by_id(self, client_id: int) -> Client | None:
        row = (
            self.conn.execute(text("SELECT * FROM clients WHERE id = :id"), {"id": client_id})
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_client(row)

    def list_all(self) -> list[Client]:
        rows = self.conn.execute(text("SELECT * FROM clients ORDER BY created_at DESC")).mappings().fetchall()
        return [self._row_to_client(row) for row in rows]


class SQLAlchemyDeliveryRepository(DeliveryRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, delivery: Delivery) -> Delivery:
        try:
            result = self.conn.execute(
                text(
                    "INSERT INTO deliveries (client_id, date, quantity, is_delivered, notes, created_at) "
                    "VALUES (:client_id, :date, :quantity, :is_delivered, :notes, :created_at)"
                ),
                {
                    "client_id": delivery.client_id,
                    "date": delivery.date.isoformat(),
                    "quantity": str(delivery.quantity),
                    "is_delivered": 1 if delivery.is_delivered else 0,
                    "notes": delivery.notes,
                    "created_at": _now(),
                },
            )
        except IntegrityError:
            # one record per client per day
            self.conn.rollback()
            raise
        delivery_id = result.lastrowid
        self.conn.commit()
        row = (
            self.conn.execute(text("SELECT * FROM deliveries WHERE id = :id"), {"id": delivery_id})
            .mappings()
            .fetchone()
        )
        if row is None:
            raise RuntimeError(f"Failed to retrieve delivery after create (id={delivery_id})")
        return self._row_to_delivery(row)

    @staticmethod
    def _row_to_delivery(row: RowMapping) -> Delivery:
        return Delivery(
            id=row["id"],
            client_id=row["client_id"],
            date=row["date"],
            quantity=_decimal(row["quantity"]),
            is_delivered=bool(row["is_delivered"]),
            notes=row["notes"],
            created_at=row["created_at"],
        )

    def list_by_date_range(self, start: date, end: date, client_id: int | None = None) -> list[Delivery]:
        query = "SELECT * FROM deliveries WHERE date >= :start AND date <= :end"
        params: dict[str, object] = {"start": start.isoformat(), "end": end.isoformat()}
        if client_id is not None:
            query += " AND client_id = :client_id"
            params["client_id"] = client_id
        rows = self.conn.execute(text(query + " ORDER BY date"), params).mappings().fetchall()
        return [self._row_to_delivery(row) for row in rows]

    def list_all(self) -> list[Delivery]:
        rows = self.conn.execute(text("SELECT * FROM deliveries ORDER BY date DESC")).mappings().fetchall()
        return [self._row_to_delivery(row) for row in rows]


class SQLAlchemyBillRepository(BillRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, bill: Bill) -> Bill:
        try:
            result = self.conn.execute(
                text(
                    "INSERT INTO bills (uuid, client_id, user_id, month, year, total_quantity, total_amount, "
                    "is_paid, paid_date, due_date, delivery_ids, calculation, created_at) "
                    "VALUES (:uuid, :client_id, :user_id, :month, :year, :total_quantity, :total_amount, "
                    ":is_paid, :paid_date, :due_date, :delivery_ids, :calculation, :created_at)"
                ),
                {
                    "uuid": str(ULID()),
                    "client_id": bill.client_id,
                    "user_id": bill.user_id,
                    "month": bill.month,
                    "year": bill.year,
                    "total_quantity": str(bill.total_quantity),
                    "total_amount": bill.total_amount,
                    "is_paid": 1 if bill.is_paid else 0,
                    "paid_date": bill.paid_date,
                    "due_date": bill.due_date.isoformat(),
                    "delivery_ids": json.dumps(bill.delivery_ids),
                    "calculation": bill.calculation.model_dump_json() if bill.calculation else None,
                    "created_at": _now(),
                },
            )
        except IntegrityError:
            self.conn.rollback()
            if self.get_for_client_period(bill.client_id, bill.month, bill.year) is not None:
                raise DuplicateBillError(bill.client_id, bill.month, bill.year) from None
            raise
        bill_id = result.lastrowid
        self.conn.commit()
        created = self.get_by_id(bill_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve bill after create (id={bill_id})")
        return created

    @staticmethod
    def _row_to_bill(row: RowMapping) -> Bill:
        calculation = row["calculation"]
        return Bill(
            id=row["id"],
            uuid=row["uuid"],
            client_id=row["client_id"],
            user_id=row["user_id"],
            month=row["month"],
            year=row["year"],
            total_quantity=_decimal(row["total_quantity"]),
            total_amount=row["total_amount"],
            is_paid=bool(row["is_paid"]),
            paid_date=row["paid_date"],
            due_date=row["due_date"],
            delivery_ids=json.loads(row["delivery_ids"] or "[]"),
            calculation=BillCalculation.model_validate_json(calculation) if calculation else None,
            created_at=row["created_at"],
        )

    def _fetch_one(self, where: str, params: dict[str, object]) -> Bill | None:
        row = self.conn.execute(text(f"SELECT * FROM bills WHERE {where}"), params).mappings().fetchone()
        if row is None:
            return None
        return self._row_to_bill(row)

    def _fetch_all(self, where: str, params: dict[str, object]) -> list[Bill]:
        rows = (
            self.conn.execute(text(f"SELECT * FROM bills WHERE {where} ORDER BY year DESC, month DESC, id"), params)
            .mappings()
            .fetchall()
        )
        return [self._row_to_bill(row) for row in rows]

    def get_by_id(self, bill_id: int) -> Bill | None:
        return self._fetch_one("id = :id", {"id": bill_id})

    def get_by_uuid(self, uuid: str) -> Bill | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    def get_for_client_period(self, client_id: int, month: int, year: int) -> Bill | None:
        return self._fetch_one(
            "client_id = :client_id AND month = :month AND year = :year",
            {"client_id": client_id, "month": month, "year": year},
        )

    def list_by_month(self, month: int, year: int) -> list[Bill]:
        return self._fetch_all("month = :month AND year = :year", {"month": month, "year": year})

    def list_by_client(self, client_id: int) -> list[Bill]:
        return self._fetch_all("client_id = :client_id", {"client_id": client_id})

    def list_all(self) -> list[Bill]:
        return self._fetch_all("1 = 1", {})

    def update_paid(self, bill_id: int, is_paid: bool, paid_date: datetime | None) -> None:
        try:
            self.conn.execute(
                text("UPDATE bills SET is_paid = :is_paid, paid_date = :paid_date WHERE id = :id"),
                {"is_paid": 1 if is_paid else 0, "paid_date": paid_date, "id": bill_id},
            )
        except SQLAlchemyError:
            self.conn.rollback()
            raise
        self.conn.commit()


class SQLAlchemyPaymentRepository(PaymentRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, payment: Payment) -> Payment:
        payment_uuid = str(ULID())
        now = _now()
        result = self.conn.execute(
            text(
                "INSERT INTO payments (uuid, bill_id, client_id, amount, method, transaction_id, notes, "
                "paid_at, created_at) "
                "VALUES (:uuid, :bill_id, :client_id, :amount, :method, :transaction_id, :notes, "
                ":paid_at, :created_at)"
            ),
            {
                "uuid": payment_uuid,
                "bill_id": payment.bill_id,
                "client_id": payment.client_id,
                "amount": payment.amount,
                "method": payment.method.value,
                "transaction_id": payment.transaction_id,
                "notes": payment.notes,
                "paid_at": payment.paid_at or now,
                "created_at": now,
            },
        )
        payment_id = result.lastrowid
        self.conn.commit()
        row = (
            self.conn.execute(text("SELECT * FROM payments WHERE id = :id"), {"id": payment_id})
            .mappings()
            .fetchone()
        )
        if row is None:
            raise RuntimeError(f"Failed to retrieve payment after create (id={payment_id})")
        return self._row_to_payment(row)

    def delete(self, payment_id: int) -> None:
        self.conn.execute(text("DELETE FROM payments WHERE id = :id"), {"id": payment_id})
        self.conn.commit()

    @staticmethod
    def _row_to_payment(row: RowMapping) -> Payment:
        return Payment(
            id=row["id"],
            uuid=row["uuid"],
            bill_id=row["bill_id"],
            client_id=row["client_id"],
            amount=row["amount"],
            method=PaymentMethod(row["method"]),
            transaction_id=row["transaction_id"],
            notes=row["notes"],
            paid_at=row["paid_at"],
            created_at=row["created_at"],
        )

    def list_by_bill(self, bill_id: int) -> list[Payment]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM payments WHERE bill_id = :bill_id ORDER BY paid_at"),
                {"bill_id": bill_id},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_payment(row) for row in rows]

    def list_all(self) -> list[Payment]:
        rows = self.conn.execute(text("SELECT * FROM payments ORDER BY paid_at DESC")).mappings().fetchall()
        return [self._row_to_payment(row) for row in rows]
