from __future__ import annotations

import logging
from datetime import date, datetime

from dairybill.constants import IST, as_ist, format_period_short
from dairybill.models.bill import Bill
from dairybill.models.payment import Payment, PaymentMethod
from dairybill.models.stats import PaymentStats, PendingBalance, PeriodStats
from dairybill.repositories.base import BillRepository, ClientRepository, PaymentRepository
from dairybill.services.calculator import previous_period
from dairybill.services.statistics import (
    compute_payment_stats,
    pending_balances,
    select_due_bills,
    select_upcoming_bills,
)
from dairybill.settings import settings

logger = logging.getLogger(__name__)


def _today(now: datetime | None) -> tuple[datetime, date]:
    if now is None:
        now = datetime.now(IST)
    now = as_ist(now)
    return now, now.date()


class BillService:
    def __init__(
        self,
        bill_repo: BillRepository,
        payment_repo: PaymentRepository | None = None,
        client_repo: ClientRepository | None = None,
    ) -> None:
        self.bill_repo = bill_repo
        self.payment_repo = payment_repo
        self.client_repo = client_repo

    def _recent_bills(self, now: datetime) -> list[Bill]:
        """Bills of the current and previous billing period."""
        month, year = now.month - 1, now.year
        prev_month, prev_year = previous_period(month, year)
        return self.bill_repo.list_by_month(month, year) + self.bill_repo.list_by_month(prev_month, prev_year)

    def get_bill(self, bill_id: int) -> Bill | None:
        result = self.bill_repo.get_by_id(bill_id)
        logger.debug("get_bill id=%s found=%s", bill_id, result is not None)
        return result

    def list_bills(self, month: int, year: int) -> list[Bill]:
        result = self.bill_repo.list_by_month(month, year)
        logger.debug("Listed %d bills for %s/%s", len(result), month, year)
        return result

    def list_client_bills(self, client_id: int) -> list[Bill]:
        return self.bill_repo.list_by_client(client_id)

    def get_due_bills(self, now: datetime | None = None) -> list[Bill]:
        now, today = _today(now)
        result = select_due_bills(self._recent_bills(now), today)
        logger.debug("Found %d due bills as of %s", len(result), today)
        return result

    def get_upcoming_due_bills(self, now: datetime | None = None) -> list[Bill]:
        now, today = _today(now)
        result = select_upcoming_bills(self._recent_bills(now), today, settings.upcoming_window_days)
        logger.debug("Found %d upcoming bills as of %s", len(result), today)
        return result

    def get_payment_stats(self, month: int, year: int, now: datetime | None = None) -> PaymentStats:
        _, today = _today(now)
        return compute_payment_stats(self.bill_repo.list_by_month(month, year), today)

    def get_payment_trends(self, months_back: int = 6, now: datetime | None = None) -> list[PeriodStats]:
        """Statistics for the last ``months_back`` periods, oldest first."""
        now, today = _today(now)
        month, year = now.month - 1, now.year
        trends: list[PeriodStats] = []
        for _ in range(months_back):
            stats = compute_payment_stats(self.bill_repo.list_by_month(month, year), today)
            trends.append(PeriodStats(month=month, year=year, label=format_period_short(month, year), stats=stats))
            month, year = previous_period(month, year)
        trends.reverse()
        return trends

    def get_clients_with_pending_payments(self) -> list[PendingBalance]:
        if self.client_repo is None:
            raise RuntimeError("Client repository not configured")
        return pending_balances(self.client_repo.list_all(), self.bill_repo.list_all())

    # ---- Payment methods ----

    def record_payment(
        self,
        bill: Bill,
        method: PaymentMethod,
        amount: int | None = None,
        transaction_id: str = "",
        notes: str = "",
        now: datetime | None = None,
    ) -> Payment:
        """Store a payment for a bill and mark the bill paid."""
        if self.payment_repo is None:
            raise RuntimeError("Payment repository not configured")
        if bill.id is None:
            raise ValueError("Cannot record payment for bill without an id")
        if bill.is_paid:
            raise ValueError(f"Bill {bill.id} is already paid")
        if amount is None:
            amount = bill.total_amount
        if amount <= 0:
            raise ValueError("Payment amount must be positive")

        now, _ = _today(now)
        payment = self.payment_repo.create(
            Payment(
                bill_id=bill.id,
                client_id=bill.client_id,
                amount=amount,
                method=method,
                transaction_id=transaction_id,
                notes=notes,
                paid_at=now,
            )
        )
        try:
            self.bill_repo.update_paid(bill.id, True, now)
        except Exception:
            # a stored payment must always belong to a paid bill
            logger.exception("Marking bill %s paid failed, removing payment %s", bill.id, payment.id)
            if payment.id is not None:
                self.payment_repo.delete(payment.id)
            raise
        bill.is_paid = True
        bill.paid_date = now
        logger.info("Payment recorded: bill=%s amount=%d method=%s", bill.id, amount, method.value)
        return payment

    def toggle_paid(self, bill: Bill) -> Bill:
        if bill.id is None:
            raise ValueError("Cannot toggle paid for bill without an id")
        if bill.is_paid:
            paid_date = None
        else:
            paid_date = datetime.now(IST)
        self.bill_repo.update_paid(bill.id, paid_date is not None, paid_date)
        bill.is_paid = paid_date is not None
        bill.paid_date = paid_date
        logger.info("Bill %s marked as %s", bill.id, "paid" if bill.is_paid else "unpaid")
        return bill

    def list_payments(self, bill_id: int) -> list[Payment]:
        if self.payment_repo is None:
            return []
        return self.payment_repo.list_by_bill(bill_id)
