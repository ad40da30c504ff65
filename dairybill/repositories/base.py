from abc import ABC, abstractmethod
from datetime import date, datetime

from dairybill.models.bill import Bill
from dairybill.models.client import Client
from dairybill.models.delivery import Delivery
from dairybill.models.payment import Payment


class DuplicateBillError(Exception):
    """A bill already exists for the client and billing period."""

    def __init__(self, client_id: int, month: int, year: int) -> None:
        super().__init__(f"Bill already exists for client {client_id} ({month}/{year})")
        self.client_id = client_id
        self.month = month
        self.year = year


class ClientRepository(ABC):
    @abstractmethod
    def create(self, client: Client) -> Client: ...

    @abstractmethod
    def get_by_id(self, client_id: int) -> Client | None: ...

    @abstractmethod
    def list_all(self) -> list[Client]: ...


class DeliveryRepository(ABC):
    @abstractmethod
    def create(self, delivery: Delivery) -> Delivery: ...

    @abstractmethod
    def list_by_date_range(self, start: date, end: date, client_id: int | None = None) -> list[Delivery]: ...

    @abstractmethod
    def list_all(self) -> list[Delivery]: ...


class BillRepository(ABC):
    @abstractmethod
    def create(self, bill: Bill) -> Bill:
        """Persist a bill. Raises DuplicateBillError if the period is taken."""

    @abstractmethod
    def get_by_id(self, bill_id: int) -> Bill | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Bill | None: ...

    @abstractmethod
    def get_for_client_period(self, client_id: int, month: int, year: int) -> Bill | None: ...

    @abstractmethod
    def list_by_month(self, month: int, year: int) -> list[Bill]: ...

    @abstractmethod
    def list_by_client(self, client_id: int) -> list[Bill]: ...

    @abstractmethod
    def list_all(self) -> list[Bill]: ...

    @abstractmethod
    def update_paid(self, bill_id: int, is_paid: bool, paid_date: datetime | None) -> None: ...


class PaymentRepository(ABC):
    @abstractmethod
    def create(self, payment: Payment) -> Payment: ...

    @abstractmethod
    def delete(self, payment_id: int) -> None: ...

    @abstractmethod
    def list_by_bill(self, bill_id: int) -> list[Payment]: ...

    @abstractmethod
    def list_all(self) -> list[Payment]: ...
