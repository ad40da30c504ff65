from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from dairybill.constants import IST, format_period
from dairybill.models.billing import BillCalculation


class Bill(BaseModel):
    id: int | None = None
    uuid: str = ""
    client_id: int
    user_id: int = 0
    month: int = Field(ge=0, le=11)  # zero-based, 0 = January
    year: int
    total_quantity: Decimal = Decimal("0")  # liters
    total_amount: int = 0  # paise
    is_paid: bool = False
    paid_date: datetime | None = None
    due_date: date
    delivery_ids: list[int] = []
    calculation: BillCalculation | None = None
    created_at: datetime | None = None

    @property
    def period_label(self) -> str:
        return format_period(self.month, self.year)

    def is_overdue(self, today: date | None = None) -> bool:
        if self.is_paid:
            return False
        if today is None:
            today = datetime.now(IST).date()
        return today > self.due_date

    def payment_status(self, today: date | None = None) -> str:
        if self.is_paid:
            return "paid"
        if self.is_overdue(today):
            return "overdue"
        return "pending"
