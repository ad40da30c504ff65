from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel


class Delivery(BaseModel):
    id: int | None = None
    client_id: int
    date: date
    quantity: Decimal = Decimal("0")  # liters
    is_delivered: bool = False
    notes: str = ""
    created_at: datetime | None = None
