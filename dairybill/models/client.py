from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class Client(BaseModel):
    id: int | None = None
    uuid: str = ""
    user_id: int = 0  # owning dairy owner
    name: str
    phone: str = ""
    address: str = ""
    milk_quantity: Decimal = Decimal("0")  # liters per delivery
    rate: int = 0  # paise per liter
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
