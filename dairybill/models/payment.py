from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class PaymentMethod(str, Enum):
    CASH = "cash"
    UPI = "upi"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"
    RAZORPAY = "razorpay"


class Payment(BaseModel):
    id: int | None = None
    uuid: str = ""
    bill_id: int
    client_id: int
    amount: int  # paise
    method: PaymentMethod
    transaction_id: str = ""
    notes: str = ""
    paid_at: datetime | None = None
    created_at: datetime | None = None
