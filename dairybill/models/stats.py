from __future__ import annotations

from pydantic import BaseModel

from dairybill.models.client import Client


class PaymentStats(BaseModel):
    total_bills: int = 0
    paid_bills: int = 0
    unpaid_bills: int = 0
    overdue_bills: int = 0
    total_revenue: int = 0  # paise
    collected_revenue: int = 0
    pending_revenue: int = 0
    average_bill_amount: int = 0
    collection_rate: float = 0.0  # percent


class PeriodStats(BaseModel):
    month: int
    year: int
    label: str
    stats: PaymentStats


class PendingBalance(BaseModel):
    client: Client
    pending_amount: int  # paise
    bills_count: int
