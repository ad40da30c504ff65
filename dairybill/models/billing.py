from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel


class AdjustmentKind(str, Enum):
    LOYALTY_DISCOUNT = "loyalty_discount"
    BULK_DISCOUNT = "bulk_discount"


class Adjustment(BaseModel):
    kind: AdjustmentKind
    description: str
    amount: int  # paise, negative for discounts


class BillCalculation(BaseModel):
    days_in_month: int
    estimated_quantity: Decimal
    actual_quantity: Decimal
    base_amount: int  # paise
    total_amount: int  # paise
    delivery_days: int
    missed_deliveries: int
    adjustments: list[Adjustment] = []

    @property
    def billed_quantity(self) -> Decimal:
        """Actual deliveries when tracked, otherwise the estimate."""
        if self.actual_quantity > 0:
            return self.actual_quantity
        return self.estimated_quantity

    @property
    def adjustment_total(self) -> int:
        return sum(adj.amount for adj in self.adjustments)


class GenerationStatus(str, Enum):
    GENERATED = "generated"
    SKIPPED = "skipped"
    FAILED = "failed"


class BillGenerationResult(BaseModel):
    client_id: int | None
    client_name: str
    status: GenerationStatus
    bill_id: int | None = None
    calculation: BillCalculation | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.status == GenerationStatus.GENERATED


class BillingPolicy(BaseModel):
    """Discount thresholds and due-date rule applied by the calculator."""

    loyalty_discount_percent: Decimal = Decimal("5")
    loyalty_min_months: int = 6
    bulk_discount_percent: Decimal = Decimal("2")
    bulk_min_liters: Decimal = Decimal("100")
    bill_due_day: int = 10

    @classmethod
    def from_settings(cls) -> BillingPolicy:
        from dairybill.settings import settings

        return cls(
            loyalty_discount_percent=settings.loyalty_discount_percent,
            loyalty_min_months=settings.loyalty_min_months,
            bulk_discount_percent=settings.bulk_discount_percent,
            bulk_min_liters=settings.bulk_min_liters,
            bill_due_day=settings.bill_due_day,
        )
