from decimal import Decimal
from unittest.mock import patch

from dairybill.models.billing import (
    Adjustment,
    AdjustmentKind,
    BillCalculation,
    BillGenerationResult,
    BillingPolicy,
    GenerationStatus,
)


def _calculation(**overrides) -> BillCalculation:
    defaults = dict(
        days_in_month=30,
        estimated_quantity=Decimal("60"),
        actual_quantity=Decimal("0"),
        base_amount=300000,
        total_amount=300000,
        delivery_days=0,
        missed_deliveries=30,
    )
    defaults.update(overrides)
    return BillCalculation(**defaults)


class TestBillCalculation:
    def test_billed_quantity_prefers_actual(self):
        assert _calculation(actual_quantity=Decimal("58")).billed_quantity == Decimal("58")

    def test_billed_quantity_falls_back_to_estimate(self):
        assert _calculation().billed_quantity == Decimal("60")

    def test_adjustment_total(self):
        calc = _calculation(
            adjustments=[
                Adjustment(kind=AdjustmentKind.LOYALTY_DISCOUNT, description="Loyalty", amount=-300),
                Adjustment(kind=AdjustmentKind.BULK_DISCOUNT, description="Bulk", amount=-120),
            ]
        )
        assert calc.adjustment_total == -420

    def test_adjustment_total_empty(self):
        assert _calculation().adjustment_total == 0

    def test_serializes_adjustment_kind(self):
        calc = _calculation(
            adjustments=[Adjustment(kind=AdjustmentKind.BULK_DISCOUNT, description="Bulk", amount=-120)]
        )
        data = calc.model_dump(mode="json")
        assert data["adjustments"][0]["kind"] == "bulk_discount"


class TestBillGenerationResult:
    def test_success_only_when_generated(self):
        assert BillGenerationResult(client_id=1, client_name="A", status=GenerationStatus.GENERATED).success
        assert not BillGenerationResult(client_id=1, client_name="A", status=GenerationStatus.SKIPPED).success
        assert not BillGenerationResult(client_id=1, client_name="A", status=GenerationStatus.FAILED).success


class TestBillingPolicy:
    def test_defaults(self):
        policy = BillingPolicy()
        assert policy.loyalty_discount_percent == Decimal("5")
        assert policy.loyalty_min_months == 6
        assert policy.bulk_discount_percent == Decimal("2")
        assert policy.bulk_min_liters == Decimal("100")
        assert policy.bill_due_day == 10

    def test_from_settings(self):
        with patch("dairybill.settings.settings") as mock_settings:
            mock_settings.loyalty_discount_percent = Decimal("7.5")
            mock_settings.loyalty_min_months = 12
            mock_settings.bulk_discount_percent = Decimal("3")
            mock_settings.bulk_min_liters = Decimal("150")
            mock_settings.bill_due_day = 5
            policy = BillingPolicy.from_settings()

        assert policy.loyalty_discount_percent == Decimal("7.5")
        assert policy.loyalty_min_months == 12
        assert policy.bulk_min_liters == Decimal("150")
        assert policy.bill_due_day == 5
