"""Monthly bill calculation.

Everything here is pure: callers supply the client, the deliveries and the
current time, and get back a ``BillCalculation`` or an unsaved ``Bill``.
Persistence lives in ``BillingService``.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from dairybill.constants import IST, as_ist
from dairybill.models.bill import Bill
from dairybill.models.billing import Adjustment, AdjustmentKind, BillCalculation, BillingPolicy
from dairybill.models.client import Client
from dairybill.models.delivery import Delivery

DAYS_PER_MONTH = 30


class BillingDataError(ValueError):
    """Client data that cannot produce a valid bill (negative rate or quantity)."""


def to_paise(amount: Decimal) -> int:
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def month_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last calendar day of a zero-based month."""
    if not 0 <= month <= 11:
        raise ValueError(f"Month must be between 0 and 11, got {month}")
    last_day = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, 1), date(year, month + 1, last_day)


def days_in_month(month: int, year: int) -> list[date]:
    start, end = month_bounds(month, year)
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def previous_period(month: int, year: int) -> tuple[int, int]:
    if month == 0:
        return 11, year - 1
    return month - 1, year


def due_date_for(month: int, year: int, due_day: int = 10) -> date:
    """The ``due_day`` of the month after the billed one."""
    if month == 11:
        next_month, next_year = 0, year + 1
    else:
        next_month, next_year = month + 1, year
    last_day = calendar.monthrange(next_year, next_month + 1)[1]
    return date(next_year, next_month + 1, min(due_day, last_day))


def months_as_customer(created_at: datetime | None, now: datetime) -> float:
    """Customer age in 30-day months; 0 when the creation date is unknown."""
    if created_at is None:
        return 0.0
    return (as_ist(now) - as_ist(created_at)).total_seconds() / (DAYS_PER_MONTH * 86400)


def validate_client(client: Client) -> None:
    if client.rate < 0:
        raise BillingDataError(f"Client {client.id} has a negative rate ({client.rate})")
    if client.milk_quantity < 0:
        raise BillingDataError(f"Client {client.id} has a negative milk quantity ({client.milk_quantity})")


def calculate_adjustments(
    client: Client,
    day_count: int,
    now: datetime,
    policy: BillingPolicy,
) -> list[Adjustment]:
    # Both discounts are a share of the estimated baseline; they never compound.
    estimated_quantity = day_count * client.milk_quantity
    baseline = estimated_quantity * client.rate
    adjustments: list[Adjustment] = []

    if months_as_customer(client.created_at, now) > policy.loyalty_min_months:
        percent = policy.loyalty_discount_percent
        adjustments.append(
            Adjustment(
                kind=AdjustmentKind.LOYALTY_DISCOUNT,
                description=f"Loyalty Discount ({percent.normalize():f}%)",
                amount=-to_paise(baseline * percent / 100),
            )
        )

    if estimated_quantity > policy.bulk_min_liters:
        percent = policy.bulk_discount_percent
        adjustments.append(
            Adjustment(
                kind=AdjustmentKind.BULK_DISCOUNT,
                description=f"Bulk Order Discount ({percent.normalize():f}%)",
                amount=-to_paise(baseline * percent / 100),
            )
        )

    return adjustments


def deliveries_in_month(client: Client, deliveries: Iterable[Delivery], month: int, year: int) -> list[Delivery]:
    start, end = month_bounds(month, year)
    return [d for d in deliveries if d.client_id == client.id and start <= d.date <= end]


def calculate_monthly_bill(
    client: Client,
    month: int,
    year: int,
    deliveries: Iterable[Delivery],
    now: datetime | None = None,
    policy: BillingPolicy | None = None,
) -> BillCalculation:
    """Compute the bill breakdown for one client and month.

    ``deliveries`` may contain records for other clients or months; they are
    ignored. When no delivery was marked delivered the estimate is billed.

    Raises:
        BillingDataError: if the client has a negative rate or milk quantity.
    """
    validate_client(client)
    if now is None:
        now = datetime.now(IST)
    if policy is None:
        policy = BillingPolicy()

    day_count = len(days_in_month(month, year))
    delivered = [d for d in deliveries_in_month(client, deliveries, month, year) if d.is_delivered]

    estimated_quantity = day_count * client.milk_quantity
    actual_quantity = sum((d.quantity for d in delivered), Decimal("0"))
    delivery_days = len(delivered)

    adjustments = calculate_adjustments(client, day_count, now, policy)

    billed_quantity = actual_quantity if actual_quantity > 0 else estimated_quantity
    base_amount = to_paise(billed_quantity * client.rate)
    total_amount = max(0, base_amount + sum(adj.amount for adj in adjustments))

    return BillCalculation(
        days_in_month=day_count,
        estimated_quantity=estimated_quantity,
        actual_quantity=actual_quantity,
        base_amount=base_amount,
        total_amount=total_amount,
        delivery_days=delivery_days,
        missed_deliveries=max(0, day_count - delivery_days),
        adjustments=adjustments,
    )


def build_bill(
    client: Client,
    month: int,
    year: int,
    calculation: BillCalculation,
    deliveries: Iterable[Delivery] = (),
    policy: BillingPolicy | None = None,
) -> Bill:
    """Unsaved Bill for a calculation, listing the delivered records it covers."""
    if client.id is None:
        raise ValueError("Cannot build bill for client without an id")
    if policy is None:
        policy = BillingPolicy()
    delivery_ids = [
        d.id for d in deliveries_in_month(client, deliveries, month, year) if d.is_delivered and d.id is not None
    ]
    return Bill(
        client_id=client.id,
        user_id=client.user_id,
        month=month,
        year=year,
        total_quantity=calculation.billed_quantity,
        total_amount=calculation.total_amount,
        is_paid=False,
        due_date=due_date_for(month, year, policy.bill_due_day),
        delivery_ids=delivery_ids,
        calculation=calculation,
    )
