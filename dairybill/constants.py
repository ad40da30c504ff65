from datetime import datetime
from zoneinfo import ZoneInfo

from dairybill.models.billing import AdjustmentKind
from dairybill.models.payment import PaymentMethod

IST = ZoneInfo("Asia/Kolkata")

# Bills store months zero-based (0 = January).
MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

ADJUSTMENT_LABELS = {
    AdjustmentKind.LOYALTY_DISCOUNT: "Loyalty",
    AdjustmentKind.BULK_DISCOUNT: "Bulk",
}

PAYMENT_METHOD_LABELS = {
    PaymentMethod.CASH: "Cash",
    PaymentMethod.UPI: "UPI",
    PaymentMethod.BANK_TRANSFER: "Bank Transfer",
    PaymentMethod.CHEQUE: "Cheque",
    PaymentMethod.RAZORPAY: "Razorpay",
}


def format_period(month: int, year: int) -> str:
    if not 0 <= month <= 11:
        return f"{month}/{year}"
    return f"{MONTH_NAMES[month]} {year}"


def format_period_short(month: int, year: int) -> str:
    """Short label used by trend reports: 'Mar 2025'."""
    if not 0 <= month <= 11:
        return f"{month}/{year}"
    return f"{MONTH_NAMES[month][:3]} {year}"


def as_ist(value: datetime) -> datetime:
    """Attach India time to a naive datetime; aware values pass through."""
    if value.tzinfo is None:
        return value.replace(tzinfo=IST)
    return value
