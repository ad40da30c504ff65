from decimal import Decimal, InvalidOperation


def format_inr(paise: int) -> str:
    """Format paise as INR string: 558000 -> '₹5,580.00'"""
    sign = "-" if paise < 0 else ""
    rupees = abs(paise) / 100
    return f"{sign}₹{rupees:,.2f}"


def parse_inr(text: str) -> int | None:
    """Parse a rupee amount string into paise. Returns None on invalid input.

    Accepts formats like '50', '50.00', '₹1,250.50'.
    """
    text = text.strip().replace("₹", "").replace(",", "").strip()
    if not text:
        return None
    try:
        return int((Decimal(text) * 100).quantize(Decimal("1")))
    except InvalidOperation:
        return None


def format_liters(quantity: Decimal) -> str:
    return f"{quantity.normalize():f} L"


def parse_liters(text: str) -> Decimal | None:
    text = text.strip().lower().removesuffix("l").strip()
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value
