from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings

TWO_PLACES = Decimal("0.01")


def to_money(value) -> Decimal:
    """Decimal rounded half-up to 2 places. None/blank -> 0.00."""
    if value in (None, ""):
        return Decimal("0.00")
    try:
        return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Not a monetary amount: {value!r}") from exc


def format_money(value) -> str:
    amount = to_money(value)
    symbol = getattr(settings, "CURRENCY_SYMBOL", "₹")
    if amount < 0:
        return f"-{symbol}{-amount}"
    return f"{symbol}{amount}"
