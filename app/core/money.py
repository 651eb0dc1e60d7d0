from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from app.exceptions import InvalidAmountException

CENT = Decimal("0.01")


def to_cents(value: Any) -> int:
    """Convert a decimal amount ("49.90", 49.9, 50) to integer cents."""
    if isinstance(value, bool):
        raise InvalidAmountException(value)
    try:
        amount = Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        raise InvalidAmountException(value)
    if not amount.is_finite():
        raise InvalidAmountException(value)
    return int((amount.quantize(CENT, rounding=ROUND_HALF_UP) * 100).to_integral_value())


def require_positive_cents(amount_cents: Any) -> int:
    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int):
        raise InvalidAmountException(amount_cents)
    if amount_cents <= 0:
        raise InvalidAmountException(amount_cents)
    return amount_cents
