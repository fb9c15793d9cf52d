from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from gold.exceptions import InvalidGoldQuantity
from gold.models.base import (
    AMOUNT_DECIMAL_PLACES,
    AMOUNT_MAX_DIGITS,
    QUANTITY_DECIMAL_PLACES,
    QUANTITY_MAX_DIGITS,
)

QUANTUM = Decimal(1).scaleb(-QUANTITY_DECIMAL_PLACES)
AMOUNT_QUANTUM = Decimal(1).scaleb(-AMOUNT_DECIMAL_PLACES)


def to_quantity(value) -> Decimal:
    """
    Parse a caller-supplied gold quantity into a 4-place Decimal.

    Floats go through ``str`` so 0.1 stays 0.1. Values are never rounded:
    anything that is not a finite number, carries more than 4 significant
    decimal places, or does not fit the quantity column raises
    InvalidGoldQuantity.
    """
    return _to_decimal(
        value,
        QUANTITY_MAX_DIGITS,
        QUANTITY_DECIMAL_PLACES,
        lambda: InvalidGoldQuantity("Invalid gold quantity"),
    )


def to_amount(value, error) -> Decimal:
    """Same parsing rules as to_quantity, bounded by the amount column."""
    return _to_decimal(value, AMOUNT_MAX_DIGITS, AMOUNT_DECIMAL_PLACES, error)


def compute_amount(quantity: Decimal, unit_price: Decimal) -> Decimal:
    """
    Value of ``quantity`` at ``unit_price``, rounded half-up to 4 places.

    An amount that does not fit the amount column raises InvalidGoldQuantity.
    """
    try:
        amount = (quantity * unit_price).quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidGoldQuantity("Converted amount is too large")
    if amount.copy_abs() >= Decimal(10) ** (AMOUNT_MAX_DIGITS - AMOUNT_DECIMAL_PLACES):
        raise InvalidGoldQuantity("Converted amount is too large")
    return amount


def _to_decimal(value, max_digits, decimal_places, error) -> Decimal:
    if isinstance(value, bool):
        raise error()
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
        if not number.is_finite():
            raise error()
        normalized = number.quantize(Decimal(1).scaleb(-decimal_places))
    except (InvalidOperation, TypeError, ValueError):
        raise error()

    if normalized != number:
        raise error()
    if normalized.copy_abs() >= Decimal(10) ** (max_digits - decimal_places):
        raise error()
    return normalized
