"""
Module: payments_kernel.db.types
Responsibility: Helpers for monetary values.
    Centralizes precision and rounding so that every model and service uses
    identical definitions.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    - No floats anywhere in the kernel.  All monetary amounts use Decimal
      with MONEY_DECIMAL_PLACES places.
    - round_money() is the ONLY sanctioned rounding function.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP
ZERO = Decimal("0.00")
# Largest value a Numeric(12, 2) column holds
MAX_MONEY = Decimal("9999999999.99")


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to the currency unit.

    Args:
        value: The Decimal value to round.
        decimal_places: Number of decimal places to round to.
        rounding: Rounding mode (default: ROUND_HALF_UP).

    Returns:
        Rounded Decimal value.
    """
    quantize_str = "0." + "0" * decimal_places
    return value.quantize(Decimal(quantize_str), rounding=rounding)


def money_from_value(value: object) -> Decimal:
    """
    Convert a str/int/Decimal to Decimal without passing through float.

    Floats are converted via their repr, so 200.1 becomes Decimal("200.1")
    rather than its binary expansion.

    Raises:
        ValueError: If value is not numeric (bool is rejected too).
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a monetary value: {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        try:
            return Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Not a monetary value: {value!r}") from None
    raise ValueError(f"Not a monetary value: {value!r}")


def has_money_precision(value: Decimal) -> bool:
    """True if value has no more than MONEY_DECIMAL_PLACES fractional digits."""
    return value == round_money(value)
