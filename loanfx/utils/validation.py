"""Input validation utilities."""
import math
from numbers import Real

from loanfx.utils.errors import ValidationError


def normalize_currency_code(code: str) -> str:
    """
    Normalize and validate a 3-letter ISO currency code.

    Args:
        code: Currency code in any case, surrounding whitespace allowed

    Returns:
        Uppercase code

    Raises:
        ValidationError: If the code is not three letters
    """
    if not isinstance(code, str):
        raise ValidationError(f"Invalid currency code: {code!r}")
    normalized = code.strip().upper()
    if len(normalized) != 3 or not normalized.isalpha():
        raise ValidationError(
            f"Invalid currency code: {code!r}. Expect 3-letter ISO code."
        )
    return normalized


def validate_amount(amount) -> float:
    """
    Validate a conversion amount.

    Zero and negative amounts are accepted; only non-numeric and
    non-finite values are rejected.

    Raises:
        ValidationError: If amount is invalid
    """
    if isinstance(amount, bool) or not isinstance(amount, Real):
        raise ValidationError(f"Amount must be a number, got: {amount!r}")
    amount = float(amount)
    if not math.isfinite(amount):
        raise ValidationError(f"Amount must be finite, got: {amount}")
    return amount


def validate_rate(code: str, rate) -> float:
    """Validate a single exchange rate value (finite and > 0)."""
    if isinstance(rate, bool) or not isinstance(rate, Real):
        raise ValidationError(f"Invalid rate for {code}: {rate!r}")
    rate = float(rate)
    if not math.isfinite(rate) or rate <= 0:
        raise ValidationError(f"Invalid rate for {code}: {rate}")
    return rate
