"""Currency conversion over a pivot-based rate set."""
from __future__ import annotations

from typing import TYPE_CHECKING

from loanfx.currency.models import ConversionResult, ExchangeRateSet
from loanfx.utils.errors import RateUnavailable, UnknownCurrency
from loanfx.utils.validation import validate_amount

if TYPE_CHECKING:
    from loanfx.currency.cache import ExchangeRateCache


def _normalize(code: str) -> str:
    if not isinstance(code, str):
        raise UnknownCurrency(str(code))
    return code.strip().upper()


def resolve_rate(from_code: str, to_code: str, rate_set: ExchangeRateSet) -> float:
    """
    Units of ``to_code`` bought by one unit of ``from_code``.

    Cross rates between two non-pivot codes always go through the pivot:
    from -> pivot -> to.

    Raises:
        UnknownCurrency: If either code is missing from the rate set
    """
    source = _normalize(from_code)
    target = _normalize(to_code)

    # Both lookups happen first so an unknown code never resolves to 1.0
    from_rate = rate_set.rate_for(source)
    to_rate = rate_set.rate_for(target)

    if source == target:
        return 1.0
    if source == rate_set.base_code:
        return to_rate
    if target == rate_set.base_code:
        return 1 / from_rate
    return (1 / from_rate) * to_rate


def convert(amount: float, from_code: str, to_code: str, rate_set: ExchangeRateSet) -> ConversionResult:
    """Convert ``amount`` at full precision."""
    amount = validate_amount(amount)
    rate = resolve_rate(from_code, to_code, rate_set)
    return ConversionResult(
        amount=amount,
        from_code=_normalize(from_code),
        to_code=_normalize(to_code),
        rate=rate,
        converted_amount=amount * rate,
    )


class CurrencyConverter:
    """Converts against whatever rate set an ExchangeRateCache holds right now.

    Read-only with respect to the cache.
    """

    def __init__(self, cache: "ExchangeRateCache"):
        self.cache = cache

    def rate_set(self) -> ExchangeRateSet:
        rates = self.cache.get_rates()
        if rates is None:
            raise RateUnavailable("Exchange rates have not been loaded yet")
        return rates

    def resolve_rate(self, from_code: str, to_code: str) -> float:
        return resolve_rate(from_code, to_code, self.rate_set())

    def convert(self, amount: float, from_code: str, to_code: str) -> ConversionResult:
        return convert(amount, from_code, to_code, self.rate_set())
