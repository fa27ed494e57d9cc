"""
Data models for currencies, rate sets and conversions.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from loanfx.utils.errors import UnknownCurrency, ValidationError
from loanfx.utils.logging import get_logger
from loanfx.utils.validation import normalize_currency_code, validate_rate

logger = get_logger(__name__)


@dataclass(frozen=True)
class Currency:
    code: str  # ISO 4217, unique key
    name: str
    symbol: str

    def __str__(self) -> str:
        return f"{self.code} ({self.name})"


@dataclass(frozen=True)
class ExchangeRateSet:
    """
    Rates fetched for one pivot currency.

    ``rates[code]`` is how many units of ``code`` one unit of ``base_code``
    buys. The pivot always maps to 1.0 whether or not the provider listed it.
    Instances are never edited; a refresh builds a new one.
    """
    base_code: str
    rates: Mapping[str, float]
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    provider_updated_at: Optional[datetime] = None

    def __post_init__(self):
        base = normalize_currency_code(self.base_code)
        cleaned = {}
        for code, rate in dict(self.rates).items():
            try:
                key = normalize_currency_code(code)
            except ValidationError as e:
                logger.warning(f"Skipping rate with bad currency code in {base} set: {e}")
                continue
            cleaned[key] = validate_rate(key, rate)
        cleaned[base] = 1.0
        object.__setattr__(self, "base_code", base)
        object.__setattr__(self, "rates", MappingProxyType(cleaned))

    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(sorted(self.rates))

    def __contains__(self, code: str) -> bool:
        return isinstance(code, str) and code.strip().upper() in self.rates

    def rate_for(self, code: str) -> float:
        """Rate of ``code`` against the pivot.

        Raises:
            UnknownCurrency: If the set has no rate for ``code``
        """
        key = code.strip().upper() if isinstance(code, str) else code
        try:
            return self.rates[key]
        except KeyError:
            raise UnknownCurrency(
                key, f"No rate for {key} in rate set based on {self.base_code}"
            ) from None

    def __str__(self) -> str:
        return f"{self.base_code}: {len(self.rates)} rates @ {self.fetched_at.isoformat()}"


@dataclass(frozen=True)
class ConversionResult:
    amount: float
    from_code: str
    to_code: str
    rate: float  # units of to_code per unit of from_code
    converted_amount: float  # full precision; rounding belongs to the consumer

    def __str__(self) -> str:
        return f"{self.amount} {self.from_code} = {self.converted_amount} {self.to_code} @ {self.rate}"
