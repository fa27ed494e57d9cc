"""Currency catalog, rate cache and conversion public API."""

from .models import ConversionResult, Currency, ExchangeRateSet
from .symbols import CURRENCY_SYMBOLS, symbol_for
from .catalog import DEFAULT_CURRENCY, CurrencyCatalog
from .converter import CurrencyConverter, convert, resolve_rate
from .cache import ExchangeRateCache, RateCacheState

__all__ = [
    "ConversionResult",
    "Currency",
    "ExchangeRateSet",
    "CURRENCY_SYMBOLS",
    "symbol_for",
    "DEFAULT_CURRENCY",
    "CurrencyCatalog",
    "CurrencyConverter",
    "convert",
    "resolve_rate",
    "ExchangeRateCache",
    "RateCacheState",
]
