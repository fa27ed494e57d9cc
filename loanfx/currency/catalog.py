"""Known-currency catalog loaded from a catalog provider."""
from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from loanfx.currency.models import Currency
from loanfx.currency.symbols import symbol_for
from loanfx.providers.base import BaseCatalogProvider
from loanfx.utils.errors import CatalogFetchFailed, ProviderError, UnknownCurrency
from loanfx.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CURRENCY = Currency(code="USD", name="United States Dollar", symbol="$")


class CurrencyCatalog:
    """
    The set of currency codes the application accepts.

    Starts with only the default currency. ``load()`` swaps in the provider's
    list in one step; a failed load keeps whatever was there before.
    """

    def __init__(
        self,
        provider: Optional[BaseCatalogProvider] = None,
        currencies: Iterable[Currency] = (DEFAULT_CURRENCY,),
    ):
        self.provider = provider
        self._currencies: Dict[str, Currency] = {c.code: c for c in currencies}
        self.error: Optional[CatalogFetchFailed] = None

    @property
    def currencies(self) -> Tuple[Currency, ...]:
        return tuple(self._currencies[code] for code in sorted(self._currencies))

    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(sorted(self._currencies))

    def __contains__(self, code: str) -> bool:
        return isinstance(code, str) and code.strip().upper() in self._currencies

    def __len__(self) -> int:
        return len(self._currencies)

    def get(self, code: str) -> Currency:
        key = code.strip().upper() if isinstance(code, str) else code
        try:
            return self._currencies[key]
        except KeyError:
            raise UnknownCurrency(key) from None

    async def load(self) -> bool:
        """Fetch the catalog once. Returns True when the list was replaced.

        Failures are recorded in ``error`` and never retried here.
        """
        if self.provider is None:
            raise CatalogFetchFailed("No catalog provider configured")

        try:
            entries = await self.provider.fetch()
        except ProviderError as e:
            self.error = e if isinstance(e, CatalogFetchFailed) else CatalogFetchFailed(str(e))
            logger.warning(f"Currency catalog fetch failed, keeping {len(self)} known currencies: {e}")
            return False

        self._currencies = {
            entry.code.upper(): Currency(
                code=entry.code.upper(),
                name=entry.name,
                symbol=symbol_for(entry.code),
            )
            for entry in entries
        }
        self.error = None
        logger.info(f"Loaded {len(self._currencies)} currencies")
        return True
