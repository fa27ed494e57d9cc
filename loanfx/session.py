"""Explicitly owned runtime context for the loan and currency core."""
from __future__ import annotations

from typing import Optional

from loanfx.config import Config
from loanfx.currency.cache import DEFAULT_REFRESH_INTERVAL, ExchangeRateCache
from loanfx.currency.catalog import CurrencyCatalog
from loanfx.currency.converter import CurrencyConverter
from loanfx.loan.coordinator import CalculationRequestCoordinator
from loanfx.providers import get_catalog_provider, get_rate_provider
from loanfx.providers.base import BaseCatalogProvider, BaseRateProvider
from loanfx.utils.logging import get_logger

logger = get_logger(__name__)


class LoanFxSession:
    """
    Owns one catalog, one rate cache, one converter and one calculation
    coordinator. Nothing here is module-global; callers create a session,
    start it, and stop it when done.

    Usage:
        async with LoanFxSession.from_config(load_config()) as session:
            session.calculator.calculate(loan)
            session.converter.convert(100, "USD", "EUR")
    """

    def __init__(
        self,
        rate_provider: BaseRateProvider,
        catalog_provider: Optional[BaseCatalogProvider] = None,
        base_code: str = "USD",
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        calculation_latency: float = 0.0,
    ):
        self.catalog = CurrencyCatalog(provider=catalog_provider)
        self.rates = ExchangeRateCache(
            rate_provider,
            self.catalog,
            base_code=base_code,
            refresh_interval=refresh_interval,
        )
        self.converter = CurrencyConverter(self.rates)
        self.calculator = CalculationRequestCoordinator(latency=calculation_latency)
        self._started = False

    @classmethod
    def from_config(cls, config: Config) -> "LoanFxSession":
        provider_name = config.rate_provider
        return cls(
            rate_provider=get_rate_provider(provider_name, config=config),
            catalog_provider=get_catalog_provider(provider_name, config=config),
            base_code=config.default_base,
            refresh_interval=config.refresh_interval,
            calculation_latency=config.simulated_latency,
        )

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Load the catalog, then begin fetching and refreshing rates."""
        if self._started:
            return
        if self.catalog.provider is not None:
            await self.catalog.load()
        self.rates.start()
        self._started = True
        logger.info(f"Session started with base currency {self.rates.base_code}")

    async def stop(self) -> None:
        await self.rates.stop()
        await self.calculator.close()
        self._started = False
        logger.info("Session stopped")

    async def __aenter__(self) -> "LoanFxSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
