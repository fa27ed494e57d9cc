"""Exchange rate cache with generation-checked refreshes."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from typing import Optional, Set

from loanfx.currency.catalog import CurrencyCatalog
from loanfx.currency.models import ExchangeRateSet
from loanfx.providers.base import BaseRateProvider
from loanfx.utils.errors import ProviderError, RateFetchFailed, UnknownCurrency, ValidationError
from loanfx.utils.generation import GenerationCounter
from loanfx.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_REFRESH_INTERVAL = 3600.0


@dataclass(frozen=True)
class RateCacheState:
    """Everything a reader can observe about the cache, as one value."""

    base_code: str
    rates: Optional[ExchangeRateSet] = None
    loading: bool = False
    error: Optional[RateFetchFailed] = None
    generation: int = 0


class ExchangeRateCache:
    """
    Holds the active base currency and the last rate set fetched for it.

    Every fetch is tagged with a generation token. Only a response carrying
    the current token is applied; anything older was superseded by a later
    base-currency change or refresh and is dropped. A failed fetch records
    the error but keeps the last good rate set readable.

    Usage:
        async with ExchangeRateCache(provider, catalog) as cache:
            cache.set_base_currency("EUR")
            ...
    """

    def __init__(
        self,
        provider: BaseRateProvider,
        catalog: CurrencyCatalog,
        base_code: str = "USD",
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
    ):
        if refresh_interval <= 0:
            raise ValueError("refresh_interval must be positive")
        self.provider = provider
        self.catalog = catalog
        self.refresh_interval = refresh_interval
        self._generations = GenerationCounter()
        self._state = RateCacheState(base_code=base_code.strip().upper())
        self._fetches: Set[asyncio.Task] = set()
        self._refresh_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> RateCacheState:
        return self._state

    @property
    def base_code(self) -> str:
        return self._state.base_code

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[RateFetchFailed]:
        return self._state.error

    @property
    def generation(self) -> int:
        return self._state.generation

    @property
    def is_running(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    def get_rates(self) -> Optional[ExchangeRateSet]:
        return self._state.rates

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def set_base_currency(self, code: str) -> asyncio.Task:
        """Switch the pivot currency and fetch its rates.

        Raises:
            UnknownCurrency: If ``code`` is not in the catalog. Nothing changes.
        """
        if code not in self.catalog:
            raise UnknownCurrency(str(code).strip().upper())
        return self._request(code.strip().upper())

    def refresh(self) -> asyncio.Task:
        """Re-fetch rates for the current base currency."""
        return self._request(self._state.base_code)

    def _request(self, base_code: str) -> asyncio.Task:
        token = self._generations.next()
        self._state = replace(self._state, base_code=base_code, loading=True, generation=token)
        logger.debug(
            f"Requesting {base_code} rates (generation {token})",
            extra={"generation": token, "base_code": base_code},
        )
        task = asyncio.get_running_loop().create_task(self._fetch(token, base_code))
        self._fetches.add(task)
        task.add_done_callback(self._fetches.discard)
        return task

    async def _fetch(self, token: int, base_code: str) -> None:
        try:
            payload = await self.provider.fetch(base_code)
            rate_set = ExchangeRateSet(
                base_code=payload.base_code,
                rates=payload.rates,
                provider_updated_at=payload.updated_at,
            )
            if rate_set.base_code != base_code:
                raise RateFetchFailed(f"Requested {base_code} rates but received {rate_set.base_code}")
        except (ProviderError, ValidationError) as e:
            self._apply_failure(token, base_code, e)
            return
        except Exception as e:
            logger.exception(f"Unexpected error from {type(self.provider).__name__} for {base_code}")
            self._apply_failure(token, base_code, e)
            return

        if not self._generations.is_current(token):
            logger.debug(
                f"Discarding superseded {base_code} rates (generation {token})",
                extra={"generation": token, "base_code": base_code},
            )
            return

        self._state = RateCacheState(
            base_code=base_code,
            rates=rate_set,
            loading=False,
            error=None,
            generation=token,
        )
        logger.info(
            f"Loaded {len(rate_set.rates)} rates for {base_code}",
            extra={"generation": token, "base_code": base_code},
        )

    def _apply_failure(self, token: int, base_code: str, exc: Exception) -> None:
        if not self._generations.is_current(token):
            logger.debug(
                f"Discarding superseded {base_code} failure (generation {token}): {exc}",
                extra={"generation": token, "base_code": base_code},
            )
            return

        error = exc if isinstance(exc, RateFetchFailed) else RateFetchFailed(
            f"Failed to fetch exchange rates for {base_code}: {exc}"
        )
        self._state = replace(self._state, loading=False, error=error)
        logger.warning(
            f"Rate fetch for {base_code} failed; keeping previous rates: {error}",
            extra={"generation": token, "base_code": base_code},
        )

    async def wait(self) -> RateCacheState:
        """Wait until no fetch is in flight and return the resulting state."""
        while True:
            pending = [t for t in self._fetches if not t.done()]
            if not pending:
                return self._state
            await asyncio.gather(*pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Fetch now and keep refreshing every ``refresh_interval`` seconds."""
        if self.is_running:
            return
        self.refresh()
        self._refresh_task = asyncio.get_running_loop().create_task(self._refresh_loop())
        logger.info(f"Rate refresh scheduled every {self.refresh_interval}s")

    async def _refresh_loop(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval)
            self.refresh()

    async def stop(self) -> None:
        """Cancel the refresh timer and any in-flight fetch."""
        tasks = list(self._fetches)
        if self._refresh_task is not None:
            tasks.append(self._refresh_task)
            self._refresh_task = None
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if self._state.loading:
            self._state = replace(self._state, loading=False)

    async def __aenter__(self) -> "ExchangeRateCache":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
