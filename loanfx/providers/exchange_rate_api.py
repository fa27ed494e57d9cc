"""ExchangeRate-API (v6) provider implementation."""
from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from loanfx.config import Config, get_config
from loanfx.providers.base import BaseCatalogProvider, BaseRateProvider, CatalogEntry, ProviderRates
from loanfx.utils.decorators import log_execution
from loanfx.utils.errors import CatalogFetchFailed, ConfigurationError, RateFetchFailed, ValidationError
from loanfx.utils.logging import get_logger
from loanfx.utils.validation import normalize_currency_code


logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://v6.exchangerate-api.com/v6"
DEFAULT_TIMEOUT = 10.0


class ExchangeRateApiClient:
    """Shared HTTP plumbing for the catalog and rate endpoints."""

    NAME = "exchange_rate_api"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        config: Optional[Config] = None,
    ) -> None:
        if config is None:
            try:
                config = get_config()
            except ConfigurationError:
                config = None
        cfg_get = config.get if config is not None else (lambda key, default=None: default)

        self.base_url: str = (base_url or cfg_get("exchange_rate_api.base_url", DEFAULT_BASE_URL)).rstrip("/")
        self.timeout: float = float(timeout if timeout is not None else cfg_get("exchange_rate_api.timeout", DEFAULT_TIMEOUT))
        self.api_key: str = api_key if api_key is not None else os.getenv("EXCHANGE_RATE_API_KEY", "")

    async def _get(self, path: str, error_cls: type) -> Dict[str, Any]:
        if not self.api_key:
            raise error_cls("EXCHANGE_RATE_API_KEY is not set")

        url = f"{self.base_url}/{self.api_key}/{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(url)
                resp.raise_for_status()
                data = resp.json() or {}
        except httpx.HTTPError as e:
            message = str(e).replace(self.api_key, "***")
            logger.error(f"ExchangeRate-API request to /{path} failed: {message}")
            raise error_cls(f"Request failed: {message}") from e
        except ValueError as e:
            logger.error(f"ExchangeRate-API returned invalid JSON for /{path}: {e}")
            raise error_cls("Invalid response from ExchangeRate-API") from e

        if not isinstance(data, dict):
            logger.error(f"ExchangeRate-API returned a non-object body for /{path}")
            raise error_cls("Invalid response from ExchangeRate-API")

        if data.get("result") != "success":
            error_type = data.get("error-type", "unknown")
            logger.error(f"ExchangeRate-API error for /{path}: {error_type}")
            raise error_cls(f"API error: {error_type}")
        return data


class ExchangeRateApiCatalogProvider(ExchangeRateApiClient, BaseCatalogProvider):
    """Currency list from the ``/codes`` endpoint."""

    @log_execution(log_args=False)
    async def fetch(self) -> List[CatalogEntry]:
        data = await self._get("codes", CatalogFetchFailed)
        try:
            entries = [
                CatalogEntry(code=str(code).upper(), name=str(name))
                for code, name in data.get("supported_codes") or []
            ]
        except (TypeError, ValueError) as e:
            raise CatalogFetchFailed("Malformed supported_codes in ExchangeRate-API response") from e
        if not entries:
            raise CatalogFetchFailed("ExchangeRate-API returned no currencies")
        return entries


class ExchangeRateApiRateProvider(ExchangeRateApiClient, BaseRateProvider):
    """Latest rates from the ``/latest/{BASE}`` endpoint."""

    @log_execution(log_args=True)
    async def fetch(self, base_code: str) -> ProviderRates:
        try:
            base_code = normalize_currency_code(base_code)
        except ValidationError as e:
            raise RateFetchFailed(str(e)) from e

        data = await self._get(f"latest/{base_code}", RateFetchFailed)

        rates = data.get("conversion_rates")
        if not isinstance(rates, dict) or not rates:
            logger.error(f"ExchangeRate-API response missing conversion_rates for {base_code}")
            raise RateFetchFailed(f"No rates found for {base_code} in response")

        returned_base = str(data.get("base_code", base_code)).upper()
        if returned_base != base_code:
            raise RateFetchFailed(f"Requested {base_code} rates but received {returned_base}")

        ts = data.get("time_last_update_unix")
        updated_at = datetime.fromtimestamp(ts, timezone.utc) if ts else None

        return ProviderRates(base_code=base_code, rates=dict(rates), updated_at=updated_at)
