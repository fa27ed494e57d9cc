"""Provider factory and exports."""

from typing import Optional

from loanfx.config import Config

from .base import BaseCatalogProvider, BaseRateProvider, CatalogEntry, ProviderRates
from .exchange_rate_api import ExchangeRateApiCatalogProvider, ExchangeRateApiRateProvider


def get_rate_provider(provider_name: str, config: Optional[Config] = None) -> BaseRateProvider:
    """Get rate provider by canonical name.

    Canonical names:
    - "exchange_rate_api"
    """
    if provider_name == "exchange_rate_api":
        return ExchangeRateApiRateProvider(config=config)
    raise ValueError(f"Unknown provider: {provider_name}")


def get_catalog_provider(provider_name: str, config: Optional[Config] = None) -> BaseCatalogProvider:
    """Get currency catalog provider by canonical name."""
    if provider_name == "exchange_rate_api":
        return ExchangeRateApiCatalogProvider(config=config)
    raise ValueError(f"Unknown provider: {provider_name}")


__all__ = [
    "BaseCatalogProvider",
    "BaseRateProvider",
    "CatalogEntry",
    "ProviderRates",
    "ExchangeRateApiCatalogProvider",
    "ExchangeRateApiRateProvider",
    "get_catalog_provider",
    "get_rate_provider",
]
