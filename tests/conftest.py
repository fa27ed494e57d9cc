"""Pytest configuration and fixtures."""
import asyncio
import tempfile
from pathlib import Path

import pytest
import yaml

from loanfx.config import reset_config
from loanfx.currency.catalog import CurrencyCatalog
from loanfx.currency.models import Currency, ExchangeRateSet
from loanfx.providers.base import BaseCatalogProvider, BaseRateProvider, CatalogEntry, ProviderRates
from loanfx.utils.errors import CatalogFetchFailed, RateFetchFailed


USD_RATES = {"EUR": 0.92, "GBP": 0.79, "JPY": 151.3, "INR": 83.2}
EUR_RATES = {"USD": 1.087, "GBP": 0.858, "JPY": 164.4, "INR": 90.4}


class FakeRateProvider(BaseRateProvider):
    """In-memory rate provider with per-base gates and failures."""

    NAME = "fake"

    def __init__(self, tables=None):
        self.tables = tables if tables is not None else {"USD": USD_RATES, "EUR": EUR_RATES}
        self.gates = {}
        self.failing = set()
        self.calls = []

    def gate(self, base_code: str) -> asyncio.Event:
        """Hold fetches for ``base_code`` until the returned event is set."""
        event = asyncio.Event()
        self.gates[base_code] = event
        return event

    async def fetch(self, base_code: str) -> ProviderRates:
        self.calls.append(base_code)
        gate = self.gates.get(base_code)
        if gate is not None:
            await gate.wait()
        if base_code in self.failing or base_code not in self.tables:
            raise RateFetchFailed(f"provider unavailable for {base_code}")
        return ProviderRates(base_code=base_code, rates=dict(self.tables[base_code]))


class FakeCatalogProvider(BaseCatalogProvider):
    NAME = "fake"

    def __init__(self, entries=None, fail: bool = False):
        self.entries = entries or [
            CatalogEntry("USD", "United States Dollar"),
            CatalogEntry("EUR", "Euro"),
            CatalogEntry("GBP", "Pound Sterling"),
            CatalogEntry("JPY", "Japanese Yen"),
            CatalogEntry("INR", "Indian Rupee"),
        ]
        self.fail = fail

    async def fetch(self):
        if self.fail:
            raise CatalogFetchFailed("catalog unavailable")
        return list(self.entries)


@pytest.fixture
def rate_provider():
    return FakeRateProvider()


@pytest.fixture
def catalog_provider():
    return FakeCatalogProvider()


@pytest.fixture
def catalog():
    return CurrencyCatalog(
        currencies=[
            Currency("USD", "United States Dollar", "$"),
            Currency("EUR", "Euro", "€"),
            Currency("GBP", "Pound Sterling", "£"),
            Currency("JPY", "Japanese Yen", "¥"),
            Currency("INR", "Indian Rupee", "₹"),
        ]
    )


@pytest.fixture
def usd_rates():
    return ExchangeRateSet(base_code="USD", rates=USD_RATES)


@pytest.fixture
def temp_config_file():
    """Create a temporary config file for testing."""
    config_data = {
        'app': {
            'name': 'Test App',
            'version': '0.1.0',
            'debug': True
        },
        'exchange_rate_api': {
            'base_url': 'https://example.test/v6',
            'timeout': 3
        },
        'rates': {
            'provider': 'exchange_rate_api',
            'default_base': 'eur',
            'refresh_interval_seconds': 60
        },
        'calculation': {
            'simulated_latency_seconds': 0
        },
        'logging': {
            'enabled': True,
            'level': 'DEBUG',
            'format': 'text'
        }
    }

    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(config_data, f)
        config_path = f.name

    yield config_path

    Path(config_path).unlink()


@pytest.fixture(autouse=True)
def clear_config():
    """Forget the process configuration around each test."""
    reset_config()
    yield
    reset_config()
