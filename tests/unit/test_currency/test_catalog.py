"""Tests for the currency catalog and symbols."""
import pytest

from loanfx.currency.catalog import DEFAULT_CURRENCY, CurrencyCatalog
from loanfx.currency.symbols import symbol_for
from loanfx.utils.errors import CatalogFetchFailed, UnknownCurrency


def test_default_catalog_has_only_usd():
    catalog = CurrencyCatalog()
    assert catalog.codes == ("USD",)
    assert catalog.get("usd") == DEFAULT_CURRENCY


@pytest.mark.asyncio
async def test_load_replaces_catalog(catalog_provider):
    catalog = CurrencyCatalog(provider=catalog_provider)
    assert await catalog.load() is True
    assert catalog.codes == ("EUR", "GBP", "INR", "JPY", "USD")
    assert catalog.get("EUR").symbol == "€"
    assert catalog.get("INR").name == "Indian Rupee"
    assert catalog.error is None


@pytest.mark.asyncio
async def test_failed_load_keeps_previous_list(catalog_provider):
    catalog = CurrencyCatalog(provider=catalog_provider)
    await catalog.load()

    catalog_provider.fail = True
    assert await catalog.load() is False
    assert isinstance(catalog.error, CatalogFetchFailed)
    assert len(catalog) == 5


@pytest.mark.asyncio
async def test_load_without_provider():
    with pytest.raises(CatalogFetchFailed):
        await CurrencyCatalog().load()


def test_unknown_code_lookup(catalog):
    assert "XXX" not in catalog
    with pytest.raises(UnknownCurrency):
        catalog.get("XXX")


def test_symbol_table_and_fallback():
    assert symbol_for("usd") == "$"
    assert symbol_for("GBP") == "£"
    assert symbol_for("XOF") == "XOF"
