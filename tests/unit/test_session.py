"""Tests for the session lifecycle."""
import pytest

from loanfx.config import Config
from loanfx.loan.coordinator import Ready
from loanfx.loan.models import LoanDetails
from loanfx.providers.exchange_rate_api import ExchangeRateApiRateProvider
from loanfx.session import LoanFxSession
from loanfx.utils.errors import UnknownCurrency


@pytest.mark.asyncio
async def test_session_start_loads_catalog_and_rates(rate_provider, catalog_provider):
    async with LoanFxSession(rate_provider, catalog_provider, refresh_interval=60) as session:
        assert session.started
        assert "EUR" in session.catalog
        await session.rates.wait()

        result = session.converter.convert(100, "EUR", "GBP")
        assert result.rate == pytest.approx(0.79 / 0.92)

        session.calculator.calculate(LoanDetails(10000, 8.5, 60))
        state = await session.calculator.wait()
        assert isinstance(state, Ready)

    assert not session.started
    assert not session.rates.is_running


@pytest.mark.asyncio
async def test_base_change_through_session(rate_provider, catalog_provider):
    async with LoanFxSession(rate_provider, catalog_provider) as session:
        await session.rates.set_base_currency("EUR")
        assert session.converter.convert(1, "EUR", "USD").rate == 1.087

        with pytest.raises(UnknownCurrency):
            session.rates.set_base_currency("XXX")
        assert session.rates.base_code == "EUR"


@pytest.mark.asyncio
async def test_unknown_conversion_leaves_state_unchanged(rate_provider, catalog_provider):
    async with LoanFxSession(rate_provider, catalog_provider) as session:
        await session.rates.wait()
        before = session.rates.state
        with pytest.raises(UnknownCurrency):
            session.converter.convert(10, "XXX", "USD")
        assert session.rates.state is before


@pytest.mark.asyncio
async def test_session_without_catalog_provider(rate_provider):
    async with LoanFxSession(rate_provider) as session:
        await session.rates.wait()
        assert session.catalog.codes == ("USD",)
        assert session.rates.get_rates() is not None


def test_from_config(temp_config_file):
    config = Config(temp_config_file, configure_logging=False)
    session = LoanFxSession.from_config(config)
    assert isinstance(session.rates.provider, ExchangeRateApiRateProvider)
    assert session.rates.base_code == "EUR"
    assert session.rates.refresh_interval == 60.0
    assert session.calculator.latency == 0.0
