"""Tests for ExchangeRateSet."""
import logging

import pytest

from loanfx.currency.models import ExchangeRateSet
from loanfx.utils.errors import UnknownCurrency, ValidationError


def test_base_always_maps_to_one():
    rates = ExchangeRateSet(base_code="usd", rates={"EUR": 0.9})
    assert rates.base_code == "USD"
    assert rates.rate_for("USD") == 1.0
    assert "USD" in rates
    assert rates.codes == ("EUR", "USD")


def test_listed_base_rate_is_forced_to_one():
    rates = ExchangeRateSet(base_code="USD", rates={"USD": 1.0000001, "EUR": 0.9})
    assert rates.rate_for("USD") == 1.0


def test_rates_are_read_only():
    rates = ExchangeRateSet(base_code="USD", rates={"EUR": 0.9})
    with pytest.raises(TypeError):
        rates.rates["EUR"] = 2.0


def test_source_mapping_is_copied():
    source = {"EUR": 0.9}
    rates = ExchangeRateSet(base_code="USD", rates=source)
    source["EUR"] = 5.0
    assert rates.rate_for("EUR") == 0.9


@pytest.mark.parametrize("bad", [0, -1.5, float("nan"), float("inf"), "0.9", None])
def test_non_positive_or_invalid_rates_rejected(bad):
    with pytest.raises(ValidationError):
        ExchangeRateSet(base_code="USD", rates={"EUR": bad})


def test_missing_rate_raises_unknown_currency():
    rates = ExchangeRateSet(base_code="USD", rates={"EUR": 0.9})
    with pytest.raises(UnknownCurrency):
        rates.rate_for("GBP")


def test_fetched_at_is_utc():
    rates = ExchangeRateSet(base_code="USD", rates={})
    assert rates.fetched_at.tzinfo is not None


def test_bad_codes_are_skipped_and_good_rates_kept(caplog):
    with caplog.at_level(logging.WARNING):
        rates = ExchangeRateSet(base_code="USD", rates={"EUR": 0.9, "EURO": 0.9, "X1Y": 2.0, "gbp": 0.79})

    assert rates.codes == ("EUR", "GBP", "USD")
    assert "Skipping rate" in caplog.text


def test_invalid_base_code_still_rejected():
    with pytest.raises(ValidationError):
        ExchangeRateSet(base_code="DOLLAR", rates={"EUR": 0.9})
