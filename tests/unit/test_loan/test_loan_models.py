"""Tests for loan data models."""
import dataclasses

import pytest

from loanfx.loan.engine import compute
from loanfx.loan.models import LoanDetails


def test_loan_details_immutable():
    loan = LoanDetails(1000, 5, 12)
    with pytest.raises(dataclasses.FrozenInstanceError):
        loan.principal = 2000


def test_to_records_mirrors_schedule():
    result = compute(LoanDetails(1000, 5, 12))
    records = result.to_records()
    assert len(records) == 12
    assert records[0]["payment_number"] == 1
    assert records[-1]["remaining_balance"] == result.schedule[-1].remaining_balance


def test_to_frame_indexed_by_payment_number():
    result = compute(LoanDetails(5000, 7.25, 24))
    df = result.to_frame()
    assert list(df.columns) == ["payment_amount", "principal_paid", "interest_paid", "remaining_balance"]
    assert df.index.name == "payment_number"
    assert df.index[0] == 1 and df.index[-1] == 24
    assert df["principal_paid"].sum() == pytest.approx(5000)
    assert df["interest_paid"].sum() == pytest.approx(result.total_interest)
