"""Tests for the calculation request coordinator."""
import asyncio

import pytest

from loanfx.loan.coordinator import CalculationRequestCoordinator, Calculating, Failed, Idle, Ready
from loanfx.loan.engine import compute
from loanfx.loan.models import LoanDetails
from loanfx.utils.errors import InvalidLoanInput


LOAN_A = LoanDetails(10000, 8.5, 60)
LOAN_B = LoanDetails(250000, 5.5, 240)


def test_starts_idle():
    coordinator = CalculationRequestCoordinator()
    assert isinstance(coordinator.state, Idle)
    assert coordinator.result is None
    assert coordinator.error is None
    assert coordinator.is_calculating is False


@pytest.mark.asyncio
async def test_calculate_transitions_to_ready():
    coordinator = CalculationRequestCoordinator(latency=0.01)
    coordinator.calculate(LOAN_A)
    assert isinstance(coordinator.state, Calculating)
    assert coordinator.state.loan == LOAN_A

    state = await coordinator.wait()
    assert isinstance(state, Ready)
    assert state.result == compute(LOAN_A)
    assert coordinator.result.monthly_payment == pytest.approx(205.17, abs=0.01)


@pytest.mark.asyncio
async def test_invalid_loan_transitions_to_failed():
    coordinator = CalculationRequestCoordinator()
    task = coordinator.calculate(LoanDetails(-5, 5, 12))
    await task  # the error never escapes the task

    assert isinstance(coordinator.state, Failed)
    assert isinstance(coordinator.error, InvalidLoanInput)
    assert coordinator.result is None


@pytest.mark.asyncio
async def test_later_request_wins_over_earlier_one():
    coordinator = CalculationRequestCoordinator(latency=0.02)
    first = coordinator.calculate(LOAN_A)
    second = coordinator.calculate(LOAN_B)

    await first
    # A was superseded; its result is never published
    assert coordinator.result in (None, compute(LOAN_B))

    await second
    assert coordinator.result == compute(LOAN_B)
    assert coordinator.state.generation == coordinator.generation == 2


@pytest.mark.asyncio
async def test_slow_superseded_request_cannot_overwrite():
    release_a = asyncio.Event()

    class GatedCoordinator(CalculationRequestCoordinator):
        async def _dispatch(self, token, loan):
            if loan == LOAN_A:
                await release_a.wait()
            await super()._dispatch(token, loan)

    coordinator = GatedCoordinator()
    slow = coordinator.calculate(LOAN_A)
    fast = coordinator.calculate(LOAN_B)

    await fast
    assert coordinator.result == compute(LOAN_B)

    release_a.set()
    await slow
    assert coordinator.result == compute(LOAN_B)


@pytest.mark.asyncio
async def test_superseded_failure_is_not_surfaced():
    coordinator = CalculationRequestCoordinator(latency=0.01)
    coordinator.calculate(LoanDetails(0, 5, 12))
    coordinator.calculate(LOAN_A)

    state = await coordinator.wait()
    assert isinstance(state, Ready)
    assert coordinator.error is None


@pytest.mark.asyncio
async def test_new_result_replaces_previous():
    coordinator = CalculationRequestCoordinator()
    await coordinator.calculate(LOAN_A)
    first = coordinator.result
    await coordinator.calculate(LOAN_B)
    assert coordinator.result is not first
    assert len(coordinator.result.schedule) == 240


@pytest.mark.asyncio
async def test_close_cancels_pending_dispatch():
    coordinator = CalculationRequestCoordinator(latency=10)
    task = coordinator.calculate(LOAN_A)
    await coordinator.close()

    assert task.cancelled()
    assert isinstance(coordinator.state, Idle)
    assert coordinator.result is None


@pytest.mark.asyncio
async def test_unexpected_engine_error_transitions_to_failed():
    def broken_engine(loan):
        raise ZeroDivisionError("float division by zero")

    coordinator = CalculationRequestCoordinator(engine=broken_engine)
    task = coordinator.calculate(LOAN_A)
    await task

    assert task.exception() is None
    assert isinstance(coordinator.state, Failed)
    assert isinstance(coordinator.error, ZeroDivisionError)
    assert coordinator.is_calculating is False


@pytest.mark.asyncio
async def test_recovers_after_unexpected_engine_error():
    calls = []

    def flaky_engine(loan):
        calls.append(loan)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return compute(loan)

    coordinator = CalculationRequestCoordinator(engine=flaky_engine)
    await coordinator.calculate(LOAN_A)
    assert isinstance(coordinator.state, Failed)

    await coordinator.calculate(LOAN_A)
    assert isinstance(coordinator.state, Ready)
    assert coordinator.error is None
