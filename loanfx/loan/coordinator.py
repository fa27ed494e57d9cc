"""Async request coordinator around the amortization engine."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Optional, Set, Union

from loanfx.loan.engine import compute
from loanfx.loan.models import LoanCalculationResult, LoanDetails
from loanfx.utils.errors import InvalidLoanInput
from loanfx.utils.generation import GenerationCounter
from loanfx.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Idle:
    generation: int = 0


@dataclass(frozen=True)
class Calculating:
    generation: int
    loan: LoanDetails


@dataclass(frozen=True)
class Ready:
    generation: int
    result: LoanCalculationResult


@dataclass(frozen=True)
class Failed:
    generation: int
    error: Exception


CalculationState = Union[Idle, Calculating, Ready, Failed]


class CalculationRequestCoordinator:
    """Runs calculations off the caller's path and publishes the latest one.

    Every ``calculate()`` call gets a new generation token. When a dispatch
    finishes, its outcome is applied only if that token is still current, so
    a slow earlier request can never overwrite a later one.
    """

    def __init__(
        self,
        latency: float = 0.0,
        engine: Callable[[LoanDetails], LoanCalculationResult] = compute,
    ):
        self.latency = latency
        self._engine = engine
        self._generations = GenerationCounter()
        self._state: CalculationState = Idle()
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> CalculationState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generations.current

    @property
    def is_calculating(self) -> bool:
        return isinstance(self._state, Calculating)

    @property
    def result(self) -> Optional[LoanCalculationResult]:
        return self._state.result if isinstance(self._state, Ready) else None

    @property
    def error(self) -> Optional[Exception]:
        return self._state.error if isinstance(self._state, Failed) else None

    def calculate(self, loan: LoanDetails) -> asyncio.Task:
        """Supersede any pending request and dispatch ``loan``.

        Must be called from within a running event loop.
        """
        token = self._generations.next()
        self._state = Calculating(generation=token, loan=loan)
        task = asyncio.get_running_loop().create_task(self._dispatch(token, loan))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _dispatch(self, token: int, loan: LoanDetails) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)

        try:
            outcome: CalculationState = Ready(generation=token, result=self._engine(loan))
        except InvalidLoanInput as e:
            outcome = Failed(generation=token, error=e)
        except Exception as e:
            logger.exception(f"Calculation {token} crashed", extra={"generation": token, "error": str(e)})
            outcome = Failed(generation=token, error=e)

        if not self._generations.is_current(token):
            logger.debug(
                f"Discarding superseded calculation {token}",
                extra={"generation": token},
            )
            return

        self._state = outcome
        if isinstance(outcome, Failed):
            logger.info(f"Calculation {token} rejected: {outcome.error}", extra={"generation": token})
        else:
            logger.debug(f"Calculation {token} ready", extra={"generation": token})

    async def wait(self) -> CalculationState:
        """Wait for every outstanding dispatch and return the final state."""
        while True:
            pending = [t for t in self._tasks if not t.done()]
            if not pending:
                return self._state
            await asyncio.gather(*pending, return_exceptions=True)

    async def close(self) -> None:
        """Cancel outstanding dispatches. A pending Calculating state drops back to Idle."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if isinstance(self._state, Calculating):
            self._state = Idle(generation=self._generations.current)
