from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from numbers import Integral, Real
from typing import Any, Dict, List, Tuple

import pandas as pd

from loanfx.utils.errors import InvalidLoanInput


@dataclass(frozen=True)
class LoanDetails:
    """Input to the amortization engine.

    The interest rate is an annual percentage (8.5 means 8.5%), the term is
    a whole number of monthly payments.
    """

    principal: float
    annual_interest_rate: float
    term_months: int

    def validate(self) -> None:
        for name in ("principal", "annual_interest_rate"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Real):
                raise InvalidLoanInput(f"{name} must be a number, got: {value!r}")
            if not math.isfinite(value):
                raise InvalidLoanInput(f"{name} must be finite, got: {value}")
        if isinstance(self.term_months, bool) or not isinstance(self.term_months, Integral):
            raise InvalidLoanInput(f"term_months must be an integer, got: {self.term_months!r}")

        if self.principal <= 0:
            raise InvalidLoanInput(f"Principal must be positive, got: {self.principal}")
        if self.annual_interest_rate < 0:
            raise InvalidLoanInput(
                f"Interest rate cannot be negative, got: {self.annual_interest_rate}"
            )
        if self.term_months < 1:
            raise InvalidLoanInput(f"Loan term must be at least 1 month, got: {self.term_months}")


@dataclass(frozen=True)
class AmortizationRow:
    payment_number: int  # 1..term_months
    payment_amount: float
    principal_paid: float
    interest_paid: float
    remaining_balance: float  # clamped at 0


@dataclass(frozen=True)
class LoanCalculationResult:
    """Full-precision calculation output; rounding is left to the consumer."""

    monthly_payment: float
    total_payment: float
    total_interest: float
    schedule: Tuple[AmortizationRow, ...] = field(default_factory=tuple)

    @property
    def principal(self) -> float:
        """Sum of principal repaid across the schedule."""
        return math.fsum(row.principal_paid for row in self.schedule)

    def to_records(self) -> List[Dict[str, Any]]:
        return [asdict(row) for row in self.schedule]

    def to_frame(self) -> pd.DataFrame:
        """Schedule as a DataFrame indexed by payment number."""
        columns = [
            "payment_number",
            "payment_amount",
            "principal_paid",
            "interest_paid",
            "remaining_balance",
        ]
        df = pd.DataFrame(self.to_records(), columns=columns)
        return df.set_index("payment_number")
