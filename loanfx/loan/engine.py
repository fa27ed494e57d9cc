"""Loan amortization engine.

Pure functions: no I/O, no shared state, no rounding. Every intermediate
value keeps full float precision so rounding error does not compound over
long schedules.
"""
from __future__ import annotations

import math
from typing import List

from loanfx.loan.models import AmortizationRow, LoanCalculationResult, LoanDetails


def monthly_rate(annual_interest_rate: float) -> float:
    """Convert an annual percentage rate to a monthly decimal rate."""
    return annual_interest_rate / 12 / 100


def monthly_payment(principal: float, annual_interest_rate: float, term_months: int) -> float:
    """Level payment for a fully amortizing loan.

    A zero rate degenerates to straight-line repayment, which also avoids
    the 0/0 in the annuity formula. The growth term is computed as
    expm1(n * log1p(r)) so tiny positive rates keep their precision instead
    of rounding (1 + r) ** n to exactly 1.
    """
    r = monthly_rate(annual_interest_rate)
    if r == 0:
        return principal / term_months
    try:
        growth_minus_one = math.expm1(term_months * math.log1p(r))
    except OverflowError:
        # growth / (growth - 1) -> 1 as growth -> inf
        return principal * r
    return principal * r * (growth_minus_one + 1) / growth_minus_one


def compute(loan: LoanDetails) -> LoanCalculationResult:
    """Build the monthly payment schedule for ``loan``.

    Raises:
        InvalidLoanInput: principal <= 0, rate < 0 or term < 1. Nothing is
            computed when validation fails.
    """
    loan.validate()

    principal = float(loan.principal)
    n = int(loan.term_months)
    r = monthly_rate(float(loan.annual_interest_rate))
    payment = monthly_payment(principal, float(loan.annual_interest_rate), n)

    schedule: List[AmortizationRow] = []
    remaining = principal
    for number in range(1, n + 1):
        interest_paid = remaining * r
        principal_paid = payment - interest_paid
        remaining = max(0.0, remaining - principal_paid)
        schedule.append(
            AmortizationRow(
                payment_number=number,
                payment_amount=payment,
                principal_paid=principal_paid,
                interest_paid=interest_paid,
                remaining_balance=remaining,
            )
        )

    total_payment = payment * n
    return LoanCalculationResult(
        monthly_payment=payment,
        total_payment=total_payment,
        total_interest=total_payment - principal,
        schedule=tuple(schedule),
    )
