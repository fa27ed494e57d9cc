"""Loan amortization public API."""

from .models import AmortizationRow, LoanCalculationResult, LoanDetails
from .engine import compute, monthly_payment, monthly_rate
from .coordinator import (
    CalculationRequestCoordinator,
    CalculationState,
    Calculating,
    Failed,
    Idle,
    Ready,
)

__all__ = [
    "AmortizationRow",
    "LoanCalculationResult",
    "LoanDetails",
    "compute",
    "monthly_payment",
    "monthly_rate",
    "CalculationRequestCoordinator",
    "CalculationState",
    "Calculating",
    "Failed",
    "Idle",
    "Ready",
]
