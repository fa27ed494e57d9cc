"""Loan amortization and currency conversion core."""

__version__ = "0.1.0"
