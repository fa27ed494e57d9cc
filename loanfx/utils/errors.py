"""Custom exception classes for loanfx."""
from typing import Optional


class LoanFxError(Exception):
    """Base exception for all loanfx errors."""
    pass


class ConfigurationError(LoanFxError):
    """Raised when there's a configuration error."""
    pass


class ValidationError(LoanFxError):
    """Raised when data validation fails."""
    pass


class InvalidLoanInput(ValidationError):
    """Raised when loan parameters are out of range."""
    pass


class RateUnavailable(LoanFxError):
    """Raised when no usable exchange rate exists for a conversion."""
    pass


class UnknownCurrency(RateUnavailable):
    """Raised when a currency code is not known to the catalog or rate set."""

    def __init__(self, code: str, message: Optional[str] = None):
        self.code = code
        super().__init__(message or f"Unknown currency: {code}")


class ProviderError(LoanFxError):
    """Base exception for data provider errors."""
    pass


class RateFetchFailed(ProviderError):
    """Raised when an exchange rate fetch fails."""
    pass


class CatalogFetchFailed(ProviderError):
    """Raised when the currency catalog fetch fails."""
    pass
