"""Provider base classes and data contracts for currency data providers."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


@dataclass(frozen=True)
class CatalogEntry:
    """One currency as listed by a catalog provider."""

    code: str
    name: str


@dataclass
class ProviderRates:
    """Normalized rate payload for one base currency.

    ``rates`` maps code -> units per one unit of ``base_code``; every value
    must be > 0. Validation happens when the cache builds its rate set.
    """

    base_code: str
    rates: Dict[str, float] = field(default_factory=dict)
    updated_at: Optional[datetime] = None  # provider's own last-update time


class BaseCatalogProvider(ABC):
    """Source of the list of supported currencies."""

    NAME: str = "base"

    @abstractmethod
    async def fetch(self) -> List[CatalogEntry]:
        """Return every supported currency. Raise ProviderError on failure."""


class BaseRateProvider(ABC):
    """Source of exchange rates keyed by a base currency."""

    NAME: str = "base"

    @abstractmethod
    async def fetch(self, base_code: str) -> ProviderRates:
        """Return rates for ``base_code``. Raise ProviderError on failure."""
