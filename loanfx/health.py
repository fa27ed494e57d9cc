"""Health snapshot of the currency side of a session."""
from datetime import datetime, timezone
from typing import Any, Dict

from loanfx.currency.cache import ExchangeRateCache
from loanfx.currency.catalog import CurrencyCatalog
from loanfx.session import LoanFxSession


class HealthStatus:
    """Health check status."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


def rates_health(cache: ExchangeRateCache) -> Dict[str, Any]:
    """Classify the rate cache.

    Stale-but-present rates (failed refresh, or a refresh still loading for a
    different base) are degraded rather than unhealthy: conversions still work.
    """
    state = cache.state
    rates = state.rates

    if rates is None:
        if state.loading:
            message = f"Loading {state.base_code} rates"
        elif state.error is not None:
            message = f"No rates available: {state.error}"
        else:
            message = "No rates fetched yet"
        return {"status": HealthStatus.UNHEALTHY, "message": message}

    details = {
        "base_code": rates.base_code,
        "fetched_at": rates.fetched_at.isoformat(),
        "rate_count": len(rates.rates),
    }
    if state.error is not None:
        return {
            "status": HealthStatus.DEGRADED,
            "message": f"Serving last good rates; refresh failed: {state.error}",
            **details,
        }
    if rates.base_code != state.base_code:
        return {
            "status": HealthStatus.DEGRADED,
            "message": f"Serving {rates.base_code} rates while {state.base_code} loads",
            **details,
        }
    return {"status": HealthStatus.HEALTHY, "message": "Rates current", **details}


def catalog_health(catalog: CurrencyCatalog) -> Dict[str, Any]:
    if catalog.error is not None:
        return {
            "status": HealthStatus.DEGRADED,
            "message": f"Catalog fetch failed; {len(catalog)} currencies known: {catalog.error}",
        }
    return {"status": HealthStatus.HEALTHY, "message": f"{len(catalog)} currencies known"}


def get_health_status(session: LoanFxSession) -> Dict[str, Any]:
    """
    Get overall session health.

    Returns:
        Dict containing overall status and component statuses
    """
    components = {
        "catalog": catalog_health(session.catalog),
        "rates": rates_health(session.rates),
    }
    statuses = [c["status"] for c in components.values()]

    if all(s == HealthStatus.HEALTHY for s in statuses):
        overall_status = HealthStatus.HEALTHY
    elif any(s == HealthStatus.UNHEALTHY for s in statuses):
        overall_status = HealthStatus.UNHEALTHY
    else:
        overall_status = HealthStatus.DEGRADED

    return {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": components,
    }
