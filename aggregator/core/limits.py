"""Async throttling for outbound upstream calls."""
from __future__ import annotations

from typing import Dict

from aiolimiter import AsyncLimiter

_DEFAULT_LIMITS: Dict[str, AsyncLimiter] = {}

# requests per minute, sized to each provider's free tier
_RESOURCE_BUDGETS: Dict[str, float] = {
    "crypto": 10,
    "weather": 60,
    "news": 30,
}


def get_limiter(resource: str) -> AsyncLimiter:
    """Return (and cache) a limiter for given resource name."""
    if resource not in _DEFAULT_LIMITS:
        budget = _RESOURCE_BUDGETS.get(resource, 30)
        _DEFAULT_LIMITS[resource] = AsyncLimiter(max_rate=budget, time_period=60)
    return _DEFAULT_LIMITS[resource]
