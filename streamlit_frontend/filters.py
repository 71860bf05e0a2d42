"""Client-side filtering and formatting of the aggregated payload."""
from __future__ import annotations

import math
from typing import Any, Dict, List, MutableMapping, Optional


def parse_bound(raw: Optional[str]) -> Optional[float]:
    """Turn a text box value into a price bound; blank or junk means no bound."""
    if raw is None:
        return None
    raw = raw.strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return None if math.isnan(value) else value


def filter_crypto_by_price(
    coins: List[Dict[str, Any]],
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
) -> List[Dict[str, Any]]:
    low = 0.0 if min_price is None else min_price
    high = math.inf if max_price is None else max_price
    return [c for c in coins if low <= c.get("price", 0) <= high]


def filter_news_by_keyword(articles: List[Dict[str, Any]], keyword: str) -> List[Dict[str, Any]]:
    needle = (keyword or "").strip().lower()
    if not needle:
        return list(articles)
    return [a for a in articles if needle in (a.get("title") or "").lower()]


def merge_weather(current: List[Dict[str, Any]], fresh: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Replace the entry for ``fresh['city']`` (case-insensitive) and append it last."""
    city = (fresh.get("city") or "").lower()
    kept = [w for w in current if (w.get("city") or "").lower() != city]
    return kept + [fresh]


def format_compact_number(value: Optional[float]) -> str:
    if value is None:
        return "-"
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")):
        if value >= threshold:
            return f"{value / threshold:.2f}{suffix}"
    return f"{value:.2f}"


def format_change(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:+.2f}%"


def sparkline_domain(prices: List[float], padding_ratio: float = 0.1) -> Optional[tuple[float, float]]:
    """Y-axis bounds with some headroom so flat-ish lines stay readable."""
    if not prices:
        return None
    low, high = min(prices), max(prices)
    padding = (high - low) * padding_ratio
    return low - padding, high + padding


def refresh_weather_state(state: MutableMapping[str, Any], payload_weather: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Reset the displayed weather list whenever the gateway payload changes.

    ``state`` is ``st.session_state``; local city lookups survive until the
    next payload carries different weather rows.
    """
    snapshot = list(payload_weather or [])
    if "weather" not in state or state.get("weather_source") != snapshot:
        state["weather_source"] = snapshot
        state["weather"] = list(snapshot)
    return state["weather"]
