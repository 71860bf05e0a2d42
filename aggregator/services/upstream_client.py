from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

import httpx

from aggregator.core.config import Settings, get_settings
from aggregator.core.errors import ConfigurationError, UpstreamError, UpstreamTimeoutError
from aggregator.core.http import build_timeout, get_async_client
from aggregator.core.limits import get_limiter
from aggregator.schemas import (
    MarketsResponse,
    NewsResponse,
    SimplePriceResponse,
    WeatherResponse,
    validate_payload,
)

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Pull the provider's own error text out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        # OpenWeather/NewsAPI: {"message": ...}; CoinGecko: {"error": ...} or {"status": {"error_message": ...}}
        for key in ("message", "error"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
        status = body.get("status")
        if isinstance(status, dict) and status.get("error_message"):
            return str(status["error_message"])
    return f"{response.status_code} {response.reason_phrase}".strip()


class UpstreamClient:
    """Thin async client over CoinGecko, OpenWeather and NewsAPI.

    No retries: a failed call raises and the caller decides what to do.
    """

    def __init__(self, settings: Settings | None = None, http_client: httpx.AsyncClient | None = None):
        self.settings = settings or get_settings()
        self._http_client = http_client
        self._timeout = build_timeout(
            self.settings.http_timeout_seconds,
            self.settings.http_connect_timeout_seconds,
        )

    async def _request_json(self, url: str, *, params: Dict[str, Any], resource: str) -> Any:
        client = self._http_client or await get_async_client()
        limiter = get_limiter(resource)
        try:
            async with limiter:
                response = await client.get(url, params=params, timeout=self._timeout)
        except httpx.TimeoutException as e:
            logger.warning("%s request timed out: %s", resource, url)
            raise UpstreamTimeoutError(f"{resource} API timed out", resource=resource) from e
        except httpx.HTTPError as e:
            logger.warning("%s request failed: %s", resource, e)
            raise UpstreamError(str(e) or e.__class__.__name__, resource=resource) from e

        if response.is_error:
            message = _error_message(response)
            logger.warning("%s API answered %s: %s", resource, response.status_code, message)
            raise UpstreamError(message, resource=resource, status_code=response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"{resource} API returned invalid JSON", resource=resource) from e

    def _require(self, name: str, value: Optional[str]) -> str:
        if not value:
            raise ConfigurationError([name])
        return value

    async def simple_prices(self, coin_ids: Iterable[str]) -> SimplePriceResponse:
        ids = [c.strip().lower() for c in coin_ids if c and c.strip()]
        params = {"ids": ",".join(ids), "vs_currencies": "usd", "include_market_cap": "true"}
        payload = await self._request_json(
            f"{self.settings.coingecko_base_url.rstrip('/')}/simple/price",
            params=params,
            resource="crypto",
        )
        return validate_payload(SimplePriceResponse, payload)

    async def market_coins(self, top_n: int) -> MarketsResponse:
        params = {
            "vs_currency": "usd",
            "order": "market_cap_desc",
            "per_page": top_n,
            "page": 1,
            "sparkline": "true",
            "price_change_percentage": "24h",
        }
        payload = await self._request_json(
            f"{self.settings.coingecko_base_url.rstrip('/')}/coins/markets",
            params=params,
            resource="crypto",
        )
        return validate_payload(MarketsResponse, payload)

    async def current_weather(self, city: str) -> WeatherResponse:
        api_key = self._require("OPENWEATHER_API_KEY", self.settings.openweather_api_key)
        params = {"q": city, "appid": api_key, "units": "metric"}
        payload = await self._request_json(
            f"{self.settings.openweather_base_url.rstrip('/')}/weather",
            params=params,
            resource="weather",
        )
        return validate_payload(WeatherResponse, payload)

    async def top_headlines(self, page_size: int | None = None) -> NewsResponse:
        api_key = self._require("NEWSAPI_API_KEY", self.settings.newsapi_api_key)
        params = {
            "country": self.settings.news_country,
            "pageSize": page_size or self.settings.news_page_size,
            "apiKey": api_key,
        }
        payload = await self._request_json(
            f"{self.settings.newsapi_base_url.rstrip('/')}/top-headlines",
            params=params,
            resource="news",
        )
        return validate_payload(NewsResponse, payload)
