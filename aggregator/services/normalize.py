"""Turn validated upstream payloads into store rows."""
from __future__ import annotations

from typing import Iterable, List, Tuple

from aggregator.core.errors import EmptyResultError, UpstreamValidationError
from aggregator.models import CryptoRecord, NewsRecord, WeatherRecord
from aggregator.schemas import MarketsResponse, NewsResponse, SimplePriceResponse, WeatherResponse

KNOWN_COINS: dict[str, Tuple[str, str]] = {
    "bitcoin": ("Bitcoin", "BTC"),
    "ethereum": ("Ethereum", "ETH"),
    "tether": ("Tether", "USDT"),
    "binancecoin": ("BNB", "BNB"),
    "solana": ("Solana", "SOL"),
    "ripple": ("XRP", "XRP"),
    "usd-coin": ("USDC", "USDC"),
    "cardano": ("Cardano", "ADA"),
    "dogecoin": ("Dogecoin", "DOGE"),
    "tron": ("TRON", "TRX"),
}


def coin_identity(coin_id: str) -> Tuple[str, str]:
    if coin_id in KNOWN_COINS:
        return KNOWN_COINS[coin_id]
    return coin_id.replace("-", " ").title(), coin_id.upper()


def crypto_from_simple(payload: SimplePriceResponse, coin_ids: Iterable[str]) -> List[CryptoRecord]:
    rows: List[CryptoRecord] = []
    for coin_id in coin_ids:
        price = payload.get(coin_id)
        if price is None:
            raise UpstreamValidationError("SimplePriceResponse", f"missing coin '{coin_id}'")
        name, symbol = coin_identity(coin_id)
        rows.append(CryptoRecord(name=name, symbol=symbol, price=price.usd, market_cap=price.usd_market_cap))
    return rows


def crypto_from_markets(payload: MarketsResponse) -> List[CryptoRecord]:
    return [
        CryptoRecord(
            name=coin.name,
            symbol=coin.symbol.upper(),
            price=coin.current_price,
            market_cap=coin.market_cap,
            price_change_24h=coin.price_change_percentage_24h,
            volume_24h=coin.total_volume if coin.total_volume is not None else 0.0,
            sparkline_7d=coin.sparkline,
        )
        for coin in payload
    ]


def weather_from_response(city: str, payload: WeatherResponse) -> WeatherRecord:
    condition = payload.condition
    if not condition:
        raise EmptyResultError(f"No weather condition returned for {city}")
    return WeatherRecord(
        city=city,
        temperature=payload.main.temp,
        condition=condition,
        humidity=payload.main.humidity,
        wind_speed=payload.wind_speed,
    )


def news_from_response(payload: NewsResponse, limit: int) -> List[NewsRecord]:
    if not payload.articles:
        raise EmptyResultError("No news articles returned")
    return [
        NewsRecord(title=a.title, source=a.source.name, url=str(a.url))
        for a in payload.articles[:limit]
    ]
