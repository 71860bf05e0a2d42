from .upstream import (
    SimplePriceResponse,
    SimplePrice,
    MarketCoin,
    MarketsResponse,
    WeatherResponse,
    NewsArticle,
    NewsResponse,
    validate_payload,
)
