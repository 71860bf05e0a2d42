"""Structural validators for the three upstream payloads.

CoinGecko (``/simple/price`` or ``/coins/markets``), OpenWeather
(``/weather``) and NewsAPI (``/top-headlines``).
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, RootModel, ValidationError, field_validator

from aggregator.core.errors import UpstreamValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class _Upstream(BaseModel):
    model_config = ConfigDict(extra="ignore")


# CoinGecko ------------------------------------------------------------------

class SimplePrice(_Upstream):
    usd: float = Field(ge=0)
    usd_market_cap: float = Field(ge=0)


class SimplePriceResponse(RootModel[Dict[str, SimplePrice]]):
    """``{"bitcoin": {"usd": ..., "usd_market_cap": ...}, ...}``"""

    def get(self, coin_id: str) -> Optional[SimplePrice]:
        return self.root.get(coin_id)


class Sparkline(_Upstream):
    price: List[float] = Field(default_factory=list)


class MarketCoin(_Upstream):
    id: str
    name: str
    symbol: str
    current_price: float = Field(ge=0)
    market_cap: float = Field(ge=0)
    total_volume: Optional[float] = Field(default=None, ge=0)
    price_change_percentage_24h: Optional[float] = None
    sparkline_in_7d: Optional[Sparkline] = None

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, value: str) -> str:
        return value.upper()

    @property
    def sparkline(self) -> List[float]:
        return list(self.sparkline_in_7d.price) if self.sparkline_in_7d else []


class MarketsResponse(RootModel[List[MarketCoin]]):
    def __iter__(self):
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)


# OpenWeather ----------------------------------------------------------------

class WeatherMain(_Upstream):
    temp: float
    humidity: Optional[float] = Field(default=None, ge=0, le=100)


class WeatherWind(_Upstream):
    speed: Optional[float] = Field(default=None, ge=0)


class WeatherCondition(_Upstream):
    main: str


class WeatherResponse(_Upstream):
    name: Optional[str] = None
    main: WeatherMain
    wind: Optional[WeatherWind] = None
    # may be empty here; callers decide what an empty list means
    weather: List[WeatherCondition]

    @property
    def condition(self) -> Optional[str]:
        return self.weather[0].main if self.weather else None

    @property
    def wind_speed(self) -> Optional[float]:
        return self.wind.speed if self.wind else None


# NewsAPI --------------------------------------------------------------------

REMOVED_MARKER = "[Removed]"


class NewsSource(_Upstream):
    name: str


class NewsArticle(_Upstream):
    title: str
    source: NewsSource
    url: HttpUrl


class NewsResponse(_Upstream):
    articles: List[NewsArticle]

    @field_validator("articles", mode="before")
    @classmethod
    def _drop_removed(cls, value: Any) -> Any:
        # NewsAPI keeps deleted stories in the list as "[Removed]" placeholders
        if isinstance(value, list):
            return [a for a in value if not (isinstance(a, dict) and a.get("title") == REMOVED_MARKER)]
        return value


def validate_payload(model: Type[ModelT], payload: Any) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise UpstreamValidationError(model.__name__, str(e)) from e
