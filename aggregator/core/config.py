from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    env: str = Field(default="dev", alias="ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    database_url: str = Field(default="sqlite+aiosqlite:///./aggregator.db", alias="DATABASE_URL")

    coingecko_base_url: str = Field(default="https://api.coingecko.com/api/v3", alias="COINGECKO_BASE_URL")
    openweather_base_url: str = Field(default="https://api.openweathermap.org/data/2.5", alias="OPENWEATHER_BASE_URL")
    newsapi_base_url: str = Field(default="https://newsapi.org/v2", alias="NEWSAPI_BASE_URL")
    openweather_api_key: str | None = Field(default=None, alias="OPENWEATHER_API_KEY")
    newsapi_api_key: str | None = Field(default=None, alias="NEWSAPI_API_KEY")

    crypto_mode: Literal["simple", "markets"] = Field(default="markets", alias="CRYPTO_MODE")
    crypto_ids: str = Field(default="bitcoin,ethereum", alias="CRYPTO_IDS")
    crypto_top_n: int = Field(default=10, alias="CRYPTO_TOP_N")
    weather_cities: str = Field(default="Ho Chi Minh,New York,London", alias="WEATHER_CITIES")
    default_city: str = Field(default="Ho Chi Minh", alias="DEFAULT_CITY")
    news_country: str = Field(default="us", alias="NEWS_COUNTRY")
    news_page_size: int = Field(default=12, alias="NEWS_PAGE_SIZE")

    rate_limit_requests: int = Field(default=5, alias="RATE_LIMIT_REQUESTS")
    rate_limit_window_seconds: float = Field(default=60.0, alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_max_keys: int = Field(default=10_000, alias="RATE_LIMIT_MAX_KEYS")

    http_timeout_seconds: float = Field(default=10.0, alias="HTTP_TIMEOUT_SECONDS")
    http_connect_timeout_seconds: float = Field(default=5.0, alias="HTTP_CONNECT_TIMEOUT_SECONDS")
    seed_on_startup: bool = Field(default=False, alias="SEED_ON_STARTUP")

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True

    @property
    def crypto_id_list(self) -> list[str]:
        return [c.strip().lower() for c in self.crypto_ids.split(",") if c.strip()]

    @property
    def weather_city_list(self) -> list[str]:
        return [c.strip() for c in self.weather_cities.split(",") if c.strip()]

    def missing_seed_settings(self) -> list[str]:
        """Names of the settings a seed cycle cannot run without."""
        required = {
            "DATABASE_URL": self.database_url,
            "OPENWEATHER_API_KEY": self.openweather_api_key,
            "NEWSAPI_API_KEY": self.newsapi_api_key,
        }
        return [name for name, value in required.items() if not value]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
