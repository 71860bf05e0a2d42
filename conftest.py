"""
Configuração global para testes pytest.
"""
import pytest
import httpx
from aggregator.core.config import Settings
from aggregator.core.http import close_async_client
from aggregator.core.limits import _DEFAULT_LIMITS
from aggregator.core.ratelimit import FixedWindowRateLimiter
from aggregator.db.session import create_all, dispose_engine, get_sessionmaker, init_engine
from aggregator.services.upstream_client import UpstreamClient


@pytest.fixture(scope="function", autouse=True)
async def cleanup_resources():
    """Limpa recursos compartilhados entre testes."""
    yield
    # Limpar HTTP client global
    await close_async_client()
    # Limpar limiters globais
    _DEFAULT_LIMITS.clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        openweather_api_key="test-weather-key",
        newsapi_api_key="test-news-key",
        coingecko_base_url="https://coingecko.test/api/v3",
        openweather_base_url="https://openweather.test/data/2.5",
        newsapi_base_url="https://newsapi.test/v2",
        crypto_mode="simple",
        crypto_ids="bitcoin",
        weather_cities="Ho Chi Minh",
        default_city="Ho Chi Minh",
    )


@pytest.fixture
async def db(settings):
    """In-memory store with the three tables created."""
    init_engine(settings.database_url)
    await create_all()
    yield get_sessionmaker()
    await dispose_engine()


@pytest.fixture
async def session(db):
    async with db() as s:
        yield s


@pytest.fixture
def limiter() -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(limit=5, window_seconds=60)


@pytest.fixture
def make_upstream(settings):
    """Build an UpstreamClient whose requests are answered by ``handler(request)``."""
    def _make(handler, settings_override: Settings | None = None) -> UpstreamClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return UpstreamClient(settings_override or settings, http_client=http_client)
    return _make
