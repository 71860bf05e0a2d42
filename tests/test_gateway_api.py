"""
Testes de integração dos endpoints do gateway (ASGI + SQLite em memória).
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlmodel import select

from aggregator.api.deps import get_upstream_client
from aggregator.core.ratelimit import FixedWindowRateLimiter
from aggregator.main import create_app
from aggregator.models import CryptoRecord, NewsRecord, WeatherRecord
from aggregator.services.seed_service import seed_all

WEATHER_OK = {"main": {"temp": 31.0, "humidity": 70}, "wind": {"speed": 3.5}, "weather": [{"main": "Clear"}]}
NEWS_OK = {"articles": [{"title": "Bitcoin hits 50k", "source": {"name": "Reuters"}, "url": "https://reuters.com/btc"}]}
CRYPTO_OK = {"bitcoin": {"usd": 50000, "usd_market_cap": 1e12}}


def upstream_handler(weather=None, status=200):
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith("/simple/price"):
            return httpx.Response(200, json=CRYPTO_OK)
        if path.endswith("/weather"):
            return httpx.Response(status, json=weather if weather is not None else WEATHER_OK)
        if path.endswith("/top-headlines"):
            return httpx.Response(200, json=NEWS_OK)
        return httpx.Response(404, json={"message": "unknown path"})
    return handler


@pytest.fixture
def build_app(settings, db, make_upstream):
    def _build(handler=None, limiter=None):
        app = create_app(settings, rate_limiter=limiter or FixedWindowRateLimiter(limit=100, window_seconds=60))
        client = make_upstream(handler or upstream_handler())
        app.dependency_overrides[get_upstream_client] = lambda: client
        return app
    return _build


def api_client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


async def seed(db, settings, make_upstream, handler=None):
    async with db() as s:
        report = await seed_all(s, make_upstream(handler or upstream_handler()), settings)
    assert report.ok, report.error
    return report


class TestAggregatedData:
    async def test_scenario_seeded_bitcoin(self, build_app, db, settings, make_upstream):
        await seed(db, settings, make_upstream)
        async with api_client(build_app()) as client:
            r = await client.get("/aggregated-data")
        assert r.status_code == 200
        body = r.json()
        assert set(body) == {"crypto", "weather", "latest_news"}
        btc = body["crypto"][0]
        assert {k: btc[k] for k in ("name", "symbol", "price", "market_cap")} == {
            "name": "Bitcoin", "symbol": "BTC", "price": 50000, "market_cap": 1e12,
        }
        assert body["weather"] == [{
            "city": "Ho Chi Minh", "temperature": 31.0, "condition": "Clear", "humidity": 70, "wind_speed": 3.5,
        }]
        assert body["latest_news"] == [{"title": "Bitcoin hits 50k", "source": "Reuters", "url": "https://reuters.com/btc"}]

    async def test_repeated_reads_identical(self, build_app, db, settings, make_upstream):
        await seed(db, settings, make_upstream)
        async with api_client(build_app()) as client:
            first = await client.get("/aggregated-data")
            second = await client.get("/aggregated-data")
        assert first.content == second.content

    @pytest.mark.parametrize("empty_model", [CryptoRecord, WeatherRecord, NewsRecord])
    async def test_any_empty_table_is_500(self, build_app, session, empty_model):
        rows = {
            CryptoRecord: CryptoRecord(name="Bitcoin", symbol="BTC", price=1.0, market_cap=2.0),
            WeatherRecord: WeatherRecord(city="Hanoi", temperature=25.0, condition="Rain"),
            NewsRecord: NewsRecord(title="t", source="s", url="https://example.com/t"),
        }
        session.add_all([row for model, row in rows.items() if model is not empty_model])
        await session.commit()

        async with api_client(build_app()) as client:
            r = await client.get("/aggregated-data")
        assert r.status_code == 500
        assert r.json()["error"].startswith("Data not available")

    async def test_crypto_ascending_news_descending(self, build_app, session):
        session.add_all([
            CryptoRecord(name="Bitcoin", symbol="BTC", price=1.0, market_cap=2.0),
            CryptoRecord(name="Ethereum", symbol="ETH", price=3.0, market_cap=4.0),
            WeatherRecord(city="Hanoi", temperature=25.0, condition="Rain"),
            NewsRecord(title="older", source="s", url="https://example.com/1"),
            NewsRecord(title="newer", source="s", url="https://example.com/2"),
        ])
        await session.commit()

        async with api_client(build_app()) as client:
            body = (await client.get("/aggregated-data")).json()
        assert [c["symbol"] for c in body["crypto"]] == ["BTC", "ETH"]
        assert [n["title"] for n in body["latest_news"]] == ["newer", "older"]

    async def test_gateway_prefix(self, build_app, db, settings, make_upstream):
        await seed(db, settings, make_upstream)
        async with api_client(build_app()) as client:
            r = await client.get("/api/aggregated-data")
        assert r.status_code == 200


class TestRateLimit:
    async def test_sixth_request_is_429(self, build_app, session):
        app = build_app(limiter=FixedWindowRateLimiter(limit=5, window_seconds=60))
        async with api_client(app) as client:
            responses = [await client.get("/aggregated-data") for _ in range(6)]
        # tables are empty, so the allowed ones answer 500
        assert [r.status_code for r in responses] == [500] * 5 + [429]
        assert responses[5].json() == {"error": "Too many requests, please wait before retrying."}
        assert int(responses[5].headers["Retry-After"]) <= 60

    async def test_limit_shared_across_guarded_routes(self, build_app, session):
        app = build_app(limiter=FixedWindowRateLimiter(limit=2, window_seconds=60))
        async with api_client(app) as client:
            assert (await client.get("/weather")).status_code == 200
            assert (await client.get("/aggregated-data")).status_code == 500
            assert (await client.get("/weather")).status_code == 429

    async def test_health_is_not_limited(self, build_app, session):
        app = build_app(limiter=FixedWindowRateLimiter(limit=1, window_seconds=60))
        async with api_client(app) as client:
            codes = [(await client.get("/health")).status_code for _ in range(3)]
        assert codes == [200, 200, 200]


class TestWeatherEndpoint:
    async def test_defaults_to_fallback_city(self, build_app, session):
        async with api_client(build_app()) as client:
            r = await client.get("/weather")
        assert r.status_code == 200
        assert r.json() == {
            "city": "Ho Chi Minh", "temperature": 31.0, "condition": "Clear", "humidity": 70, "wind_speed": 3.5,
        }

    async def test_upsert_then_aggregate(self, build_app, db, settings, make_upstream):
        await seed(db, settings, make_upstream)
        rainy = {"main": {"temp": 24.0}, "weather": [{"main": "Rain"}]}
        async with api_client(build_app(upstream_handler(weather=rainy))) as client:
            assert (await client.get("/weather", params={"city": "Ho Chi Minh"})).status_code == 200
            body = (await client.get("/aggregated-data")).json()
        matches = [w for w in body["weather"] if w["city"] == "Ho Chi Minh"]
        assert matches == [{
            "city": "Ho Chi Minh", "temperature": 24.0, "condition": "Rain", "humidity": None, "wind_speed": None,
        }]

    async def test_lookup_adds_city_without_dropping_seeded(self, build_app, db, settings, make_upstream):
        await seed(db, settings, make_upstream)
        async with api_client(build_app()) as client:
            assert (await client.get("/weather", params={"city": "Hanoi"})).status_code == 200
            body = (await client.get("/aggregated-data")).json()
        assert [w["city"] for w in body["weather"]] == ["Hanoi", "Ho Chi Minh"]

    async def test_city_match_ignores_case(self, build_app, db, settings, make_upstream, session):
        await seed(db, settings, make_upstream)
        rainy = {"main": {"temp": 24.0}, "weather": [{"main": "Rain"}]}
        async with api_client(build_app(upstream_handler(weather=rainy))) as client:
            r = await client.get("/weather", params={"city": "ho chi minh"})
        assert r.status_code == 200
        assert r.json()["city"] == "Ho Chi Minh"
        rows = (await session.execute(select(WeatherRecord))).scalars().all()
        assert [(w.city, w.condition) for w in rows] == [("Ho Chi Minh", "Rain")]

    async def test_new_city_is_inserted(self, build_app, session):
        async with api_client(build_app()) as client:
            r = await client.get("/weather", params={"city": "Hanoi"})
        assert r.status_code == 200
        rows = (await session.execute(select(WeatherRecord))).scalars().all()
        assert [w.city for w in rows] == ["Hanoi"]

    async def test_scenario_empty_condition(self, build_app, session):
        empty = {"main": {"temp": 18.0}, "weather": []}
        async with api_client(build_app(upstream_handler(weather=empty))) as client:
            r = await client.get("/weather", params={"city": "Atlantis"})
        assert r.status_code == 400
        assert "error" in r.json()
        rows = (await session.execute(select(WeatherRecord))).scalars().all()
        assert rows == []

    async def test_upstream_error_message(self, build_app, session):
        handler = upstream_handler(weather={"cod": "404", "message": "city not found"}, status=404)
        async with api_client(build_app(handler)) as client:
            r = await client.get("/weather", params={"city": "Nowhere"})
        assert r.status_code == 500
        assert r.json() == {"error": "city not found"}

    async def test_upstream_timeout(self, build_app, session):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        async with api_client(build_app(handler)) as client:
            r = await client.get("/weather", params={"city": "Hanoi"})
        assert r.status_code == 504
        assert "error" in r.json()


async def test_root_is_404(build_app, session):
    async with api_client(build_app()) as client:
        r = await client.get("/")
    assert r.status_code == 404
    assert r.json() == {"error": "Nothing to see here. Visit /aggregated-data instead."}
