"""One seed cycle: clear the three tables and refill them from upstream.

Steps run in order and each commits its own rows. The first failure stops
the cycle; rows written by earlier steps stay. Readers hitting the gateway
while a cycle runs can see empty or half-filled tables.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import delete

from aggregator.core.config import Settings
from aggregator.models import CryptoRecord, NewsRecord, WeatherRecord
from aggregator.services.normalize import (
    crypto_from_markets,
    crypto_from_simple,
    news_from_response,
    weather_from_response,
)
from aggregator.services.upstream_client import UpstreamClient
from aggregator.services.weather_service import upsert_weather

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    cleared: bool = False
    crypto: int = 0
    weather: int = 0
    news: int = 0
    aborted: Optional[str] = None
    error: Optional[str] = None
    missing: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.aborted is None


async def clear_tables(session: AsyncSession) -> None:
    for model in (CryptoRecord, WeatherRecord, NewsRecord):
        await session.execute(delete(model))
    await session.commit()


async def seed_crypto(session: AsyncSession, client: UpstreamClient, settings: Settings) -> int:
    if settings.crypto_mode == "simple":
        ids = settings.crypto_id_list
        rows = crypto_from_simple(await client.simple_prices(ids), ids)
    else:
        rows = crypto_from_markets(await client.market_coins(settings.crypto_top_n))
    session.add_all(rows)
    await session.commit()
    return len(rows)


async def seed_weather(session: AsyncSession, client: UpstreamClient, settings: Settings) -> int:
    stored = 0
    for city in settings.weather_city_list:
        record = weather_from_response(city, await client.current_weather(city))
        await upsert_weather(session, record, commit=False)
        stored += 1
    await session.commit()
    return stored


async def seed_news(session: AsyncSession, client: UpstreamClient, settings: Settings) -> int:
    rows = news_from_response(await client.top_headlines(settings.news_page_size), settings.news_page_size)
    session.add_all(rows)
    await session.commit()
    return len(rows)


async def seed_all(session: AsyncSession, client: UpstreamClient, settings: Settings) -> SeedReport:
    report = SeedReport()
    missing = settings.missing_seed_settings()
    if missing:
        logger.error("seed skipped, missing settings: %s", ", ".join(missing))
        report.aborted = "configuration"
        report.missing = missing
        report.error = f"Missing required settings: {', '.join(missing)}"
        return report

    step = "clear"
    try:
        logger.info("starting seed cycle")
        await clear_tables(session)
        report.cleared = True

        step = "crypto"
        report.crypto = await seed_crypto(session, client, settings)
        logger.info("crypto stored: %d rows", report.crypto)

        step = "weather"
        report.weather = await seed_weather(session, client, settings)
        logger.info("weather stored: %d cities", report.weather)

        step = "news"
        report.news = await seed_news(session, client, settings)
        logger.info("news stored: %d articles", report.news)
    except Exception as e:
        await session.rollback()
        logger.exception("seed cycle aborted during %s step", step)
        report.aborted = step
        report.error = str(e)
        return report

    logger.info("seed cycle complete")
    return report
