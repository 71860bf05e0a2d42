from typing import Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from aggregator.core.config import Settings
from aggregator.core.errors import DataNotAvailableError
from aggregator.models import CryptoRecord, WeatherRecord, NewsRecord


async def get_aggregated_data(session: AsyncSession, settings: Settings) -> dict[str, Any]:
    """Compose the three stored tables into one payload.

    Crypto rows come back in seed order (oldest first), weather and news
    newest first. Every stored city is returned, seeded or looked up later.
    Raises ``DataNotAvailableError`` when any table is empty.
    """
    crypto_stmt = (
        select(CryptoRecord)
        .order_by(CryptoRecord.fetched_at.asc(), CryptoRecord.id.asc())
        .limit(settings.crypto_top_n)
    )
    weather_stmt = (
        select(WeatherRecord)
        .order_by(WeatherRecord.fetched_at.desc(), WeatherRecord.id.desc())
    )
    news_stmt = (
        select(NewsRecord)
        .order_by(NewsRecord.fetched_at.desc(), NewsRecord.id.desc())
        .limit(settings.news_page_size)
    )

    crypto = (await session.execute(crypto_stmt)).scalars().all()
    weather = (await session.execute(weather_stmt)).scalars().all()
    news = (await session.execute(news_stmt)).scalars().all()

    if not crypto or not weather or not news:
        raise DataNotAvailableError("Data not available. Try running the seed job.")

    return {
        "crypto": [row.to_public() for row in crypto],
        "weather": [row.to_public() for row in weather],
        "latest_news": [row.to_public() for row in news],
    }
