from typing import Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, func
from aggregator.models import WeatherRecord
from aggregator.models.weather import utcnow
from aggregator.services.normalize import weather_from_response
from aggregator.services.upstream_client import UpstreamClient


async def upsert_weather(session: AsyncSession, record: WeatherRecord, *, commit: bool = True) -> WeatherRecord:
    """Insert ``record`` or refresh the stored row for the same city.

    Cities match case-insensitively; an existing row keeps its stored name.
    """
    stmt = select(WeatherRecord).where(func.lower(WeatherRecord.city) == record.city.strip().lower())
    existing = (await session.execute(stmt)).scalars().first()
    if existing is None:
        session.add(record)
        row = record
    else:
        existing.temperature = record.temperature
        existing.condition = record.condition
        existing.humidity = record.humidity
        existing.wind_speed = record.wind_speed
        existing.fetched_at = utcnow()
        row = existing
    if commit:
        await session.commit()
    return row


async def fetch_city_weather(session: AsyncSession, client: UpstreamClient, city: str) -> dict[str, Any]:
    """Fetch current weather for ``city``, store it and return the public shape.

    Nothing is written when the upstream call fails or carries no condition.
    """
    payload = await client.current_weather(city)
    record = weather_from_response(city, payload)
    row = await upsert_weather(session, record)
    return row.to_public()
