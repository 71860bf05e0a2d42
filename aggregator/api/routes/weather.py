import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from aggregator.api.deps import get_app_settings, get_upstream_client
from aggregator.core.config import Settings
from aggregator.core.errors import (
    ConfigurationError,
    EmptyResultError,
    UpstreamError,
    UpstreamTimeoutError,
    UpstreamValidationError,
)
from aggregator.core.ratelimit import enforce_rate_limit
from aggregator.db.session import get_session
from aggregator.services.upstream_client import UpstreamClient
from aggregator.services.weather_service import fetch_city_weather

logger = logging.getLogger(__name__)

router = APIRouter(tags=["weather"])

GENERIC_FAILURE = "Failed to fetch weather data"

@router.get("/weather", dependencies=[Depends(enforce_rate_limit)])
async def weather(
    city: str | None = Query(None, description="City name, ex: Hanoi. Defaults to DEFAULT_CITY"),
    session: AsyncSession = Depends(get_session),
    client: UpstreamClient = Depends(get_upstream_client),
    settings: Settings = Depends(get_app_settings),
):
    """
    Fetches current weather for a city from OpenWeather and upserts it.

    **Retorna:** `{city, temperature, condition, humidity, wind_speed}`.
    400 when the provider sends no condition, 504 on upstream timeout,
    500 on any other upstream or store failure.
    """
    target = (city or "").strip() or settings.default_city
    try:
        return await fetch_city_weather(session, client, target)
    except (EmptyResultError, UpstreamValidationError) as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except UpstreamTimeoutError as e:
        return JSONResponse(status_code=504, content={"error": str(e)})
    except UpstreamError as e:
        return JSONResponse(status_code=500, content={"error": str(e) or GENERIC_FAILURE})
    except ConfigurationError as e:
        logger.error("weather endpoint misconfigured: %s", e)
        return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE})
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("weather upsert failed for %s", target)
        return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE})
