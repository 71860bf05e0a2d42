import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from aggregator.api.deps import get_app_settings
from aggregator.core.config import Settings
from aggregator.core.errors import DataNotAvailableError
from aggregator.core.ratelimit import enforce_rate_limit
from aggregator.db.session import get_session
from aggregator.services.aggregation_service import get_aggregated_data

logger = logging.getLogger(__name__)

router = APIRouter(tags=["aggregated"])

@router.get("/aggregated-data", dependencies=[Depends(enforce_rate_limit)])
async def aggregated_data(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
):
    """
    Returns the latest seeded crypto prices, weather and headlines in one payload.

    **Exemplo de resposta:**
    ```json
    {
      "crypto": [{"name": "Bitcoin", "symbol": "BTC", "price": 50000, "market_cap": 1e12,
                  "price_change_24h": 1.2, "volume_24h": 3.1e10, "sparkline_7d": [49000.0, 50000.0]}],
      "weather": [{"city": "Ho Chi Minh", "temperature": 31.2, "condition": "Clouds",
                   "humidity": 70, "wind_speed": 3.6}],
      "latest_news": [{"title": "...", "source": "Reuters", "url": "https://..."}]
    }
    ```

    Answers 500 when any of the three tables is empty.
    """
    try:
        return await get_aggregated_data(session, settings)
    except DataNotAvailableError as e:
        return JSONResponse(status_code=500, content={"error": str(e)})
    except SQLAlchemyError:
        logger.exception("aggregated read failed")
        return JSONResponse(status_code=500, content={"error": "Data not available. Store query failed."})
