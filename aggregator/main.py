from contextlib import asynccontextmanager
from typing import Optional
import asyncio
import logging

from fastapi import FastAPI

from aggregator.core.config import Settings, get_settings
from aggregator.core.http import close_async_client
from aggregator.core.logging import configure_logging
from aggregator.core.ratelimit import FixedWindowRateLimiter, RateLimitExceeded, rate_limit_exceeded_handler
from aggregator.db.session import check_db, create_all, get_sessionmaker, init_engine
from aggregator.api.routes.aggregated import router as aggregated_router
from aggregator.api.routes.weather import router as weather_router
from aggregator.api.routes.health import router as health_router

logger = logging.getLogger(__name__)

# some deployments reach the gateway through this prefix
GATEWAY_PREFIX = "/api"

async def wait_for(predicate, name: str, attempts: int = 30, delay: int = 2):
    for _ in range(attempts):
        if await predicate():
            return True
        await asyncio.sleep(delay)
    raise RuntimeError(f"{name} not ready after {attempts * delay}s")

async def run_startup_seed(settings: Settings) -> None:
    from aggregator.services.seed_service import seed_all
    from aggregator.services.upstream_client import UpstreamClient

    async with get_sessionmaker()() as session:
        report = await seed_all(session, UpstreamClient(settings), settings)
    if not report.ok:
        logger.warning("startup seed did not finish: %s", report.error)


def create_app(
    settings: Optional[Settings] = None,
    rate_limiter: Optional[FixedWindowRateLimiter] = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        init_engine(settings.database_url)
        await wait_for(check_db, "Database")
        await create_all()
        if settings.seed_on_startup:
            await run_startup_seed(settings)
        yield
        await close_async_client()

    app = FastAPI(title="Market Data Aggregator (SQLModel + FastAPI)", lifespan=lifespan)
    app.state.settings = settings
    app.state.rate_limiter = rate_limiter or FixedWindowRateLimiter(
        limit=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
        max_keys=settings.rate_limit_max_keys,
    )
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    for router in (aggregated_router, weather_router):
        app.include_router(router)
        app.include_router(router, prefix=GATEWAY_PREFIX, include_in_schema=False)
    app.include_router(health_router)
    return app


app = create_app()
