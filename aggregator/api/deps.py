from fastapi import Request

from aggregator.core.config import Settings
from aggregator.services.upstream_client import UpstreamClient


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_upstream_client(request: Request) -> UpstreamClient:
    return UpstreamClient(request.app.state.settings)
