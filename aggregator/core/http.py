"""Shared HTTP client utilities."""
from __future__ import annotations

import asyncio
from typing import Optional

import httpx

from aggregator.core.config import get_settings

_client: Optional[httpx.AsyncClient] = None
_client_lock = asyncio.Lock()


def build_timeout(total: float | None = None, connect: float | None = None) -> httpx.Timeout:
    if total is None or connect is None:
        settings = get_settings()
        total = settings.http_timeout_seconds if total is None else total
        connect = settings.http_connect_timeout_seconds if connect is None else connect
    return httpx.Timeout(total, connect=connect)


async def get_async_client() -> httpx.AsyncClient:
    """Return the process-wide AsyncClient, creating it on first use."""
    global _client
    if _client is not None:
        return _client

    async with _client_lock:
        if _client is None:
            _client = httpx.AsyncClient(timeout=build_timeout())
        return _client


async def close_async_client() -> None:
    global _client
    async with _client_lock:
        if _client is not None:
            await _client.aclose()
            _client = None
