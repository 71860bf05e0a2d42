"""Streamlit frontend configuration utilities.

Reads the gateway address from the same ``.env`` the backend uses so both
applications can be started from one checkout.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
from functools import lru_cache
from pathlib import Path


@dataclass(frozen=True)
class FrontendSettings:
    """Settings propagated to Streamlit pages."""

    api_base_url: str
    default_city: str
    request_timeout: float = 10.0
    app_name: str = "Market Dashboard"
    app_icon: str = "📈"


@lru_cache(maxsize=1)
def get_settings() -> FrontendSettings:
    env_path = Path(__file__).resolve().parent.parent / ".env"
    if env_path.exists():
        from dotenv import load_dotenv

        load_dotenv(env_path, override=False)

    return FrontendSettings(
        api_base_url=os.getenv("API_BASE_URL", "http://localhost:8000").rstrip("/"),
        default_city=os.getenv("DEFAULT_CITY", "Ho Chi Minh"),
        request_timeout=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
    )
