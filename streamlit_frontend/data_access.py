"""Calls to the FastAPI gateway."""
from __future__ import annotations

from typing import Any, Dict

import requests
import streamlit as st
from requests import HTTPError

from .config import get_settings


class GatewayError(Exception):
    """Gateway answered with an error body or could not be reached."""


def _error_text(response: requests.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return fallback


def _get(path: str, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
    settings = get_settings()
    try:
        response = requests.get(
            f"{settings.api_base_url}{path}",
            params=params,
            timeout=settings.request_timeout,
        )
        response.raise_for_status()
    except HTTPError as e:
        raise GatewayError(_error_text(e.response, f"Request failed ({e.response.status_code})")) from e
    except requests.RequestException as e:
        raise GatewayError(f"Gateway unreachable: {e}") from e
    return response.json()


@st.cache_data(show_spinner=False, ttl=60)
def fetch_aggregated_data() -> Dict[str, Any]:
    return _get("/aggregated-data")


def fetch_city_weather(city: str) -> Dict[str, Any]:
    return _get("/weather", params={"city": city})
