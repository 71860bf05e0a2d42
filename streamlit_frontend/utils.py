"""Helper functions shared across Streamlit pages."""
from __future__ import annotations

import streamlit as st

from .config import get_settings


@st.cache_resource(show_spinner=False)
def get_cached_settings():
    """Return cached settings for Streamlit runtime."""
    return get_settings()


def trend_color(change: float | None) -> str:
    return "#2ecc71" if (change or 0) >= 0 else "#e74c3c"
