"""Styling utilities shared across Streamlit pages."""
from __future__ import annotations

import streamlit as st


def apply_global_theme(title: str = "Market Dashboard", icon: str = "📈") -> None:
    """Apply page config and a dark card look."""
    if not st.session_state.get("_page_configured", False):
        st.set_page_config(
            page_title=title,
            page_icon=icon,
            layout="wide",
            initial_sidebar_state="collapsed",
        )
        st.session_state["_page_configured"] = True

    st.markdown(
        """
        <style>
        body, .stApp {
            background-color: #0e1117;
            color: #f5f5f5;
        }
        .weather-card {
            padding: 1.2rem;
            border-radius: 0.75rem;
            background: linear-gradient(145deg, #161b22 0%, #0f1115 100%);
            border: 1px solid rgba(52, 152, 219, 0.25);
            margin-bottom: 0.75rem;
        }
        .weather-card h4 {
            margin: 0 0 0.4rem 0;
        }
        .badge {
            display: inline-block;
            padding: 0.2rem 0.6rem;
            border-radius: 999px;
            background-color: rgba(46, 204, 113, 0.15);
            color: #2ecc71;
            font-weight: 600;
            margin-right: 0.5rem;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )
