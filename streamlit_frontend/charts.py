"""Reusable chart builders for the Streamlit market dashboard."""
from __future__ import annotations

from typing import List, Optional

import altair as alt
import pandas as pd

from .filters import sparkline_domain


def sparkline_chart(prices: List[float], color: str) -> Optional[alt.Chart]:
    domain = sparkline_domain(prices)
    if domain is None:
        return None
    df = pd.DataFrame({"index": range(len(prices)), "price": prices})
    chart = (
        alt.Chart(df)
        .mark_area(line={"color": color}, color=color, opacity=0.2)
        .encode(
            x=alt.X("index:Q", axis=None),
            y=alt.Y("price:Q", axis=None, scale=alt.Scale(domain=list(domain))),
            tooltip=[alt.Tooltip("price:Q", title="Price", format=",.2f")],
        )
        .properties(height=40)
    )
    return chart


def market_cap_bar_chart(df: pd.DataFrame) -> alt.Chart:
    if df.empty:
        return alt.Chart(pd.DataFrame({"symbol": [], "market_cap": []})).mark_bar()

    chart = (
        alt.Chart(df)
        .mark_bar(cornerRadiusTopLeft=4, cornerRadiusTopRight=4)
        .encode(
            x=alt.X("market_cap:Q", title="Market cap (USD)"),
            y=alt.Y("symbol:N", sort="-x", title="Coin"),
            color=alt.Color("symbol:N", legend=None, scale=alt.Scale(scheme="viridis")),
            tooltip=[
                alt.Tooltip("name:N", title="Coin"),
                alt.Tooltip("market_cap:Q", title="Market cap", format=",.0f"),
            ],
        )
        .properties(height=260)
    )
    return chart
