"""Entry point for the Streamlit market dashboard."""
from __future__ import annotations

from pathlib import Path
import sys

import pandas as pd
import streamlit as st

if __package__ in (None, ""):
    PACKAGE_ROOT = Path(__file__).resolve().parent
    sys.path.insert(0, str(PACKAGE_ROOT.parent))

    import streamlit_frontend.data_access as data_access
    from streamlit_frontend.charts import market_cap_bar_chart, sparkline_chart
    from streamlit_frontend.filters import (
        filter_crypto_by_price,
        filter_news_by_keyword,
        format_change,
        format_compact_number,
        merge_weather,
        parse_bound,
        refresh_weather_state,
    )
    from streamlit_frontend.theme import apply_global_theme
    from streamlit_frontend.utils import get_cached_settings, trend_color
else:
    from . import data_access
    from .charts import market_cap_bar_chart, sparkline_chart
    from .filters import (
        filter_crypto_by_price,
        filter_news_by_keyword,
        format_change,
        format_compact_number,
        merge_weather,
        parse_bound,
        refresh_weather_state,
    )
    from .theme import apply_global_theme
    from .utils import get_cached_settings, trend_color


def render_crypto(coins: list[dict]) -> None:
    st.markdown("## 💰 Cryptocurrency")
    st.caption("Filter cryptocurrencies by price range")
    col1, col2 = st.columns(2)
    with col1:
        min_price = parse_bound(st.text_input("Min Price ($)", placeholder="0"))
    with col2:
        max_price = parse_bound(st.text_input("Max Price ($)", placeholder="No limit"))

    filtered = filter_crypto_by_price(coins, min_price, max_price)
    if not filtered:
        st.info("No coins in this price range.")
        return

    header = st.columns([2, 2, 1, 2, 2, 3])
    for col, label in zip(header, ["Coin", "Price", "24h", "24h Volume", "Market Cap", "Last 7 Days"]):
        col.markdown(f"**{label}**")
    for coin in filtered:
        cols = st.columns([2, 2, 1, 2, 2, 3])
        cols[0].markdown(f"{coin['name']} <span class='badge'>{coin['symbol']}</span>", unsafe_allow_html=True)
        cols[1].write(f"${coin['price']:,.2f}")
        cols[2].write(format_change(coin.get("price_change_24h")))
        cols[3].write(f"${format_compact_number(coin.get('volume_24h'))}")
        cols[4].write(f"${format_compact_number(coin.get('market_cap'))}")
        chart = sparkline_chart(coin.get("sparkline_7d") or [], trend_color(coin.get("price_change_24h")))
        if chart is not None:
            cols[5].altair_chart(chart, use_container_width=True)
        else:
            cols[5].write("-")

    st.altair_chart(market_cap_bar_chart(pd.DataFrame(filtered)), use_container_width=True)


def render_weather(default_city: str) -> None:
    st.markdown("## 🌤️ Weather")
    col1, col2 = st.columns([3, 1])
    with col1:
        city = st.text_input("City", value=default_city)
    with col2:
        st.write("")
        if st.button("Update weather") and city.strip():
            try:
                fresh = data_access.fetch_city_weather(city.strip())
            except data_access.GatewayError as e:
                st.error(str(e))
            else:
                st.session_state["weather"] = merge_weather(st.session_state["weather"], fresh)

    cards = st.columns(3)
    for i, item in enumerate(st.session_state["weather"]):
        humidity = item.get("humidity")
        wind = item.get("wind_speed")
        cards[i % 3].markdown(
            f"""
            <div class="weather-card">
              <h4>{item['city']}</h4>
              <div style="font-size:1.8rem">{item['temperature']:.1f}°C</div>
              <div>{item['condition']}</div>
              <small>Humidity: {'-' if humidity is None else f'{humidity:.0f}%'} ·
              Wind: {'-' if wind is None else f'{wind:.1f} m/s'}</small>
            </div>
            """,
            unsafe_allow_html=True,
        )


def render_news(articles: list[dict]) -> None:
    st.markdown("## 📰 Latest News")
    keyword = st.text_input("Search headlines")
    filtered = filter_news_by_keyword(articles, keyword)
    if not filtered:
        st.info("No headlines match this keyword.")
        return
    for article in filtered:
        st.markdown(f"**[{article['title']}]({article['url']})**  \n{article['source']}")
        st.divider()


def main() -> None:
    settings = get_cached_settings()
    apply_global_theme(settings.app_name, settings.app_icon)

    st.title("Market Dashboard")
    st.caption("Real-time cryptocurrency, weather, and news data")

    try:
        data = data_access.fetch_aggregated_data()
    except data_access.GatewayError as e:
        st.error(str(e))
        return

    refresh_weather_state(st.session_state, data.get("weather"))

    render_crypto(data.get("crypto") or [])
    st.divider()
    render_weather(settings.default_city)
    st.divider()
    render_news(data.get("latest_news") or [])


if __name__ == "__main__":
    main()
