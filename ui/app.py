from __future__ import annotations

import os
import time
from typing import Any, Dict

import pandas as pd
import requests
import streamlit as st

API_URL = os.environ.get("API_URL", "http://localhost:8000")
REFRESH_SECONDS = int(os.environ.get("LIVE_POLL_INTERVAL_MS") or "3000") / 1000

_TREND_COLORS = {"up": "color: #059669", "down": "color: #e11d48", "flat": "color: #1f2937"}


def fetch_table() -> Dict[str, Any]:
    r = requests.get(f"{API_URL}/live/table", timeout=10)
    r.raise_for_status()
    return r.json()


def to_dataframe(table: Dict[str, Any]) -> pd.DataFrame:
    rows = table.get("rows") or []
    df = pd.DataFrame(rows, columns=["match", "time", "corners", "da_first_half", "da_second_half", "delta", "trend"])
    return df


def _style_delta(df: pd.DataFrame):
    trends = df["trend"]
    view = df.drop(columns=["trend"]).rename(
        columns={
            "match": "Match",
            "time": "Time",
            "corners": "Corners",
            "da_first_half": "D.Attack 1HT",
            "da_second_half": "D.Attack 2HT",
            "delta": "Delta D.Attack",
        }
    )
    return view.style.apply(
        lambda col: [_TREND_COLORS.get(t, "") for t in trends] if col.name == "Delta D.Attack" else [""] * len(col),
        axis=0,
    )


def main() -> None:
    st.set_page_config(page_title="Live Dangerous Attacks", layout="wide")
    st.title("Live Dangerous Attacks (Trend=44)")
    st.caption(f"Auto-refresh ogni {REFRESH_SECONDS:g}s · API: {API_URL}")

    try:
        table = fetch_table()
    except requests.RequestException as exc:
        st.error(f"API non raggiungibile: {exc}")
        table = None

    if table is not None:
        banner = table.get("banner")
        if banner == "loading" or banner == "empty":
            st.info(table.get("message"))
        elif banner == "error":
            st.error(table.get("message"))

        df = to_dataframe(table)
        if not df.empty:
            st.dataframe(_style_delta(df), use_container_width=True, hide_index=True)

    st.caption(
        "Data: SportMonks v3 · somma i trend per tempo (type 44) quando disponibili, "
        "altrimenti le statistiche per tempo."
    )

    time.sleep(REFRESH_SECONDS)
    st.rerun()


if __name__ == "__main__":
    main()
