"""Market data helpers for turning provider payloads into price series."""

from __future__ import annotations

from typing import Any, Mapping

import pandas as pd

from app.config import get_settings
from spend_invest.fx import pair_symbol
from spend_invest.models import PricePoint


class MarketDataError(ValueError):
    """Raised when a provider payload cannot be interpreted."""


def _history_frame(history: list[Any]) -> pd.DataFrame:
    rows = [row for row in history if isinstance(row, Mapping)]
    if not rows:
        return pd.DataFrame()
    df = pd.DataFrame(rows)
    if "date" not in df.columns:
        return pd.DataFrame()
    if "adjClose" in df.columns:
        price = df["adjClose"]
    elif "adj_close" in df.columns:
        price = df["adj_close"]
    else:
        return pd.DataFrame()
    # Provider dates are ISO-8601 and may carry a time component
    day = pd.to_datetime(
        df["date"].astype(str).str.slice(0, 10), format="%Y-%m-%d", errors="coerce"
    )
    frame = pd.DataFrame({"Date": day, "Adj Close": pd.to_numeric(price, errors="coerce")})
    frame = frame.dropna()
    frame = frame[frame["Adj Close"] > 0]
    frame = frame.sort_values("Date", kind="mergesort")
    return frame.drop_duplicates(subset="Date", keep="last")


def parse_history(payload: Mapping[str, Any]) -> list[PricePoint]:
    """Return the ascending, de-duplicated price series held in ``payload``.

    Rows with unparsable dates or missing or non-positive prices are dropped.
    """

    history = payload.get("history")
    if not isinstance(history, list):
        raise MarketDataError("Market data payload has no history list.")
    frame = _history_frame(history)
    if frame.empty:
        return []
    return [
        PricePoint(date=ts.date(), adj_close=float(price))
        for ts, price in zip(frame["Date"], frame["Adj Close"])
    ]


def fx_provider_symbol(user_currency: str, item_currency: str, suffix: str | None = None) -> str | None:
    """Return the provider symbol for the pair converting ``item_currency`` amounts."""

    pair = pair_symbol(user_currency, item_currency)
    if pair is None:
        return None
    if suffix is None:
        suffix = get_settings().fx_symbol_suffix
    return f"{pair}{suffix}"


def load_series_map(payloads: Mapping[str, Mapping[str, Any]]) -> dict[str, list[PricePoint]]:
    """Parse a mapping of symbol to provider payload."""

    return {symbol.upper(): parse_history(payload) for symbol, payload in payloads.items()}


__all__ = [
    "MarketDataError",
    "fx_provider_symbol",
    "load_series_map",
    "parse_history",
]
