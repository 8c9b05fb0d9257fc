"""Day-stepped replay of spend items as hypothetical share purchases."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Mapping, Optional, Sequence

from .cursor import SeriesCursor
from .downsample import DEFAULT_TARGET, downsample
from .fx import convert_cost, normalize_pair, pair_symbol, required_currency_pairs
from .models import GraphPoint, PricePoint, SimulationResult, SpendItem
from .schedule import fires

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


@dataclass
class _Holding:
    """Per-ticker accounting state for the duration of one replay."""

    shares_owned: float = 0.0
    cash_held: float = 0.0
    current_price: float = 0.0

    @property
    def value(self) -> float:
        return self.shares_owned * self.current_price + self.cash_held


def growth_percentage(total_spent: float, investment_value: float) -> float:
    if total_spent <= 0:
        return 0.0
    return (investment_value - total_spent) / total_spent * 100


def _simulation_window(
    items: Sequence[SpendItem], price_cursors: Mapping[str, SeriesCursor]
) -> tuple[date, date] | None:
    start = min(item.start_date for item in items)
    last_dates = [c.last_date for c in price_cursors.values() if c.last_date is not None]
    if not last_dates:
        return None
    end = max(last_dates)
    if end < start:
        return None
    return start, end


def _replay(
    items: Sequence[SpendItem],
    price_series_by_ticker: Mapping[str, Sequence[PricePoint]],
    user_currency: str,
    fx_series_by_pair: Mapping[str, Sequence[PricePoint]],
    downsample_target: int,
) -> SimulationResult:
    if not items:
        return SimulationResult.empty(user_currency)

    price_cursors = {
        ticker: SeriesCursor(series, default=0.0)
        for ticker, series in price_series_by_ticker.items()
    }
    needed_pairs = set(required_currency_pairs(items, user_currency))
    fx_cursors: Dict[str, SeriesCursor] = {}
    for pair, series in fx_series_by_pair.items():
        key = normalize_pair(pair)
        # Pairs no item converts through are never read
        if key in needed_pairs:
            fx_cursors[key] = SeriesCursor(series, default=1.0)

    window = _simulation_window(items, price_cursors)
    if window is None:
        logger.debug("No price data inside the simulation window; returning empty result")
        return SimulationResult.empty(user_currency)
    start, end = window
    logger.debug(
        "Replaying %d items across %d tickers from %s to %s",
        len(items),
        len(price_cursors),
        start.isoformat(),
        end.isoformat(),
    )

    holdings: Dict[str, _Holding] = {}
    for item in items:
        holdings.setdefault(item.ticker, _Holding())
    item_pairs = [pair_symbol(user_currency, item.currency) for item in items]

    total_spent = 0.0
    graph: List[GraphPoint] = []
    current_date = start
    while current_date <= end:
        for ticker, cursor in price_cursors.items():
            price = cursor.advance_to(current_date)
            holding = holdings.get(ticker)
            if holding is None:
                continue
            holding.current_price = price
            # Pre-listing cash converts in one lump on the first priced day
            if price > 0 and holding.cash_held > 0:
                holding.shares_owned += holding.cash_held / price
                holding.cash_held = 0.0

        for fx_cursor in fx_cursors.values():
            fx_cursor.advance_to(current_date)

        for item, pair in zip(items, item_pairs):
            if not fires(item, current_date):
                continue
            cost = item.cost
            if pair is not None:
                fx_cursor = fx_cursors.get(pair)
                rate = fx_cursor.value if fx_cursor is not None else None
                cost = convert_cost(item.cost, rate)
            total_spent += cost
            holding = holdings[item.ticker]
            if holding.current_price > 0:
                holding.shares_owned += cost / holding.current_price
            else:
                holding.cash_held += cost

        value = sum(holding.value for holding in holdings.values())
        graph.append(GraphPoint(date=current_date, spent=total_spent, value=value))
        current_date += ONE_DAY

    investment_value = graph[-1].value if graph else 0.0
    return SimulationResult(
        total_spent=total_spent,
        investment_value=investment_value,
        currency=user_currency,
        growth_percentage=growth_percentage(total_spent, investment_value),
        graph_data=downsample(graph, downsample_target),
    )


def simulate_basket(
    items: Sequence[SpendItem],
    price_series_by_ticker: Mapping[str, Sequence[PricePoint]],
    user_currency: str,
    fx_series_by_pair: Optional[Mapping[str, Sequence[PricePoint]]] = None,
    *,
    downsample_target: int = DEFAULT_TARGET,
) -> SimulationResult:
    """Replay every item in ``items`` against its ticker and sum the holdings.

    Price and FX series are copied before sorting; the caller's sequences are
    left untouched, so cached series may be shared between concurrent calls.

    The window runs from the earliest item start to the latest price date. If
    every price series ends before the earliest start (stale cached prices,
    typically) the window is empty and the zero result is returned: nothing is
    counted as spent, even for items that would have fired on their start date.
    """

    return _replay(
        list(items),
        price_series_by_ticker,
        user_currency,
        fx_series_by_pair or {},
        downsample_target,
    )


def simulate_item(
    item: SpendItem,
    price_series: Sequence[PricePoint],
    user_currency: str,
    fx_series: Optional[Sequence[PricePoint]] = None,
    *,
    downsample_target: int = DEFAULT_TARGET,
) -> SimulationResult:
    """Replay a single item against its own ticker."""

    fx_series_by_pair: Dict[str, Sequence[PricePoint]] = {}
    pair = pair_symbol(user_currency, item.currency)
    if pair and fx_series:
        fx_series_by_pair[pair] = fx_series
    return _replay(
        [item],
        {item.ticker: price_series},
        user_currency,
        fx_series_by_pair,
        downsample_target,
    )


__all__ = ["growth_percentage", "simulate_basket", "simulate_item"]
