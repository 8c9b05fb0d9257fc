"""Boundary service wrapping the simulation engine.

Converts validated request schemas into engine inputs, enforces the resource
ceilings configured in :mod:`app.config`, and reports data-quality problems
the engine itself degrades over silently.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Mapping, Sequence

from app.config import AppSettings, get_settings
from app.schemas import SimulationRequest, SimulationResponse, SimulationResultSchema
from app.services.market_data import fx_provider_symbol, load_series_map
from spend_invest.cursor import prepare_series
from spend_invest.fx import PROVIDER_SUFFIX, normalize_pair, pair_symbol
from spend_invest.models import Frequency, PricePoint, SpendItem
from spend_invest.pipeline import simulate_basket, simulate_item

logger = logging.getLogger(__name__)


class SimulationLimitError(ValueError):
    """Raised when a request would exceed the configured simulation ceilings."""


def simulation_cache_key(items: Sequence[SpendItem], user_currency: str) -> str:
    """Return a content hash identifying the result of simulating ``items``."""

    canonical = [
        {
            "id": item.id,
            "name": item.name,
            "cost": item.cost,
            "currency": item.currency.upper(),
            "frequency": Frequency(item.frequency).value,
            "startDate": item.start_date.isoformat(),
            "ticker": item.ticker.upper(),
        }
        for item in items
    ]
    blob = json.dumps(
        {"items": canonical, "userCurrency": user_currency.upper()},
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(blob.encode("utf-8")).hexdigest()


def data_quality_warnings(
    items: Sequence[SpendItem],
    prices: Mapping[str, Sequence[PricePoint]],
    fx: Mapping[str, Sequence[PricePoint]],
    user_currency: str,
    suffix: str = PROVIDER_SUFFIX,
) -> list[str]:
    """Describe tickers and currency pairs the engine will have to degrade over."""

    warnings: list[str] = []
    seen: set[str] = set()
    for item in items:
        if item.ticker in seen:
            continue
        seen.add(item.ticker)
        if not prices.get(item.ticker):
            warnings.append(f"No price data for {item.ticker}; its spend is held as uninvested cash.")
    available_pairs = {normalize_pair(pair, suffix) for pair, series in fx.items() if series}
    for currency in sorted({item.currency.upper() for item in items}):
        pair = pair_symbol(user_currency, currency)
        if pair is None or pair in available_pairs:
            continue
        symbol = fx_provider_symbol(user_currency, currency, suffix)
        warnings.append(
            f"No FX data for {pair} (provider symbol {symbol}); "
            f"costs in {currency} are counted unconverted."
        )
    return warnings


def _enforce_limits(
    items: Sequence[SpendItem],
    prices: Mapping[str, Sequence[PricePoint]],
    settings: AppSettings,
) -> None:
    if len(items) > settings.max_basket_items:
        raise SimulationLimitError(
            f"Basket has {len(items)} items; the limit is {settings.max_basket_items}."
        )
    if not items:
        return
    last_dates = [max(p.date for p in series) for series in prices.values() if series]
    if not last_dates:
        return
    start = min(item.start_date for item in items)
    days = (max(last_dates) - start).days + 1
    if days > settings.max_simulation_days:
        raise SimulationLimitError(
            f"Simulation spans {days} days; the limit is {settings.max_simulation_days}."
        )


def run_simulation(
    request: SimulationRequest,
    settings: AppSettings | None = None,
    *,
    price_payloads: Mapping[str, Mapping[str, Any]] | None = None,
    fx_payloads: Mapping[str, Mapping[str, Any]] | None = None,
) -> SimulationResponse:
    """Simulate the requested basket and optional per-item breakdowns.

    ``price_payloads`` and ``fx_payloads`` map symbols to raw market data
    provider payloads (``{currency, shortName, history}``). Series parsed from
    them take precedence over series of the same symbol in ``request``.
    """

    settings = settings or get_settings()
    user_currency = request.user_currency
    items = [item.to_domain() for item in request.items]
    prices = {
        ticker: [point.to_domain() for point in series]
        for ticker, series in request.prices.items()
    }
    suffix = settings.fx_symbol_suffix
    fx = {
        normalize_pair(pair, suffix): [point.to_domain() for point in series]
        for pair, series in request.fx.items()
    }
    if price_payloads:
        prices.update(load_series_map(price_payloads))
    if fx_payloads:
        for pair, series in load_series_map(fx_payloads).items():
            fx[normalize_pair(pair, suffix)] = series

    _enforce_limits(items, prices, settings)
    warnings = data_quality_warnings(items, prices, fx, user_currency, suffix)
    for message in warnings:
        logger.warning(message)

    # Sort once here so the basket and per-item replays share the same series
    prices = {ticker: prepare_series(series) for ticker, series in prices.items()}
    fx = {pair: prepare_series(series) for pair, series in fx.items()}

    target = request.downsample_target
    if target is None:
        target = settings.downsample_target

    result = simulate_basket(items, prices, user_currency, fx, downsample_target=target)
    logger.info(
        "Simulated %d items in %s: spent=%.2f value=%.2f growth=%.2f%%",
        len(items),
        user_currency,
        result.total_spent,
        result.investment_value,
        result.growth_percentage,
    )

    per_item: dict[str, SimulationResultSchema] = {}
    if request.include_items:
        for item in items:
            pair = pair_symbol(user_currency, item.currency)
            item_result = simulate_item(
                item,
                prices.get(item.ticker, []),
                user_currency,
                fx.get(pair) if pair else None,
                downsample_target=target,
            )
            per_item[item.id] = SimulationResultSchema.from_result(item_result)

    return SimulationResponse(
        result=SimulationResultSchema.from_result(result),
        items=per_item,
        warnings=warnings,
        cache_key=simulation_cache_key(items, user_currency),
    )


__all__ = [
    "SimulationLimitError",
    "data_quality_warnings",
    "run_simulation",
    "simulation_cache_key",
]
