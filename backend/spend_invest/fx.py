"""FX conversion helpers."""
from __future__ import annotations

from typing import Iterable, List, Optional

from .models import SpendItem

PROVIDER_SUFFIX = "=X"


def pair_symbol(base: str, quote: str) -> Optional[str]:
    """Return the pair symbol for ``base`` and ``quote``, or None if they match."""

    base = base.upper()
    quote = quote.upper()
    if base == quote:
        return None
    return f"{base}{quote}"


def normalize_pair(symbol: str, suffix: str = PROVIDER_SUFFIX) -> str:
    """Strip a provider suffix so ``GBPUSD=X`` and ``GBPUSD`` are the same key."""

    symbol = symbol.strip().upper()
    suffix = suffix.strip().upper()
    if suffix and symbol.endswith(suffix):
        symbol = symbol[: -len(suffix)]
    return symbol


def required_currency_pairs(items: Iterable[SpendItem], user_currency: str) -> List[str]:
    """Return the sorted pair symbols needed to convert ``items`` to ``user_currency``."""

    pairs = set()
    for item in items:
        pair = pair_symbol(user_currency, item.currency)
        if pair:
            pairs.add(pair)
    return sorted(pairs)


def convert_cost(cost: float, rate: float | None) -> float:
    """Convert an item-currency amount to the user's currency.

    A rate ``r`` for pair ``USER+ITEM`` means ``user_amount = item_amount / r``.
    Missing or non-positive rates leave the amount unconverted.
    """

    if rate is None or rate <= 0:
        return cost
    return cost / rate


__all__ = [
    "PROVIDER_SUFFIX",
    "pair_symbol",
    "normalize_pair",
    "required_currency_pairs",
    "convert_cost",
]
