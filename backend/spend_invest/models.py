"""Domain models used by the spend-versus-invest simulation engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List


class Frequency(str, Enum):
    ONE_OFF = "one-off"
    DAILY = "daily"
    WORKDAYS = "workdays"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class SpendItem:
    """A recurring or one-off expenditure compared against a ticker."""

    id: str
    name: str
    cost: float
    currency: str
    frequency: Frequency
    start_date: date
    ticker: str


@dataclass(frozen=True)
class PricePoint:
    """A single dated value from a price or FX series."""

    date: date
    adj_close: float


@dataclass(frozen=True)
class GraphPoint:
    """Cumulative spend and portfolio value at the end of one day."""

    date: date
    spent: float
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date.isoformat(), "spent": self.spent, "value": self.value}


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of replaying a spend schedule as share purchases."""

    total_spent: float
    investment_value: float
    currency: str
    growth_percentage: float
    graph_data: List[GraphPoint] = field(default_factory=list)

    @classmethod
    def empty(cls, currency: str) -> "SimulationResult":
        return cls(
            total_spent=0.0,
            investment_value=0.0,
            currency=currency,
            growth_percentage=0.0,
            graph_data=[],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase transport shape consumed by chart renderers."""

        return {
            "totalSpent": self.total_spent,
            "investmentValue": self.investment_value,
            "currency": self.currency,
            "growthPercentage": self.growth_percentage,
            "graphData": [point.to_dict() for point in self.graph_data],
        }


__all__ = ["Frequency", "SpendItem", "PricePoint", "GraphPoint", "SimulationResult"]
