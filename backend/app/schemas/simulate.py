"""Schemas for spend-versus-invest simulation requests and results."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from spend_invest.models import Frequency, PricePoint, SimulationResult, SpendItem

CURRENCY_PATTERN = r"^[A-Z]{3}$"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _upper(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper()
    return value


class SpendItemSchema(_CamelModel):
    id: str
    name: str = ""
    cost: float = Field(..., gt=0)
    currency: str = Field(..., pattern=CURRENCY_PATTERN)
    frequency: Frequency
    start_date: date
    ticker: str = Field(..., min_length=1)

    @field_validator("currency", "ticker", mode="before")
    @classmethod
    def normalize_codes(cls, value: Any) -> Any:
        return _upper(value)

    def to_domain(self) -> SpendItem:
        return SpendItem(
            id=self.id,
            name=self.name,
            cost=self.cost,
            currency=self.currency,
            frequency=self.frequency,
            start_date=self.start_date,
            ticker=self.ticker,
        )


class PricePointSchema(_CamelModel):
    date: date
    adj_close: float = Field(..., gt=0)

    def to_domain(self) -> PricePoint:
        return PricePoint(date=self.date, adj_close=self.adj_close)


class SimulationRequest(_CamelModel):
    items: list[SpendItemSchema] = Field(default_factory=list)
    user_currency: str = Field(..., pattern=CURRENCY_PATTERN)
    prices: dict[str, list[PricePointSchema]] = Field(default_factory=dict)
    fx: dict[str, list[PricePointSchema]] = Field(default_factory=dict)
    include_items: bool = False
    downsample_target: int | None = Field(default=None, ge=0)

    @field_validator("user_currency", mode="before")
    @classmethod
    def normalize_currency(cls, value: Any) -> Any:
        return _upper(value)

    @field_validator("prices", "fx", mode="before")
    @classmethod
    def normalize_keys(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {_upper(key): series for key, series in value.items()}
        return value


class GraphPointSchema(BaseModel):
    date: date
    spent: float
    value: float


class SimulationResultSchema(_CamelModel):
    total_spent: float
    investment_value: float
    currency: str
    growth_percentage: float
    graph_data: list[GraphPointSchema]

    @classmethod
    def from_result(cls, result: SimulationResult) -> "SimulationResultSchema":
        return cls(
            total_spent=result.total_spent,
            investment_value=result.investment_value,
            currency=result.currency,
            growth_percentage=result.growth_percentage,
            graph_data=[
                GraphPointSchema(date=p.date, spent=p.spent, value=p.value)
                for p in result.graph_data
            ],
        )


class SimulationResponse(_CamelModel):
    result: SimulationResultSchema
    items: dict[str, SimulationResultSchema] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    cache_key: str


__all__ = [
    "GraphPointSchema",
    "PricePointSchema",
    "SimulationRequest",
    "SimulationResponse",
    "SimulationResultSchema",
    "SpendItemSchema",
]
