"""Pydantic schema exports."""

from .simulate import (
    GraphPointSchema,
    PricePointSchema,
    SimulationRequest,
    SimulationResponse,
    SimulationResultSchema,
    SpendItemSchema,
)

__all__ = [
    "GraphPointSchema",
    "PricePointSchema",
    "SimulationRequest",
    "SimulationResponse",
    "SimulationResultSchema",
    "SpendItemSchema",
]
