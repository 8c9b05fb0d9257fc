"""Core package for the spend-versus-invest simulation engine."""

from .downsample import downsample
from .models import Frequency, GraphPoint, PricePoint, SimulationResult, SpendItem
from .pipeline import simulate_basket, simulate_item
from .schedule import fires

__all__ = [
    "Frequency",
    "SpendItem",
    "PricePoint",
    "GraphPoint",
    "SimulationResult",
    "downsample",
    "fires",
    "simulate_basket",
    "simulate_item",
]
