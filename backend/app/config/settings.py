"""Application configuration and environment helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings

from spend_invest.fx import PROVIDER_SUFFIX

DEFAULT_BASE_CURRENCY = "USD"
DEFAULT_DOWNSAMPLE_TARGET = 500


class AppSettings(BaseSettings):
    """Configuration options for the spend-versus-invest simulator."""

    app_name: str = Field(default="Spend vs Invest Simulator")
    base_currency: str = Field(default=DEFAULT_BASE_CURRENCY, min_length=3, max_length=3)

    downsample_target: int = Field(
        default=DEFAULT_DOWNSAMPLE_TARGET,
        ge=0,
        description="Maximum number of chart points returned per series (0 disables downsampling).",
    )
    max_simulation_days: int = Field(
        default=365 * 60,
        gt=0,
        description="Upper bound on calendar days replayed by a single simulation.",
    )
    max_basket_items: int = Field(default=100, gt=0)
    fx_symbol_suffix: str = Field(
        default=PROVIDER_SUFFIX,
        description="Suffix the market data provider appends to currency pair symbols.",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a dict suitable for logging."""

        return self.model_dump()


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_BASE_CURRENCY",
    "DEFAULT_DOWNSAMPLE_TARGET",
    "get_settings",
]
