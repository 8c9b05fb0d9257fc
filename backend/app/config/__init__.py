"""Configuration package for the simulator service."""

from .settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]
