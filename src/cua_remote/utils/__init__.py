"""Utility helpers (logging, configuration, constants)."""

from .config import Settings, load_settings
from .logger import get_logger

__all__ = ["Settings", "load_settings", "get_logger"]
