"""
Configuration for cua-remote.

Settings come from an optional YAML file with environment-variable fallbacks
for credentials. They are loaded once at the edge (CLI) and passed into
constructors explicitly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from ..errors import ConfigurationError
from . import constants


@dataclass
class Settings:
    """Runtime settings for the planner, the sandbox connection and the loop."""

    openai_api_key: Optional[str] = None
    e2b_api_key: Optional[str] = None
    model: str = constants.DEFAULT_MODEL
    environment: str = constants.DEFAULT_ENVIRONMENT
    reasoning_effort: str = constants.DEFAULT_REASONING_EFFORT
    request_timeout: float = constants.DEFAULT_REQUEST_TIMEOUT
    instruction_timeout: float = constants.DEFAULT_INSTRUCTION_TIMEOUT
    max_resolution: Tuple[int, int] = (
        constants.MAX_RESOLUTION_WIDTH,
        constants.MAX_RESOLUTION_HEIGHT,
    )
    min_resolution: Tuple[int, int] = (
        constants.MIN_RESOLUTION_WIDTH,
        constants.MIN_RESOLUTION_HEIGHT,
    )
    strict_scaling: bool = False
    log_level: str = "INFO"
    instructions: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.max_resolution = _as_resolution("max_resolution", self.max_resolution)
        self.min_resolution = _as_resolution("min_resolution", self.min_resolution)
        if (
            self.min_resolution[0] > self.max_resolution[0]
            or self.min_resolution[1] > self.max_resolution[1]
        ):
            raise ConfigurationError(
                f"min_resolution {self.min_resolution} exceeds "
                f"max_resolution {self.max_resolution}"
            )
        if self.instruction_timeout <= 0:
            raise ConfigurationError("instruction_timeout must be positive")
        if self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")


def _as_resolution(name: str, value: Any) -> Tuple[int, int]:
    if isinstance(value, str):
        value = value.lower().split("x")
    try:
        width, height = (int(v) for v in value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be [width, height], got {value!r}") from e
    if width <= 0 or height <= 0:
        raise ConfigurationError(f"{name} must be positive, got {width}x{height}")
    return width, height


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Load settings from a YAML file (if given) and the environment.

    Unknown keys are kept in ``Settings.extra`` rather than rejected.
    """
    data: Dict[str, Any] = {}
    if path:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found at {config_path}")
        with open(config_path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Error parsing YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping")

    known = {f.name for f in fields(Settings)}
    kwargs = {k: v for k, v in data.items() if k in known and k != "extra"}
    kwargs["extra"] = {k: v for k, v in data.items() if k not in known}

    kwargs.setdefault("openai_api_key", os.environ.get("OPENAI_API_KEY"))
    kwargs.setdefault("e2b_api_key", os.environ.get("E2B_API_KEY"))
    if "log_level" not in kwargs and os.environ.get("CUA_LOG_LEVEL"):
        kwargs["log_level"] = os.environ["CUA_LOG_LEVEL"]

    try:
        return Settings(**kwargs)
    except TypeError as e:
        raise ConfigurationError(f"Error validating settings: {e}") from e
