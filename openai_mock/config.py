"""
Service configuration.

Settings are resolved once at startup, in increasing order of precedence:

1. Built-in defaults (port 8080, no latency, two chat models, one embedding model)
2. An optional JSON config file
3. Explicit overrides from the command line or environment

A config file that cannot be loaded is not fatal: the defaults are used and a
warning is logged. The resulting ``ServiceConfig`` is frozen and shared
read-only by every request handler.

Config file format::

    {
        "port": 8080,
        "min_latency": "100ms",
        "max_latency": "500ms",
        "models": {
            "chat": ["gpt-3.5-turbo", "gpt-4"],
            "embedding": ["text-embedding-ada-002"]
        }
    }
"""

import json
import logging
import re
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080
DEFAULT_HOST = "0.0.0.0"
DEFAULT_CHAT_MODELS = ("gpt-3.5-turbo", "gpt-4")
DEFAULT_EMBEDDING_MODELS = ("text-embedding-ada-002",)

# Seconds per unit for Go-style duration strings ("300ms", "1.5s", "1m30s")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


class ConfigError(Exception):
    """Raised when a configuration source cannot be used."""


class ServiceConfig(BaseModel):
    """Immutable runtime settings. Latencies are in seconds."""
    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    min_latency: float = 0.0
    max_latency: float = 0.0
    chat_models: Tuple[str, ...] = DEFAULT_CHAT_MODELS
    embedding_models: Tuple[str, ...] = DEFAULT_EMBEDDING_MODELS


def parse_duration(text: str) -> float:
    """
    Parse a duration string such as ``"250ms"`` or ``"1m30s"`` into seconds.

    Raises:
        ConfigError: for empty, malformed or negative durations.
    """
    value = text.strip()
    if value == "0":
        return 0.0
    if not value or _DURATION_PART.sub("", value):
        raise ConfigError(f"invalid duration {text!r}")
    return sum(
        float(number) * _DURATION_UNITS[unit]
        for number, unit in _DURATION_PART.findall(value)
    )


def load_config(path: str) -> ServiceConfig:
    """
    Load settings from a JSON config file. Keys that are absent keep their defaults.

    Raises:
        ConfigError: if the file is unreadable, not valid JSON, or holds invalid values.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except (OSError, ValueError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")

    values = {}
    if "port" in raw:
        values["port"] = raw["port"]
    for key in ("min_latency", "max_latency"):
        if key in raw:
            if not isinstance(raw[key], str):
                raise ConfigError(f"invalid {key}: expected a duration string")
            values[key] = parse_duration(raw[key])

    models = raw.get("models") or {}
    if not isinstance(models, dict):
        raise ConfigError("invalid models: expected an object")
    if "chat" in models:
        values["chat_models"] = models["chat"] or ()
    if "embedding" in models:
        values["embedding_models"] = models["embedding"] or ()

    try:
        return ServiceConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"invalid config file {path}: {e}") from e


def resolve_config(
    config_path: Optional[str] = None,
    port: Optional[int] = None,
    min_latency: Optional[float] = None,
    max_latency: Optional[float] = None,
    host: Optional[str] = None,
) -> ServiceConfig:
    """Combine defaults, the optional config file and explicit overrides."""
    config = ServiceConfig()
    if config_path:
        try:
            config = load_config(config_path)
        except ConfigError as e:
            logger.warning("Failed to load config file: %s. Using default and command-line settings.", e)

    overrides = {
        key: value
        for key, value in (
            ("port", port),
            ("min_latency", min_latency),
            ("max_latency", max_latency),
            ("host", host),
        )
        if value is not None
    }
    if overrides:
        config = config.model_copy(update=overrides)

    if config.min_latency > config.max_latency:
        logger.warning(
            "min_latency (%ss) exceeds max_latency (%ss); using a fixed delay of %ss",
            config.min_latency, config.max_latency, config.min_latency,
        )
    return config
