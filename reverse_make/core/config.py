"""Runtime settings read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

ENV_LOG_LEVEL = "REVERSE_MAKE_LOG_LEVEL"
ENV_LOG_FORMAT = "REVERSE_MAKE_LOG_FORMAT"
ENV_INPUT = "REVERSE_MAKE_INPUT"

DEFAULT_INPUT = "input.td"
LOG_FORMATS = ("console", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    log_format: str = "console"  # "console" | "json"
    input_file: str = DEFAULT_INPUT


def load_settings() -> Settings:
    """Build Settings from the environment.

    Reads:
        REVERSE_MAKE_LOG_LEVEL  — log level (default: INFO)
        REVERSE_MAKE_LOG_FORMAT — console | json (default: console)
        REVERSE_MAKE_INPUT      — default build log path (default: input.td)
    """
    log_format = os.environ.get(ENV_LOG_FORMAT, "console").lower()
    if log_format not in LOG_FORMATS:
        raise ValueError(
            f"{ENV_LOG_FORMAT} must be one of {', '.join(LOG_FORMATS)}, got {log_format!r}"
        )
    log_level = os.environ.get(ENV_LOG_LEVEL, "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(
            f"{ENV_LOG_LEVEL} must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
        )
    return Settings(
        log_level=log_level,
        log_format=log_format,
        input_file=os.environ.get(ENV_INPUT, DEFAULT_INPUT),
    )
