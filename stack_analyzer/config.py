"""Environment-driven settings.

Values come from the process environment, optionally seeded from a ``.env``
file (existing environment variables win over the file):

    GOSTACK_MAX_ANCESTOR_DEPTH  limit for "originating from" chains (default 1000)
    GOSTACK_LOG_LEVEL           logging level name for the CLI (default WARNING)
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .models import DEFAULT_MAX_ANCESTOR_DEPTH

ENV_MAX_ANCESTOR_DEPTH = "GOSTACK_MAX_ANCESTOR_DEPTH"
ENV_LOG_LEVEL = "GOSTACK_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Raised when an environment setting has an unusable value."""


@dataclass(frozen=True)
class Settings:
    max_ancestor_depth: int = DEFAULT_MAX_ANCESTOR_DEPTH
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


def _read_int(name: str, default: int, minimum: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


def _read_log_level(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    level = raw.strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"{name} must be one of {', '.join(_LOG_LEVELS)}, got {raw!r}")
    return level


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Load settings, reading ``env_file`` first.

    Without ``env_file`` the nearest ``.env`` at or above the working
    directory is used.
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv(find_dotenv(usecwd=True))
    return Settings(
        max_ancestor_depth=_read_int(ENV_MAX_ANCESTOR_DEPTH, DEFAULT_MAX_ANCESTOR_DEPTH, 1),
        log_level=_read_log_level(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL),
    )
