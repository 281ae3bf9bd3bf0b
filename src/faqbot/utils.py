"""Shared utility functions.

Provides:
  - faqbot_dir(): resolve config directory from FAQBOT_DIR env var.
  - env_int() / env_float(): read positive numbers from the environment.
"""

import os
from pathlib import Path

FAQBOT_DIR_ENV = "FAQBOT_DIR"


def faqbot_dir() -> Path:
    """Resolve config directory from FAQBOT_DIR env var or default ~/.faqbot."""
    raw = os.environ.get(FAQBOT_DIR_ENV, "")
    return Path(raw) if raw else Path.home() / ".faqbot"


def env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def env_float(name: str, default: float) -> float:
    """Read a positive number from the environment."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value
