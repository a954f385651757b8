"""Engine configuration.

Resolves defaults from environment variables, falling back to conventional
values.

Environment variables:
    SETTINGS_ENGINE_DEFINITIONS — definitions file (default: ./settings.yaml)
    SETTINGS_ENGINE_MAX_ITERATIONS — propagation wave cap override
"""

from __future__ import annotations

import os
from pathlib import Path

from settings_engine.errors import ConfigurationError

# Wave cap floor; graphs larger than this get len(settings) + 1
MAX_ITERATIONS = 100

_DEFAULT_DEFINITIONS = "settings.yaml"


def definitions_path() -> Path:
    """Return the default setting definitions file."""
    return Path(os.environ.get("SETTINGS_ENGINE_DEFINITIONS", _DEFAULT_DEFINITIONS))


def max_iterations_override() -> int | None:
    """Return the wave cap set in the environment, if any."""
    raw = os.environ.get("SETTINGS_ENGINE_MAX_ITERATIONS")
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(
            f"SETTINGS_ENGINE_MAX_ITERATIONS must be an integer, got '{raw}'"
        ) from None
    if value < 1:
        raise ConfigurationError(
            f"SETTINGS_ENGINE_MAX_ITERATIONS must be positive, got {value}"
        )
    return value


def resolve_max_iterations(setting_count: int, override: int | None = None) -> int:
    """Pick the wave cap for a graph of setting_count settings.

    An explicit override wins, then the environment, then
    max(MAX_ITERATIONS, setting_count + 1).
    """
    if override is not None:
        if override < 1:
            raise ConfigurationError(f"max_iterations must be positive, got {override}")
        return override
    env = max_iterations_override()
    if env is not None:
        return env
    return max(MAX_ITERATIONS, setting_count + 1)
