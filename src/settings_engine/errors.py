"""Exceptions raised while compiling setting graphs and propagating changes.

Configuration errors are raised at compile time and mean the definitions
must be fixed. Propagation errors are raised at runtime for a single
propagation run; no partial change set is ever handed back.
"""

from __future__ import annotations

from typing import Any


class SettingsEngineError(Exception):
    """Base exception for the settings engine."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(SettingsEngineError):
    """Setting definitions are invalid."""


class UnknownSyncTarget(ConfigurationError):
    """A sync declaration names a setting that does not exist."""

    def __init__(self, setting: str, target: str):
        super().__init__(
            f"Setting '{setting}' syncs with unknown setting '{target}'"
        )
        self.setting = setting
        self.target = target


class CyclicSyncError(ConfigurationError):
    """Sync declarations form a directed cycle."""

    def __init__(self, cycle: list[str]):
        super().__init__(
            f"Cycle detected in sync dependencies: {' -> '.join(cycle)}"
        )
        self.cycle = list(cycle)


class DuplicateSettingError(ConfigurationError):
    def __init__(self, setting: str):
        super().__init__(f"Setting '{setting}' is defined more than once")
        self.setting = setting


class UnknownParentError(ConfigurationError):
    """A setting's parent is missing or declared after the setting."""

    def __init__(self, setting: str, parent: str):
        super().__init__(
            f"Setting '{setting}' is nested under unknown setting '{parent}' "
            "(parents must be defined before their children)"
        )
        self.setting = setting
        self.parent = parent


class InvalidSyncModeError(ConfigurationError):
    def __init__(self, setting: str, mode: Any, valid: tuple[str, ...]):
        super().__init__(
            f"Setting '{setting}' has invalid sync mode '{mode}' "
            f"(valid: {', '.join(valid)})"
        )
        self.setting = setting
        self.mode = mode


class InfiniteCascadeError(SettingsEngineError):
    """Propagation did not settle within the iteration cap."""

    def __init__(self, iterations: int, max_iterations: int):
        super().__init__(
            f"Infinite cascade detected after {iterations} iterations "
            f"(max: {max_iterations})"
        )
        self.iterations = iterations
        self.max_iterations = max_iterations


class UnknownSettingError(SettingsEngineError, KeyError):
    """A runtime change names a setting the graph does not know."""

    def __init__(self, setting: str):
        super().__init__(f"Unknown setting '{setting}'")
        self.setting = setting
