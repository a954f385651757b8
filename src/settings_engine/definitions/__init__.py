"""Definitions module — setting declarations and the files they are read from."""

from settings_engine.definitions.model import (
    CascadeConfig,
    SettingDefinition,
    SyncConfig,
    flatten_tree,
)
from settings_engine.definitions.reader import load_definitions

__all__ = [
    "CascadeConfig",
    "SettingDefinition",
    "SyncConfig",
    "flatten_tree",
    "load_definitions",
]
