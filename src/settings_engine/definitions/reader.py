"""Read setting definition files."""

from pathlib import Path

import yaml

from settings_engine.definitions.model import SettingDefinition, flatten_tree


def read_definitions_file(path: Path | str) -> dict:
    """Read and parse a definitions YAML file.

    Args:
        path: Path to the definitions file.

    Returns:
        Parsed document dict.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        yaml.YAMLError: If the YAML is malformed.
    """
    definitions_path = Path(path)
    with open(definitions_path) as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{definitions_path} is not a YAML mapping")

    return data


def get_settings(document: dict) -> list[dict]:
    """Extract the top-level settings entries from a document."""
    settings = document.get("settings", []) or []
    if not isinstance(settings, list):
        raise ValueError("'settings' must be a list")
    return settings


def load_definitions(path: Path | str) -> list[SettingDefinition]:
    """Load a definitions file into a flat, ordered definition list."""
    return flatten_tree(get_settings(read_definitions_file(path)))
