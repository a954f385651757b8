"""Propagation CLI commands."""

import argparse
import json
from typing import Any

import yaml

from settings_engine.errors import SettingsEngineError, UnknownSettingError


def parse_assignment(raw: str) -> tuple[str, Any]:
    """Split NAME=VALUE, reading VALUE as a YAML scalar (true, 3, off, ...)."""
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise ValueError(f"Expected NAME=VALUE, got '{raw}'")
    return name.strip(), yaml.safe_load(value)


def cmd_propagate(args: argparse.Namespace) -> int:
    from settings_engine.definitions.reader import load_definitions
    from settings_engine.engine import SettingsEngine

    try:
        engine = SettingsEngine(
            load_definitions(args.definitions),
            max_iterations=args.max_iterations,
        )
        changes = [parse_assignment(raw) for raw in args.changes]
        state = engine.defaults()
        for raw in args.state:
            name, value = parse_assignment(raw)
            if name not in engine.graph:
                raise UnknownSettingError(name)
            state[name] = value
        change_set = engine.plan(changes, state.__getitem__)
    except (SettingsEngineError, FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"ERROR: {e}")
        return 1

    if args.json:
        print(json.dumps(change_set.to_dict(), indent=2, default=str))
    else:
        print(change_set.summary())
    return 0
