"""Definition CLI commands."""

import argparse

import yaml

from settings_engine.errors import SettingsEngineError


def cmd_check(args: argparse.Namespace) -> int:
    from settings_engine.definitions.reader import load_definitions
    from settings_engine.graph.validation import validate_definitions

    try:
        definitions = load_definitions(args.definitions)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"ERROR: {e}")
        return 1

    result = validate_definitions(definitions)
    print(result.summary())
    print(f"\n  Result: {'PASS' if result.passed else 'FAIL'}")
    return 0 if result.passed else 1


def cmd_graph(args: argparse.Namespace) -> int:
    from settings_engine.definitions.reader import load_definitions
    from settings_engine.graph.builder import build_graph

    try:
        graph = build_graph(load_definitions(args.definitions), max_iterations=args.max_iterations)
    except (SettingsEngineError, FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"ERROR: {e}")
        return 1

    print(graph.summary())
    return 0
