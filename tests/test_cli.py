"""Tests for the CLI.

Covers:
- Parser construction and argument parsing
- --help for every command
- check / graph / propagate against fixture definitions
- Error handling for invalid inputs
"""

import argparse
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from settings_engine.cli import build_parser, main
from settings_engine.cli.propagate import parse_assignment

FIXTURES = Path(__file__).parent / "fixtures"
MINIMAL = str(FIXTURES / "settings-minimal.yaml")
CYCLE = str(FIXTURES / "settings-cycle.yaml")
BROKEN = str(FIXTURES / "settings-broken.yaml")


def run(*argv):
    with patch("sys.argv", ["settings-engine", *argv]):
        return main()


# ── Parser construction ──────────────────────────────────────────


class TestParserConstruction:
    def test_build_parser_returns_parser(self):
        assert isinstance(build_parser(), argparse.ArgumentParser)

    def test_no_args_shows_help(self, capsys):
        assert run() == 0
        assert "settings-engine" in capsys.readouterr().out

    def test_definitions_flag(self):
        args = build_parser().parse_args(["--definitions", "/tmp/x.yaml", "check"])
        assert args.definitions == "/tmp/x.yaml"

    def test_definitions_default_from_env(self, monkeypatch):
        monkeypatch.setenv("SETTINGS_ENGINE_DEFINITIONS", "/tmp/env.yaml")
        args = build_parser().parse_args(["check"])
        assert args.definitions == "/tmp/env.yaml"

    def test_propagate_args(self):
        args = build_parser().parse_args([
            "propagate", "a=true", "b=false", "--state", "c=true", "--json",
        ])
        assert args.changes == ["a=true", "b=false"]
        assert args.state == ["c=true"]
        assert args.json

    @pytest.mark.parametrize("cmd", [
        ["--help"],
        ["check", "--help"],
        ["graph", "--help"],
        ["propagate", "--help"],
    ])
    def test_help_exits_zero(self, cmd):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(cmd)
        assert exc_info.value.code == 0


class TestParseAssignment:
    def test_yaml_scalars(self):
        assert parse_assignment("a=true") == ("a", True)
        assert parse_assignment("a=off") == ("a", False)
        assert parse_assignment("a=3") == ("a", 3)
        assert parse_assignment("a=gold") == ("a", "gold")

    @pytest.mark.parametrize("raw", ["novalue", "=true"])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_assignment(raw)


# ── Commands ─────────────────────────────────────────────────────


class TestCheck:
    def test_passes(self, capsys):
        assert run("--definitions", MINIMAL, "check") == 0
        out = capsys.readouterr().out
        assert "11 settings checked" in out
        assert "PASS" in out

    def test_reports_all_violations(self, capsys):
        assert run("--definitions", BROKEN, "check") == 1
        out = capsys.readouterr().out
        assert "Duplicate setting: feature" in out
        assert "Unknown parent: orphan -> missing" in out
        assert "Invalid sync mode: odd (sideways)" in out
        assert "Unknown sync target: feature -> nonexistent" in out
        assert "FAIL" in out

    def test_missing_file(self, capsys):
        assert run("--definitions", "/nonexistent/settings.yaml", "check") == 1
        assert "ERROR" in capsys.readouterr().out


class TestGraph:
    def test_prints_graph(self, capsys):
        assert run("--definitions", MINIMAL, "graph") == 0
        out = capsys.readouterr().out
        assert "premium --[forward]--> premium_badge" in out
        assert "Sync order: premium -> theme_dark -> premium_badge -> ads_enabled -> dark_mode" in out

    def test_max_iterations_flag(self, capsys):
        assert run("--definitions", MINIMAL, "--max-iterations", "7", "graph") == 0
        assert "Max iterations: 7" in capsys.readouterr().out

    def test_cycle(self, capsys):
        assert run("--definitions", CYCLE, "graph") == 1
        assert "a -> b -> a" in capsys.readouterr().out


class TestPropagate:
    def test_summary(self, capsys):
        assert run("--definitions", MINIMAL, "propagate", "premium=true") == 0
        out = capsys.readouterr().out
        assert "Pending changes: 3" in out
        assert "premium_badge: False -> True (sync from premium)" in out
        assert "ads_enabled: True -> False (sync from premium)" in out

    def test_state(self, capsys):
        rc = run(
            "--definitions", MINIMAL, "propagate", "billing_enabled=false",
            "--state", "billing_enabled=true", "--state", "invoices=true",
        )
        assert rc == 0
        out = capsys.readouterr().out
        assert "invoices: True -> False (cascade from billing_enabled)" in out
        assert "receipts" not in out

    def test_json(self, capsys):
        assert run("--definitions", MINIMAL, "propagate", "dark_mode=true", "--json") == 0
        data = json.loads(capsys.readouterr().out)
        assert data["iterations"] == 3
        assert [c["name"] for c in data["changes"]] == ["dark_mode", "theme_dark"]

    def test_unknown_setting(self, capsys):
        assert run("--definitions", MINIMAL, "propagate", "ghost=true") == 1
        assert "Unknown setting 'ghost'" in capsys.readouterr().out

    def test_unknown_state_setting(self, capsys):
        rc = run("--definitions", MINIMAL, "propagate", "premium=true", "--state", "ghost=1")
        assert rc == 1

    def test_bad_assignment(self, capsys):
        assert run("--definitions", MINIMAL, "propagate", "premium") == 1
        assert "NAME=VALUE" in capsys.readouterr().out

    def test_runaway_is_reported(self, capsys, tmp_path):
        path = tmp_path / "loop.yaml"
        path.write_text(
            "settings:\n"
            "  - name: parent\n"
            "    cascade: true\n"
            "    sync: {target: child, mode: inverse}\n"
            "    settings:\n"
            "      - name: child\n"
        )
        rc = run("--definitions", str(path), "--max-iterations", "10", "propagate", "parent=true")
        assert rc == 1
        assert "Infinite cascade detected after 10 iterations (max: 10)" in capsys.readouterr().out
