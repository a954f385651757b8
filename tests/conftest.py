"""Shared test fixtures for settings-engine."""

from pathlib import Path

import pytest

from settings_engine.definitions.reader import load_definitions
from settings_engine.engine import SettingsEngine

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("SETTINGS_ENGINE_MAX_ITERATIONS", raising=False)
    monkeypatch.delenv("SETTINGS_ENGINE_DEFINITIONS", raising=False)


@pytest.fixture
def definitions():
    return load_definitions(FIXTURES / "settings-minimal.yaml")


@pytest.fixture
def engine(definitions):
    return SettingsEngine(definitions)


@pytest.fixture
def state(engine):
    return engine.defaults()
