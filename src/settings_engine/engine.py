"""One compiled engine per model: build the graph once, plan and apply many times."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Sequence

from settings_engine.definitions.model import SettingDefinition
from settings_engine.graph.builder import DependencyGraph, Transform, build_graph
from settings_engine.propagation.changes import PendingChangeSet
from settings_engine.propagation.planner import ChangeCallback, apply_changes, propagate

Changes = Mapping[str, Any] | Iterable[tuple[str, Any]]


class SettingsEngine:
    """Compiled cascade/sync rules for one model's settings.

    The graph is built in the constructor and never mutated, so an engine
    can be shared by every record of the model.
    """

    def __init__(
        self,
        definitions: Sequence[SettingDefinition],
        transforms: Sequence[Transform] = (),
        max_iterations: int | None = None,
    ):
        self._graph = build_graph(definitions, transforms, max_iterations)

    @property
    def graph(self) -> DependencyGraph:
        return self._graph

    def defaults(self) -> dict[str, Any]:
        """Initial value of every setting, in definition order."""
        return {d.name: d.initial_value() for d in self._graph.definitions}

    def plan(
        self,
        changes: Changes,
        read_current_value: Callable[[str], Any],
        callbacks: Sequence[ChangeCallback] = (),
    ) -> PendingChangeSet:
        return propagate(self._graph, changes, read_current_value, callbacks)

    def apply(
        self,
        changes: Changes,
        read_current_value: Callable[[str], Any],
        write_value: Callable[[str, Any], None],
        callbacks: Sequence[ChangeCallback] = (),
    ) -> PendingChangeSet:
        """Plan, then write the full change set. Nothing is written on error."""
        change_set = self.plan(changes, read_current_value, callbacks)
        apply_changes(change_set, write_value)
        return change_set
