"""Compile setting definitions into an immutable dependency graph.

The graph is built once per model, after every setting has been declared,
and shared read-only by every propagation run afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Sequence

from settings_engine.config import resolve_max_iterations
from settings_engine.definitions.model import (
    BACKWARD,
    BIDIRECTIONAL,
    FORWARD,
    INVERSE,
    SYNC_MODES,
    SettingDefinition,
)
from settings_engine.errors import (
    DuplicateSettingError,
    InvalidSyncModeError,
    UnknownParentError,
    UnknownSettingError,
    UnknownSyncTarget,
)
from settings_engine.graph.cycles import check_acyclic, topological_order

logger = logging.getLogger(__name__)

Transform = Callable[[list[SettingDefinition]], Iterable[SettingDefinition]]


def _mirror(value: Any) -> Any:
    return value


def _inverter(source: SettingDefinition, target: SettingDefinition) -> Callable[[Any], Any]:
    """Map source's on/off values onto target's off/on values."""

    def invert(value: Any) -> Any:
        if source.is_enabled(value):
            return target.off_value
        if source.is_disabled(value):
            return target.on_value
        return not value

    return invert


@dataclass(frozen=True)
class SyncEdge:
    """A data-flow edge: a change on ``source`` writes ``target``."""

    source: str
    target: str
    mode: str = FORWARD
    declared: bool = True
    transform: Callable[[Any], Any] = field(default=_mirror, compare=False, repr=False)

    def value_for(self, value: Any) -> Any:
        return self.transform(value)


@dataclass(frozen=True)
class DependencyGraph:
    """Cascade and sync adjacency for one model's settings."""

    definitions: tuple[SettingDefinition, ...]
    index: Mapping[str, int]
    parents: tuple[int | None, ...]
    children: Mapping[str, tuple[str, ...]]
    cascade_children: Mapping[str, tuple[tuple[str, str], ...]]
    sync_edges: Mapping[str, tuple[SyncEdge, ...]]
    sync_order: tuple[str, ...]
    sync_ranks: Mapping[str, int]
    max_iterations: int

    @property
    def nodes(self) -> tuple[str, ...]:
        return tuple(d.name for d in self.definitions)

    def __contains__(self, name: object) -> bool:
        return name in self.index

    def __len__(self) -> int:
        return len(self.definitions)

    def definition(self, name: str) -> SettingDefinition:
        try:
            return self.definitions[self.index[name]]
        except KeyError:
            raise UnknownSettingError(name) from None

    def sync_rank(self, name: str) -> int:
        """Position of name in sync_order; unsynced settings sort last."""
        return self.sync_ranks.get(name, len(self.sync_order))

    def summary(self) -> str:
        cascade_count = sum(len(v) for v in self.cascade_children.values())
        sync_count = sum(len(v) for v in self.sync_edges.values())
        lines = [
            f"Dependency Graph: {len(self.definitions)} settings, "
            f"{cascade_count} cascade edges, {sync_count} sync edges",
        ]
        if self.cascade_children:
            lines.append("\nCascade edges:")
            for parent, edges in self.cascade_children.items():
                for child, trigger in edges:
                    lines.append(f"  {parent} --[{trigger}]--> {child}")
        if self.sync_edges:
            lines.append("\nSync edges:")
            for edges in self.sync_edges.values():
                for edge in edges:
                    suffix = "" if edge.declared else " (reverse)"
                    lines.append(f"  {edge.source} --[{edge.mode}]--> {edge.target}{suffix}")
        if self.sync_order:
            lines.append(f"\nSync order: {' -> '.join(self.sync_order)}")
        lines.append(f"Max iterations: {self.max_iterations}")
        return "\n".join(lines)


def declared_adjacency(sync_edges: Mapping[str, Iterable[SyncEdge]]) -> dict[str, list[str]]:
    """Adjacency of declared sync edges only (reverse halves excluded)."""
    adjacency: dict[str, list[str]] = {}
    for source, edges in sync_edges.items():
        targets = [e.target for e in edges if e.declared]
        if targets:
            adjacency[source] = targets
    return adjacency


def sync_edges_for(
    definition: SettingDefinition,
    target: SettingDefinition,
) -> list[SyncEdge]:
    mode = definition.sync.mode
    name = definition.name
    if mode == FORWARD:
        return [SyncEdge(target.name, name, FORWARD)]
    if mode == BACKWARD:
        return [SyncEdge(name, target.name, BACKWARD)]
    if mode == BIDIRECTIONAL:
        return [
            SyncEdge(target.name, name, BIDIRECTIONAL),
            SyncEdge(name, target.name, BIDIRECTIONAL, declared=False),
        ]
    return [SyncEdge(target.name, name, INVERSE, transform=_inverter(target, definition))]


def build_graph(
    definitions: Sequence[SettingDefinition],
    transforms: Sequence[Transform] = (),
    max_iterations: int | None = None,
) -> DependencyGraph:
    """Compile setting definitions into a DependencyGraph.

    Args:
        definitions: All settings, parents before their children.
        transforms: Functions applied in order to the definition list
            before compiling.
        max_iterations: Propagation wave cap; see config.resolve_max_iterations.

    Returns:
        The compiled, immutable graph.

    Raises:
        DuplicateSettingError: A name is declared twice.
        UnknownParentError: A parent is missing or declared later.
        InvalidSyncModeError: A sync mode is not recognised.
        UnknownSyncTarget: A sync target does not exist.
        CyclicSyncError: Sync declarations form a cycle.
    """
    settings = list(definitions)
    for transform in transforms:
        settings = list(transform(settings))

    index: dict[str, int] = {}
    parents: list[int | None] = []
    children: dict[str, list[str]] = {}

    for position, definition in enumerate(settings):
        name = definition.name
        if name in index:
            raise DuplicateSettingError(name)
        if definition.parent is None:
            parents.append(None)
        elif definition.parent in index:
            parents.append(index[definition.parent])
            children.setdefault(definition.parent, []).append(name)
        else:
            raise UnknownParentError(name, definition.parent)
        if definition.sync and definition.sync.mode not in SYNC_MODES:
            raise InvalidSyncModeError(name, definition.sync.mode, SYNC_MODES)
        index[name] = position

    cascade_children: dict[str, tuple[tuple[str, str], ...]] = {}
    for definition in settings:
        kids = children.get(definition.name)
        if not kids or not definition.cascade:
            continue
        triggers = definition.cascade.triggers()
        if triggers:
            cascade_children[definition.name] = tuple(
                (child, trigger) for child in kids for trigger in triggers
            )

    sync_edges: dict[str, list[SyncEdge]] = {}
    for definition in settings:
        if not definition.sync:
            continue
        target_name = definition.sync.target
        if target_name not in index:
            raise UnknownSyncTarget(definition.name, target_name)
        for edge in sync_edges_for(definition, settings[index[target_name]]):
            sync_edges.setdefault(edge.source, []).append(edge)

    frozen_edges = {k: tuple(v) for k, v in sync_edges.items()}
    names = [d.name for d in settings]
    adjacency = declared_adjacency(frozen_edges)
    check_acyclic(adjacency, names)
    touched = _touched(adjacency)
    sync_order = tuple(n for n in topological_order(adjacency, names) if n in touched)

    graph = DependencyGraph(
        definitions=tuple(settings),
        index=MappingProxyType(index),
        parents=tuple(parents),
        children=MappingProxyType({k: tuple(v) for k, v in children.items()}),
        cascade_children=MappingProxyType(cascade_children),
        sync_edges=MappingProxyType(frozen_edges),
        sync_order=sync_order,
        sync_ranks=MappingProxyType({n: i for i, n in enumerate(sync_order)}),
        max_iterations=resolve_max_iterations(len(settings), max_iterations),
    )
    logger.info(
        "Compiled %d settings (%d cascading parents, %d sync sources, max_iterations=%d)",
        len(settings), len(cascade_children), len(frozen_edges), graph.max_iterations,
    )
    return graph


def _touched(adjacency: Mapping[str, Iterable[str]]) -> set[str]:
    """Every node that takes part in a declared sync edge."""
    nodes = set(adjacency)
    for targets in adjacency.values():
        nodes.update(targets)
    return nodes
