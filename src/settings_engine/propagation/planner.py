"""Wave-based propagation of setting changes across cascades and syncs."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Sequence

from settings_engine.definitions.model import DISABLE, ENABLE
from settings_engine.errors import InfiniteCascadeError, UnknownSettingError
from settings_engine.graph.builder import DependencyGraph
from settings_engine.propagation.changes import (
    CALLBACK,
    CASCADE,
    INITIAL,
    SYNC,
    Change,
    PendingChangeSet,
)

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[Change], Iterable[tuple[str, Any]] | None]

# (name, value, via, source)
_Queued = tuple[str, Any, str, str | None]


def _seed(changed_settings: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> list[_Queued]:
    items = changed_settings.items() if isinstance(changed_settings, Mapping) else changed_settings
    return [(name, value, INITIAL, None) for name, value in items]


def _cascade_writes(graph: DependencyGraph, name: str, value: Any) -> list[_Queued]:
    definition = graph.definition(name)
    queued = []
    for child, trigger in graph.cascade_children.get(name, ()):
        child_def = graph.definition(child)
        if trigger == ENABLE and definition.is_enabled(value):
            queued.append((child, child_def.on_value, CASCADE, name))
        elif trigger == DISABLE and definition.is_disabled(value):
            queued.append((child, child_def.off_value, CASCADE, name))
    return queued


def _sync_writes(graph: DependencyGraph, name: str, value: Any) -> list[_Queued]:
    return [
        (edge.target, edge.value_for(value), SYNC, name)
        for edge in graph.sync_edges.get(name, ())
    ]


def propagate(
    graph: DependencyGraph,
    changed_settings: Mapping[str, Any] | Iterable[tuple[str, Any]],
    read_current_value: Callable[[str], Any],
    callbacks: Sequence[ChangeCallback] = (),
) -> PendingChangeSet:
    """Compute every write that follows from changing some settings.

    Changes are processed in breadth-first waves. Each wave records its
    changes, then queues cascaded children, then synced targets (in the
    graph's sync order), then whatever the callbacks return; the queue
    becomes the next wave.

    Args:
        graph: Compiled dependency graph.
        changed_settings: name -> new value (mapping or pairs) as assigned.
        read_current_value: Returns a setting's value before this run.
        callbacks: Called with each recorded Change; may return extra
            (name, value) writes for the next wave.

    Returns:
        The PendingChangeSet, in wave order, holding only real changes.

    Raises:
        InfiniteCascadeError: Waves kept coming past graph.max_iterations.
        UnknownSettingError: A change names a setting not in the graph.
    """
    change_set = PendingChangeSet()
    wave = _seed(changed_settings)
    iteration = 0

    while wave:
        if iteration >= graph.max_iterations:
            raise InfiniteCascadeError(iteration, graph.max_iterations)

        # Expanded only once the whole wave is recorded, with final values
        accepted: dict[str, None] = {}
        for name, value, via, source in wave:
            if name not in graph:
                raise UnknownSettingError(name)
            if change_set.record(name, value, read_current_value, iteration, via, source):
                accepted[name] = None

        logger.debug(
            "Wave %d: %d queued, %d recorded", iteration, len(wave), len(accepted)
        )

        queued: list[_Queued] = []
        for name in accepted:
            queued.extend(_cascade_writes(graph, name, change_set[name].new_value))
        for name in sorted(accepted, key=graph.sync_rank):
            queued.extend(_sync_writes(graph, name, change_set[name].new_value))
        for callback in callbacks:
            for name in accepted:
                extra = callback(change_set[name]) or ()
                queued.extend((n, v, CALLBACK, name) for n, v in extra)

        wave = queued
        iteration += 1

    change_set.iterations = iteration
    change_set.discard_noops()
    return change_set


def apply_changes(
    change_set: PendingChangeSet,
    write_value: Callable[[str, Any], None],
) -> int:
    """Write every pending change in order. Returns the number written."""
    count = 0
    for change in change_set:
        write_value(change.name, change.new_value)
        count += 1
    return count
