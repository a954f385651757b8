"""Pending change sets: the write-set one propagation run produces."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator

logger = logging.getLogger(__name__)

# What caused a change to be recorded
INITIAL = "initial"
CASCADE = "cascade"
SYNC = "sync"
CALLBACK = "callback"


@dataclass
class Change:
    """A single pending write."""

    name: str
    old_value: Any
    new_value: Any
    wave: int = 0
    writes: int = 1
    via: str = INITIAL
    source: str | None = None

    @property
    def changed(self) -> bool:
        return self.old_value != self.new_value

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "wave": self.wave,
            "writes": self.writes,
            "via": self.via,
            "source": self.source,
        }


class PendingChangeSet:
    """Ordered, deduplicated setting writes keyed by setting name.

    Entries keep the position of their first write; a later write with a
    different value replaces the value in place.
    """

    def __init__(self) -> None:
        self._changes: dict[str, Change] = {}
        self.iterations = 0

    def __iter__(self) -> Iterator[Change]:
        return iter(list(self._changes.values()))

    def __len__(self) -> int:
        return len(self._changes)

    def __contains__(self, name: object) -> bool:
        return name in self._changes

    def __getitem__(self, name: str) -> Change:
        return self._changes[name]

    def record(
        self,
        name: str,
        new_value: Any,
        read_current_value: Callable[[str], Any],
        wave: int = 0,
        via: str = INITIAL,
        source: str | None = None,
    ) -> bool:
        """Record a write. Returns False when it changes nothing."""
        existing = self._changes.get(name)
        if existing is not None:
            if existing.new_value == new_value:
                return False
            logger.warning(
                "Setting '%s' rewritten in wave %d: %r -> %r (via %s from %s)",
                name, wave, existing.new_value, new_value, via, source,
            )
            existing.new_value = new_value
            existing.wave = wave
            existing.writes += 1
            existing.via = via
            existing.source = source
            return True

        old_value = read_current_value(name)
        if old_value == new_value:
            return False
        self._changes[name] = Change(name, old_value, new_value, wave, 1, via, source)
        return True

    def discard_noops(self) -> None:
        """Drop entries whose final value equals the value they started from."""
        self._changes = {k: v for k, v in self._changes.items() if v.changed}

    def writes(self) -> list[tuple[str, Any]]:
        return [(c.name, c.new_value) for c in self._changes.values()]

    def as_dict(self) -> dict[str, Any]:
        return {c.name: c.new_value for c in self._changes.values()}

    def to_dict(self) -> dict[str, Any]:
        return {
            "iterations": self.iterations,
            "changes": [c.to_dict() for c in self._changes.values()],
        }

    def summary(self) -> str:
        lines = [f"Pending changes: {len(self._changes)} (waves: {self.iterations})"]
        if not self._changes:
            lines.append("  No settings change.")
            return "\n".join(lines)
        for c in self._changes.values():
            cause = c.via if c.source is None else f"{c.via} from {c.source}"
            lines.append(
                f"  [{c.wave}] {c.name}: {c.old_value!r} -> {c.new_value!r} ({cause})"
            )
        return "\n".join(lines)
