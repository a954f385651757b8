"""Setting definitions: the static input the dependency graph is built from."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

# Sync modes, for a declaration on setting X with target T
FORWARD = "forward"              # X mirrors T
BACKWARD = "backward"            # T mirrors X
BIDIRECTIONAL = "bidirectional"  # both of the above
INVERSE = "inverse"              # X takes the opposite of T

SYNC_MODES = (FORWARD, BACKWARD, BIDIRECTIONAL, INVERSE)

# Cascade triggers
ENABLE = "enable"
DISABLE = "disable"


@dataclass(frozen=True)
class CascadeConfig:
    """Which transitions of a parent are pushed down to its children."""

    enable: bool = False
    disable: bool = False

    def triggers(self) -> tuple[str, ...]:
        found = []
        if self.enable:
            found.append(ENABLE)
        if self.disable:
            found.append(DISABLE)
        return tuple(found)


@dataclass(frozen=True)
class SyncConfig:
    target: str
    mode: str = FORWARD


@dataclass(frozen=True)
class SettingDefinition:
    """A single setting as declared on a model.

    Settings reference their parent by name; the graph builder interns the
    names into indices, so definitions never point at each other.
    """

    name: str
    parent: str | None = None
    cascade: CascadeConfig | None = None
    sync: SyncConfig | None = None
    on_value: Any = True
    off_value: Any = False
    default: Any = None
    description: str | None = None

    def is_enabled(self, value: Any) -> bool:
        return value == self.on_value

    def is_disabled(self, value: Any) -> bool:
        return value == self.off_value

    def initial_value(self) -> Any:
        """Value assumed for a record that has nothing stored yet."""
        return self.off_value if self.default is None else self.default


def _cascade_from(raw: Any) -> CascadeConfig | None:
    if raw is None:
        return None
    if isinstance(raw, CascadeConfig):
        return raw
    if isinstance(raw, bool):
        return CascadeConfig(enable=raw, disable=raw)
    if not isinstance(raw, dict):
        raise ValueError(f"cascade must be a mapping or boolean, got {raw!r}")
    flags = {}
    for key in (ENABLE, DISABLE):
        value = raw.get(key, False)
        if not isinstance(value, bool):
            raise ValueError(f"cascade {key} must be a boolean, got {value!r}")
        flags[key] = value
    return CascadeConfig(**flags)


def _sync_from(raw: Any) -> SyncConfig | None:
    if raw is None:
        return None
    if isinstance(raw, SyncConfig):
        return raw
    if isinstance(raw, str):
        return SyncConfig(target=raw)
    if not isinstance(raw, dict) or "target" not in raw:
        raise ValueError(f"sync must be a mapping with a 'target', got {raw!r}")
    return SyncConfig(target=str(raw["target"]), mode=str(raw.get("mode", FORWARD)))


def definition_from_dict(entry: dict, parent: str | None = None) -> SettingDefinition:
    """Build one SettingDefinition from a plain mapping.

    Nested ``settings`` lists are ignored here; see flatten_tree.
    """
    if not isinstance(entry, dict):
        raise ValueError(f"setting entry must be a mapping, got {entry!r}")
    if "name" not in entry:
        raise ValueError(f"setting entry is missing 'name': {entry!r}")

    kwargs: dict[str, Any] = {}
    for key in ("on_value", "off_value", "default", "description"):
        if key in entry:
            kwargs[key] = entry[key]

    return SettingDefinition(
        name=str(entry["name"]),
        parent=parent if parent is not None else entry.get("parent"),
        cascade=_cascade_from(entry.get("cascade")),
        sync=_sync_from(entry.get("sync")),
        **kwargs,
    )


def flatten_tree(
    entries: Iterable[dict],
    parent: str | None = None,
) -> list[SettingDefinition]:
    """Flatten nested setting entries into an ordered definition list.

    Each entry may carry its own ``settings`` list of children. Parents
    always come before their children in the result.
    """
    flat: list[SettingDefinition] = []
    for entry in entries:
        definition = definition_from_dict(entry, parent)
        flat.append(definition)
        children = entry.get("settings") or []
        flat.extend(flatten_tree(children, definition.name))
    return flat
