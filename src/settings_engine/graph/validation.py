"""Definition validation — report every problem instead of stopping at the first."""

from dataclasses import dataclass, field
from typing import Sequence

from settings_engine.definitions.model import SYNC_MODES, SettingDefinition
from settings_engine.graph.builder import declared_adjacency, sync_edges_for
from settings_engine.graph.cycles import detect_cycle


@dataclass
class ValidationResult:
    """Result of validating a set of setting definitions."""

    total_settings: int = 0
    cascading_parents: int = 0
    sync_declarations: int = 0
    duplicates: list[str] = field(default_factory=list)
    unknown_parents: list[tuple[str, str]] = field(default_factory=list)
    invalid_modes: list[tuple[str, str]] = field(default_factory=list)
    unknown_targets: list[tuple[str, str]] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not (
            self.duplicates
            or self.unknown_parents
            or self.invalid_modes
            or self.unknown_targets
            or self.cycles
        )

    @property
    def violations(self) -> list[str]:
        v = []
        for name in self.duplicates:
            v.append(f"Duplicate setting: {name}")
        for name, parent in self.unknown_parents:
            v.append(f"Unknown parent: {name} -> {parent}")
        for name, mode in self.invalid_modes:
            v.append(f"Invalid sync mode: {name} ({mode})")
        for name, target in self.unknown_targets:
            v.append(f"Unknown sync target: {name} -> {target}")
        for c in self.cycles:
            v.append(f"Sync cycle: {' -> '.join(c)}")
        return v

    def summary(self) -> str:
        lines = [
            f"Settings Validation: {self.total_settings} settings checked",
            f"  Cascading parents: {self.cascading_parents}",
            f"  Sync declarations: {self.sync_declarations}",
        ]
        if self.violations:
            lines.append(f"ERRORS ({len(self.violations)}):")
            for v in self.violations:
                lines.append(f"  {v}")
        else:
            lines.append("All checks passed.")
        return "\n".join(lines)


def validate_definitions(definitions: Sequence[SettingDefinition]) -> ValidationResult:
    """Check definitions without compiling them.

    Checks:
    1. Names are unique
    2. Parents exist and are declared first
    3. Sync modes are known
    4. Sync targets exist
    5. Declared sync edges are acyclic

    Args:
        definitions: Flat definition list.

    Returns:
        ValidationResult with all findings.
    """
    result = ValidationResult(total_settings=len(definitions))
    by_name: dict[str, SettingDefinition] = {}
    children: set[str] = set()

    for definition in definitions:
        if definition.name in by_name:
            result.duplicates.append(definition.name)
            continue
        if definition.parent is not None:
            if definition.parent not in by_name:
                result.unknown_parents.append((definition.name, definition.parent))
            else:
                children.add(definition.parent)
        by_name[definition.name] = definition

    result.cascading_parents = sum(
        1 for name in children
        if by_name[name].cascade and by_name[name].cascade.triggers()
    )

    edges: dict[str, list] = {}
    for definition in by_name.values():
        if not definition.sync:
            continue
        result.sync_declarations += 1
        if definition.sync.mode not in SYNC_MODES:
            result.invalid_modes.append((definition.name, definition.sync.mode))
            continue
        target = by_name.get(definition.sync.target)
        if target is None:
            result.unknown_targets.append((definition.name, definition.sync.target))
            continue
        for edge in sync_edges_for(definition, target):
            edges.setdefault(edge.source, []).append(edge)

    cycle = detect_cycle(declared_adjacency(edges), list(by_name))
    if cycle:
        result.cycles.append(cycle)

    return result
