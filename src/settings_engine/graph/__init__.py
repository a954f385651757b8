"""Graph module — compile definitions, detect sync cycles, validate."""

from settings_engine.graph.builder import DependencyGraph, SyncEdge, build_graph
from settings_engine.graph.cycles import check_acyclic, detect_cycle, topological_order
from settings_engine.graph.validation import ValidationResult, validate_definitions

__all__ = [
    "DependencyGraph",
    "SyncEdge",
    "build_graph",
    "check_acyclic",
    "detect_cycle",
    "topological_order",
    "ValidationResult",
    "validate_definitions",
]
