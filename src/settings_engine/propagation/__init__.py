"""Propagation module — plan and apply cascaded and synced setting writes."""

from settings_engine.propagation.changes import Change, PendingChangeSet
from settings_engine.propagation.planner import apply_changes, propagate

__all__ = ["Change", "PendingChangeSet", "apply_changes", "propagate"]
