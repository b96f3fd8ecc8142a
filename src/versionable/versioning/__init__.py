"""Snapshot lifecycle: differ, policy, builder, deduplicator, active pointer, purger, engine."""

from __future__ import annotations

from .context import CyclePhase, VersioningContext
from .engine import CommitResult, CommitStatus, VersioningEngine

__all__ = [
    "CommitResult",
    "CommitStatus",
    "CyclePhase",
    "VersioningContext",
    "VersioningEngine",
]
