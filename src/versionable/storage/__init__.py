"""Snapshot store contract and the bundled adapters."""

from __future__ import annotations

from .base import SnapshotStore
from .memory import InMemorySnapshotStore
from .sqlite import SqliteSnapshotStore

__all__ = ["InMemorySnapshotStore", "SnapshotStore", "SqliteSnapshotStore"]
