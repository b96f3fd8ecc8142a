"""Snapshot store contract.

The engine talks to durable storage only through this protocol. A store owns
snapshot lifetime: it assigns ids, keeps rows, and provides a per-owner
transaction scope in which the engine runs its multi-step commit
(deduplicate, flip the active pointer, purge).

Ordering
--------
`list_by_owner` returns snapshots in ascending creation order
(``created_at``, then ``id``). Callers that want "newest first" reverse it.
"""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import AbstractContextManager
from typing import Protocol

from versionable.core.contracts.snapshot import OwnerRef, Snapshot


class SnapshotStore(Protocol):
    """Durable storage for snapshots, keyed by owning-record identity."""

    def insert(self, snapshot: Snapshot) -> int:
        """Persist a new snapshot and return the id the store assigned."""
        ...

    def update(self, snapshot: Snapshot) -> None:
        """Overwrite the stored row with the same id (used to flip ``active``)."""
        ...

    def get(self, snapshot_id: int) -> Snapshot | None:
        """Return one snapshot by id, or None."""
        ...

    def list_by_owner(self, ref: OwnerRef) -> list[Snapshot]:
        """Return every snapshot of ``ref`` in ascending creation order."""
        ...

    def count_by_owner(self, ref: OwnerRef) -> int: ...

    def set_active_for_owner(self, ref: OwnerRef, active: bool) -> None:
        """Set the active flag on every snapshot of ``ref``."""
        ...

    def delete_many(self, ids: Iterable[int]) -> None: ...

    def transaction(self, ref: OwnerRef) -> AbstractContextManager[None]:
        """Serialize commits for ``ref``; roll back on error.

        Must be re-entrant for the same owner within one execution context.
        """
        ...


__all__ = ["SnapshotStore"]
