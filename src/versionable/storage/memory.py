"""
In-Memory Snapshot Store.

A dictionary-backed implementation of the `SnapshotStore` protocol, useful for
tests, scripts, and hosts that keep their records in memory too.

Responsibilities
----------------
- **Insert**: Assign monotonically increasing ids.
- **Read**: Per-owner history in creation order, counts, lookups by id.
- **Update/Delete**: Flip active flags and drop purged rows.
- **Transactions**: One re-entrant lock per owner. If the block raises, the
  owner's rows are restored to their state at entry.

Note on Persistence
-------------------
This is a volatile store. If the process exits, all history is lost. Use
`SqliteSnapshotStore` when history has to outlive the process.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from versionable.core.contracts.snapshot import OwnerRef, Snapshot


class InMemorySnapshotStore:
    """
    A simple dictionary-backed store for Snapshot objects.
    """

    def __init__(self) -> None:
        self._rows: dict[int, Snapshot] = {}
        self._next_id: int = 1
        self._guard = threading.Lock()
        self._owner_locks: dict[OwnerRef, threading.RLock] = {}
        # Per-thread nesting depth, keyed by owner, so only the outermost
        # transaction takes the rollback copy.
        self._local = threading.local()

    # ------------------------------- CRUD -----------------------------------

    def insert(self, snapshot: Snapshot) -> int:
        with self._guard:
            snapshot_id = self._next_id
            self._next_id += 1
            self._rows[snapshot_id] = snapshot.model_copy(update={"id": snapshot_id})
        return snapshot_id

    def update(self, snapshot: Snapshot) -> None:
        with self._guard:
            if snapshot.id is None or snapshot.id not in self._rows:
                raise KeyError(f"cannot update unknown snapshot {snapshot.id!r}")
            self._rows[snapshot.id] = snapshot

    def get(self, snapshot_id: int) -> Snapshot | None:
        with self._guard:
            return self._rows.get(snapshot_id)

    def list_by_owner(self, ref: OwnerRef) -> list[Snapshot]:
        with self._guard:
            owned = [s for s in self._rows.values() if s.belongs_to(ref)]
        return sorted(owned, key=Snapshot.sort_key)

    def count_by_owner(self, ref: OwnerRef) -> int:
        with self._guard:
            return sum(1 for s in self._rows.values() if s.belongs_to(ref))

    def set_active_for_owner(self, ref: OwnerRef, active: bool) -> None:
        with self._guard:
            for snapshot_id, snap in list(self._rows.items()):
                if snap.belongs_to(ref) and snap.active != active:
                    self._rows[snapshot_id] = snap.with_active(active)

    def delete_many(self, ids: Iterable[int]) -> None:
        with self._guard:
            for snapshot_id in ids:
                self._rows.pop(snapshot_id, None)

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._rows)

    # ---------------------------- Transactions ------------------------------

    def _owner_lock(self, ref: OwnerRef) -> threading.RLock:
        with self._guard:
            lock = self._owner_locks.get(ref)
            if lock is None:
                lock = self._owner_locks[ref] = threading.RLock()
            return lock

    @contextmanager
    def transaction(self, ref: OwnerRef) -> Iterator[None]:
        """Hold the owner's lock; restore the owner's rows if the block raises."""
        depth: dict[OwnerRef, int] | None = getattr(self._local, "depth", None)
        if depth is None:
            depth = self._local.depth = {}
        with self._owner_lock(ref):
            outermost = depth.get(ref, 0) == 0
            saved = {s.id: s for s in self.list_by_owner(ref)} if outermost else {}
            depth[ref] = depth.get(ref, 0) + 1
            try:
                yield
            except BaseException:
                if outermost:
                    self._restore(ref, saved)
                raise
            finally:
                depth[ref] -= 1

    def _restore(self, ref: OwnerRef, saved: dict[int | None, Snapshot]) -> None:
        with self._guard:
            for snapshot_id in [i for i, s in self._rows.items() if s.belongs_to(ref)]:
                del self._rows[snapshot_id]
            for snapshot_id, snap in saved.items():
                if snapshot_id is not None:
                    self._rows[snapshot_id] = snap


__all__ = ["InMemorySnapshotStore"]
