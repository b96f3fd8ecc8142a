"""Active-pointer manager.

Keeps at most one snapshot per owner active. Both entry points deactivate the
whole history first and then activate exactly one snapshot, so they must run
inside the store's transaction for the owner; an observer outside the
transaction never sees zero or two active snapshots after a commit.
"""

from __future__ import annotations

from versionable.core.contracts.snapshot import OwnerRef, Snapshot
from versionable.storage.base import SnapshotStore


def deactivate_all(store: SnapshotStore, ref: OwnerRef) -> None:
    store.set_active_for_owner(ref, False)


def insert_active(store: SnapshotStore, ref: OwnerRef, candidate: Snapshot) -> Snapshot:
    """Store ``candidate`` as the only active snapshot; return it with its id."""
    deactivate_all(store, ref)
    stored = candidate.model_copy(update={"active": True})
    snapshot_id = store.insert(stored)
    return stored.model_copy(update={"id": snapshot_id})


def activate(store: SnapshotStore, ref: OwnerRef, snapshot: Snapshot) -> Snapshot:
    """Make an existing ``snapshot`` the only active one, leaving it otherwise untouched."""
    deactivate_all(store, ref)
    reactivated = snapshot.with_active(True)
    store.update(reactivated)
    return reactivated


__all__ = ["activate", "deactivate_all", "insert_active"]
