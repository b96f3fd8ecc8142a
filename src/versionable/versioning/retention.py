"""Retention purger: trim an owner's history down to ``keep`` snapshots."""

from __future__ import annotations

from versionable.core.contracts.snapshot import OwnerRef
from versionable.storage.base import SnapshotStore


def purge_old_snapshots(store: SnapshotStore, ref: OwnerRef, keep: int) -> list[int]:
    """Delete the oldest snapshots beyond ``keep`` and return their ids.

    ``keep == 0`` means unlimited. The active snapshot is never a purge
    candidate; it is normally the newest one anyway, but a reactivated old
    snapshot must survive a retention limit that was lowered afterwards.
    """
    if keep <= 0:
        return []
    count = store.count_by_owner(ref)
    if count <= keep:
        return []
    inactive = [s for s in store.list_by_owner(ref) if not s.active]
    doomed = [s.id for s in inactive[: count - keep] if s.id is not None]
    store.delete_many(doomed)
    return doomed


__all__ = ["purge_old_snapshots"]
