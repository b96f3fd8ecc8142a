"""Unit tests for the retention purger and the active-pointer manager."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from versionable.core.contracts.snapshot import OwnerRef
from versionable.storage.memory import InMemorySnapshotStore
from versionable.versioning.active import activate, insert_active
from versionable.versioning.builder import build_snapshot
from versionable.versioning.retention import purge_old_snapshots

REF = OwnerRef(owner_type="doc", owner_id="1")
OTHER = OwnerRef(owner_type="doc", owner_id="2")
T0 = datetime(2026, 1, 1, tzinfo=UTC)


def _fill(store: InMemorySnapshotStore, ref: OwnerRef, n: int) -> list[int]:
    ids = []
    for i in range(n):
        candidate = build_snapshot(ref, {"n": i}, now=T0 + timedelta(seconds=i))
        snap = insert_active(store, ref, candidate)
        assert snap.id is not None
        ids.append(snap.id)
    return ids


def test_insert_active_keeps_single_active() -> None:
    """Each insert deactivates the owner's previous snapshots."""
    store = InMemorySnapshotStore()
    ids = _fill(store, REF, 3)
    active = [s.id for s in store.list_by_owner(REF) if s.active]
    assert active == [ids[-1]]


def test_activate_flips_pointer_without_touching_snapshot() -> None:
    """Reactivation changes only the active flag."""
    store = InMemorySnapshotStore()
    ids = _fill(store, REF, 2)
    first = store.get(ids[0])
    assert first is not None
    activate(store, REF, first)
    after = store.get(ids[0])
    assert after is not None and after.active
    assert after.created_at == first.created_at and after.payload == first.payload
    assert [s.id for s in store.list_by_owner(REF) if s.active] == [ids[0]]


def test_keep_zero_is_unlimited() -> None:
    store = InMemorySnapshotStore()
    _fill(store, REF, 5)
    assert purge_old_snapshots(store, REF, 0) == []
    assert store.count_by_owner(REF) == 5


def test_purge_removes_oldest_beyond_keep() -> None:
    """Only the `keep` most recent snapshots survive; other owners are untouched."""
    store = InMemorySnapshotStore()
    ids = _fill(store, REF, 5)
    other_ids = _fill(store, OTHER, 2)

    purged = purge_old_snapshots(store, REF, 3)

    assert purged == ids[:2]
    assert [s.id for s in store.list_by_owner(REF)] == ids[2:]
    assert [s.id for s in store.list_by_owner(OTHER)] == other_ids


def test_purge_below_limit_is_noop() -> None:
    store = InMemorySnapshotStore()
    _fill(store, REF, 2)
    assert purge_old_snapshots(store, REF, 3) == []


def test_purge_spares_reactivated_old_snapshot() -> None:
    """An old snapshot that is active is never purged."""
    store = InMemorySnapshotStore()
    ids = _fill(store, REF, 4)
    oldest = store.get(ids[0])
    assert oldest is not None
    activate(store, REF, oldest)

    purged = purge_old_snapshots(store, REF, 2)

    assert purged == [ids[1], ids[2]]
    assert [s.id for s in store.list_by_owner(REF)] == [ids[0], ids[3]]
