"""
API Routes for Snapshot History.

This module defines read-only REST endpoints over a record's snapshots.

Endpoints
---------
- `GET /owners/{owner_type}/{owner_id}/snapshots`: Full history, newest first.
- `GET /owners/{owner_type}/{owner_id}/snapshots/current`: The active snapshot.
- `GET /owners/{owner_type}/{owner_id}/snapshots/{snapshot_id}`: One snapshot.
- `GET /owners/{owner_type}/{owner_id}/snapshots/{snapshot_id}/diff`: Changes
  against `?against=` or the predecessor.

Design Decisions
----------------
- **Engine on app state**: the router never builds storage itself; it uses the
  engine the application factory placed on `app.state`.
- **Ownership checks**: a snapshot id that belongs to another record is a 404,
  never a silent cross-record read.
- **Sync handlers**: the engine may wait on SQLite locks, so handlers are plain
  `def` functions that FastAPI runs in its threadpool.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, status

from versionable.api.schemas import AttributeChange, SnapshotDiff, SnapshotView
from versionable.core.contracts.snapshot import OwnerRef
from versionable.core.errors import SnapshotNotFoundError
from versionable.versioning.engine import VersioningEngine

router = APIRouter(prefix="/owners/{owner_type}/{owner_id}/snapshots", tags=["Snapshots"])


def _engine(request: Request) -> VersioningEngine:
    engine: VersioningEngine = request.app.state.engine
    return engine


def _not_found(exc: SnapshotNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("", response_model=list[SnapshotView], summary="List a record's snapshots")
def list_snapshots(owner_type: str, owner_id: str, request: Request) -> list[SnapshotView]:
    """Return every snapshot of the record, newest first."""
    ref = OwnerRef(owner_type=owner_type, owner_id=owner_id)
    return [SnapshotView.from_snapshot(s) for s in _engine(request).history(ref)]


@router.get("/current", response_model=SnapshotView, summary="Get the active snapshot")
def current_snapshot(owner_type: str, owner_id: str, request: Request) -> SnapshotView:
    ref = OwnerRef(owner_type=owner_type, owner_id=owner_id)
    snapshot = _engine(request).current(ref)
    if snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No active snapshot for {ref}",
        )
    return SnapshotView.from_snapshot(snapshot)


@router.get("/{snapshot_id}", response_model=SnapshotView, summary="Get one snapshot")
def get_snapshot(
    owner_type: str, owner_id: str, snapshot_id: int, request: Request
) -> SnapshotView:
    ref = OwnerRef(owner_type=owner_type, owner_id=owner_id)
    try:
        return SnapshotView.from_snapshot(_engine(request).get_snapshot(ref, snapshot_id))
    except SnapshotNotFoundError as exc:
        raise _not_found(exc) from exc


@router.get("/{snapshot_id}/diff", response_model=SnapshotDiff, summary="Diff two snapshots")
def diff_snapshot(
    owner_type: str,
    owner_id: str,
    snapshot_id: int,
    request: Request,
    against: int | None = None,
) -> SnapshotDiff:
    """
    Compare a snapshot with an older one.

    Without `against`, the snapshot's predecessor is used; the first snapshot
    of a record is compared against nothing, so every attribute is new.
    """
    engine = _engine(request)
    ref = OwnerRef(owner_type=owner_type, owner_id=owner_id)
    try:
        changes = engine.diff(ref, snapshot_id, against)
        if against is None:
            previous = engine.previous(ref, snapshot_id)
            against = previous.id if previous is not None else None
    except SnapshotNotFoundError as exc:
        raise _not_found(exc) from exc

    return SnapshotDiff(
        snapshot_id=snapshot_id,
        against_id=against,
        changes={name: AttributeChange(old=old, new=new) for name, (old, new) in changes.items()},
    )


__all__ = ["router"]
