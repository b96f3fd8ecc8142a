"""Response models for the snapshot HTTP API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from versionable.core.contracts.snapshot import Snapshot


class SnapshotView(BaseModel):
    """A snapshot as exposed over HTTP, with its payload decoded."""

    id: int
    owner_type: str
    owner_id: str
    actor_id: str | None = None
    active: bool
    reason: str | None = None
    created_at: datetime
    attributes: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> SnapshotView:
        if snapshot.id is None:
            raise ValueError("cannot expose a snapshot that was never stored")
        return cls(
            id=snapshot.id,
            owner_type=snapshot.owner_type,
            owner_id=snapshot.owner_id,
            actor_id=snapshot.actor_id,
            active=snapshot.active,
            reason=snapshot.reason,
            created_at=snapshot.created_at,
            attributes=snapshot.attributes(),
        )


class AttributeChange(BaseModel):
    old: Any = None
    new: Any = None


class SnapshotDiff(BaseModel):
    """Attribute-level changes between a snapshot and an older one."""

    snapshot_id: int
    against_id: int | None = None
    changes: dict[str, AttributeChange] = Field(default_factory=dict)


__all__ = ["AttributeChange", "SnapshotDiff", "SnapshotView"]
