"""Snapshot builder."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from versionable.core.contracts.snapshot import OwnerRef, Snapshot, encode_payload


def build_snapshot(
    ref: OwnerRef,
    attributes: Mapping[str, Any],
    *,
    actor_id: str | None = None,
    reason: str | None = None,
    snapshot_type: type[Snapshot] = Snapshot,
    now: datetime | None = None,
) -> Snapshot:
    """Capture ``attributes`` as a new, active, not-yet-stored snapshot."""
    return snapshot_type(
        owner_type=ref.owner_type,
        owner_id=ref.owner_id,
        actor_id=actor_id,
        active=True,
        payload=encode_payload(attributes),
        reason=reason,
        created_at=now or datetime.now(UTC),
    )


__all__ = ["build_snapshot"]
