"""Snapshot contracts: the owner reference and the historical snapshot record.

This module defines two Pydantic v2 models:

- `OwnerRef` : identity + kind of the versioned record a snapshot belongs to.
- `Snapshot` : an immutable-once-written capture of a record's attributes.

Payload
-------
`payload` is JSON text with sorted keys. Values JSON cannot represent natively
(datetimes, decimals, UUIDs, ...) are stringified on the way in, so
`Snapshot.attributes()` returns their string form. Hosts should treat the
payload as opaque and go through `attributes()`.

Immutability
------------
Snapshots are frozen. The only change a stored snapshot ever sees is its
`active` flag, done through `with_active()`, which returns a copy.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from versionable.core.equality import loosely_equal


def encode_payload(attributes: Mapping[str, Any]) -> str:
    """Serialize a record's attribute map into snapshot payload text."""
    return json.dumps(dict(attributes), sort_keys=True, ensure_ascii=False, default=str)


def decode_payload(payload: str) -> dict[str, Any]:
    """Inverse of :func:`encode_payload`."""
    data = json.loads(payload)
    if not isinstance(data, dict):
        raise ValueError("snapshot payload must encode a JSON object")
    return data


def _coerce_identity(value: Any) -> Any:
    """Record keys are opaque; store them as text so every store agrees."""
    if value is None or isinstance(value, str):
        return value
    return str(value)


class OwnerRef(BaseModel):
    """Back-reference from a snapshot to the record that owns it."""

    model_config = ConfigDict(frozen=True)

    owner_type: str = Field(min_length=1, description="Record kind, e.g. 'article'")
    owner_id: str = Field(min_length=1, description="Opaque record identity")

    @field_validator("owner_id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        return _coerce_identity(v)

    def __str__(self) -> str:
        return f"{self.owner_type}#{self.owner_id}"


class Snapshot(BaseModel):
    """Historical capture of a record's full attribute set.

    Hosts may subclass this to attach extra metadata; configure the subclass
    per record kind through `VersioningConfig.snapshot_type`.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = Field(default=None, description="Assigned by the store on insert")
    owner_type: str
    owner_id: str
    actor_id: str | None = Field(default=None, description="Who triggered the change")
    active: bool = False
    payload: str = Field(description="Opaque JSON capture of the record's attributes")
    reason: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("owner_id", "actor_id", mode="before")
    @classmethod
    def _stringify_ids(cls, v: Any) -> Any:
        return _coerce_identity(v)

    @property
    def owner(self) -> OwnerRef:
        """Return the owning record's reference."""
        return OwnerRef(owner_type=self.owner_type, owner_id=self.owner_id)

    def belongs_to(self, ref: OwnerRef) -> bool:
        """Return True if this snapshot was captured for ``ref``."""
        return self.owner_type == ref.owner_type and self.owner_id == ref.owner_id

    def sort_key(self) -> tuple[datetime, int]:
        """Creation order: timestamp first, store id as the tie-break."""
        return (self.created_at, self.id if self.id is not None else -1)

    def attributes(self) -> dict[str, Any]:
        """Return the decoded attribute map captured by this snapshot."""
        return decode_payload(self.payload)

    def with_active(self, active: bool) -> Snapshot:
        """Return a copy with the active flag set to ``active``."""
        return self.model_copy(update={"active": active})

    def diff(self, other: Snapshot | None = None) -> dict[str, tuple[Any, Any]]:
        """Compare this snapshot against an older one.

        Returns a mapping ``name -> (old, new)`` for every attribute whose value
        differs. Against ``None`` every attribute of this snapshot is reported
        with an old value of ``None``.
        """
        new = self.attributes()
        old = other.attributes() if other is not None else {}
        changes: dict[str, tuple[Any, Any]] = {}
        for name in sorted(set(old) | set(new)):
            before, after = old.get(name), new.get(name)
            if other is None or not loosely_equal(before, after):
                changes[name] = (before, after)
        return changes


__all__ = ["OwnerRef", "Snapshot", "decode_payload", "encode_payload"]
