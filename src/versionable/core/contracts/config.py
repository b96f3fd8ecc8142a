"""Per-kind versioning configuration.

`VersioningConfig` carries every knob the engine needs for one record kind:

- ``keep``                : retention count, 0 = unlimited.
- ``versionable_fields``  : attributes compared by the deduplicator (and, when
  non-empty, the attributes whose change makes an update version-worthy).
- ``dont_version_fields`` : deny-list ignored when deciding if an update counts.
- ``updated_at_field`` / ``deleted_at_field`` : timestamp attributes the host
  touches on save / soft delete; always excluded from the update decision.
- ``snapshot_type``       : `Snapshot` subclass to build; ``None`` means the
  default type, resolved by the registry at registration time.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .snapshot import Snapshot


class VersioningConfig(BaseModel):
    """Versioning options for one record kind."""

    model_config = ConfigDict(frozen=True)

    keep: int = Field(default=0, ge=0, description="Snapshots retained per record; 0 = unlimited")
    versionable_fields: tuple[str, ...] = Field(default=())
    dont_version_fields: tuple[str, ...] = Field(default=())
    updated_at_field: str | None = "updated_at"
    deleted_at_field: str | None = None
    snapshot_type: type[Snapshot] | None = None

    def excluded_fields(self) -> frozenset[str]:
        """Deny-list plus the timestamp attributes the host maintains."""
        excluded = set(self.dont_version_fields)
        if self.updated_at_field:
            excluded.add(self.updated_at_field)
        if self.deleted_at_field:
            excluded.add(self.deleted_at_field)
        return frozenset(excluded)

    def resolved_snapshot_type(self) -> type[Snapshot]:
        return self.snapshot_type or Snapshot


__all__ = ["VersioningConfig"]
