"""
In-memory host records wired to the versioning engine.

The engine only observes lifecycle transitions; something has to own the
records and fire the hooks. `RecordRepository` is that host for in-process
use: it keeps records in a dict, assigns keys on create, stamps the
``updated_at`` attribute of dirty saves, and calls
`VersioningEngine.pre_persist` / `post_persist` around every write.

Example
-------
>>> repo = RecordRepository(engine)
>>> article = Record(kind="article", attributes={"title": "Draft"})
>>> repo.save(article).status
<CommitStatus.INSERTED: 'inserted'>
>>> article.attributes["title"] = "Final"
>>> repo.save(article.with_reason("copy edit")).status
<CommitStatus.INSERTED: 'inserted'>
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from versionable.core.contracts.snapshot import OwnerRef
from versionable.core.errors import LifecycleError, SnapshotNotFoundError
from versionable.versioning.context import VersioningContext
from versionable.versioning.differ import diff_attributes
from versionable.versioning.engine import CommitResult, VersioningEngine


@dataclass
class Record:
    """A versioned entity: kind, opaque key, and attribute maps.

    ``original`` mirrors the last persisted attributes and is maintained by the
    repository; callers edit ``attributes``.
    """

    kind: str
    attributes: dict[str, Any] = field(default_factory=dict)
    key: str | None = None
    original: dict[str, Any] = field(default_factory=dict)
    versioning: VersioningContext = field(default_factory=VersioningContext)

    @property
    def exists(self) -> bool:
        return self.key is not None

    @property
    def ref(self) -> OwnerRef:
        if self.key is None:
            raise LifecycleError(f"{self.kind} record has no identity until it is saved")
        return OwnerRef(owner_type=self.kind, owner_id=self.key)

    def fill(self, **attributes: Any) -> Record:
        self.attributes.update(attributes)
        return self

    def with_reason(self, reason: str | None) -> Record:
        """Attach a reason to the next snapshot of this record."""
        self.versioning.set_reason(reason)
        return self

    def is_dirty(self) -> bool:
        return bool(diff_attributes(self.original, self.attributes))


class RecordRepository:
    """Dictionary-backed record storage that fires the versioning hooks."""

    def __init__(self, engine: VersioningEngine, *, timestamps: bool = True) -> None:
        self.engine = engine
        self.timestamps = timestamps
        self._rows: dict[tuple[str, str], dict[str, Any]] = {}
        self._keys = itertools.count(1)

    def _stamp(self, record: Record, is_update: bool) -> None:
        config = self.engine.registry.config_for(record.kind)
        if not self.timestamps or not config.updated_at_field:
            return
        now = datetime.now(UTC).isoformat()
        record.attributes[config.updated_at_field] = now
        if not is_update:
            record.attributes.setdefault("created_at", now)

    def save(self, record: Record) -> CommitResult:
        """Persist ``record`` and run one versioning cycle for it."""
        is_update = record.exists
        if record.is_dirty():
            self._stamp(record, is_update)

        self.engine.pre_persist(
            record.versioning, record.original, record.attributes, is_update=is_update
        )
        if record.key is None:
            record.key = str(next(self._keys))
        self._rows[(record.kind, record.key)] = dict(record.attributes)
        record.original = dict(record.attributes)
        return self.engine.post_persist(record.versioning, record.ref, record.attributes)

    def touch(self, record: Record) -> CommitResult:
        """Bump only the ``updated_at`` timestamp and save."""
        config = self.engine.registry.config_for(record.kind)
        if config.updated_at_field:
            record.attributes[config.updated_at_field] = datetime.now(UTC).isoformat()
        return self.save(record)

    def find(self, kind: str, key: str) -> Record | None:
        """Load a fresh `Record` instance from storage."""
        row = self._rows.get((kind, key))
        if row is None:
            return None
        return Record(kind=kind, attributes=dict(row), key=key, original=dict(row))

    def revert(self, record: Record, snapshot_id: int, reason: str | None = None) -> CommitResult:
        """Restore ``record`` to the attributes captured by ``snapshot_id`` and save.

        The save runs a normal cycle; when the restored attributes match the
        target on every versionable field, deduplication reactivates it
        instead of recording a copy.
        """
        attributes = self.engine.snapshot_attributes(record.ref, snapshot_id)
        if attributes is None:
            raise SnapshotNotFoundError(snapshot_id, record.ref)
        record.attributes = attributes
        if reason is not None:
            record.versioning.set_reason(reason)
        return self.save(record)


__all__ = ["Record", "RecordRepository"]
