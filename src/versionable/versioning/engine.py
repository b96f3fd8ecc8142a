"""
Versioning Engine (orchestrator).

This module wires the differ, policy, builder, deduplicator, active-pointer
manager and retention purger around a record's save lifecycle.

Responsibilities
----------------
1.  **Pre-persist** (`pre_persist`): capture the dirty attributes against the
    record's *old* persisted state, before the host overwrites it.
2.  **Post-persist** (`post_persist`): evaluate the policy and, when the change
    is version-worthy, build a candidate, deduplicate it against history,
    flip the active pointer and purge old snapshots, all inside one
    per-owner store transaction.
3.  **History queries**: current/previous snapshot, full history, decoded
    attributes and attribute diffs.

State machine per cycle
-----------------------
``Idle -> DirtyCaptured -> PolicyEvaluated -> {Skipped | Committed} -> Idle``

Usage
-----
>>> engine = VersioningEngine(InMemorySnapshotStore(), VersioningRegistry())
>>> engine.pre_persist(ctx, persisted={}, current=attrs, is_update=False)
>>> engine.post_persist(ctx, OwnerRef(owner_type="article", owner_id="1"), attrs)
CommitResult(status=<CommitStatus.INSERTED: 'inserted'>, ...)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from versionable.core.actors import ActorResolver, ContextActorResolver
from versionable.core.contracts.snapshot import OwnerRef, Snapshot
from versionable.core.errors import LifecycleError, SnapshotNotFoundError
from versionable.core.registry import VersioningRegistry
from versionable.core.settings import get_logger
from versionable.storage.base import SnapshotStore

from .active import activate, insert_active
from .builder import build_snapshot
from .context import CyclePhase, VersioningContext
from .dedup import find_duplicate
from .differ import diff_attributes
from .policy import should_version
from .retention import purge_old_snapshots

logger = get_logger(__name__)


class CommitStatus(str, Enum):
    """Outcome of one post-persist cycle."""

    SKIPPED = "skipped"
    INSERTED = "inserted"
    REACTIVATED = "reactivated"


@dataclass(frozen=True)
class CommitResult:
    """What a commit cycle did.

    Attributes
    ----------
    status : CommitStatus
        Skipped (not version-worthy or disabled), inserted a new snapshot, or
        reactivated an identical historical one.
    snapshot : Snapshot | None
        The snapshot that is active after the cycle (None when skipped).
    purged_ids : tuple[int, ...]
        Ids removed by the retention purger in this cycle.
    """

    status: CommitStatus
    snapshot: Snapshot | None = None
    purged_ids: tuple[int, ...] = field(default_factory=tuple)

    @property
    def committed(self) -> bool:
        return self.status is not CommitStatus.SKIPPED


def _utcnow() -> datetime:
    return datetime.now(UTC)


class VersioningEngine:
    """
    Orchestrates snapshot capture around a record's save lifecycle.

    Parameters
    ----------
    store : SnapshotStore
        Durable snapshot storage (also provides the per-owner transaction).
    registry : VersioningRegistry
        Per-kind configuration, injected rather than looked up globally.
    actor_resolver : ActorResolver | None
        Source of the acting identity; defaults to the `acting_as` context.
    clock : Callable[[], datetime] | None
        Timestamp source for new snapshots (UTC now by default).
    """

    def __init__(
        self,
        store: SnapshotStore,
        registry: VersioningRegistry | None = None,
        *,
        actor_resolver: ActorResolver | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.registry = registry if registry is not None else VersioningRegistry()
        self._actors: ActorResolver = actor_resolver or ContextActorResolver()
        self._clock = clock or _utcnow

    # --------------------------------------------------------------------- #
    # Lifecycle hooks
    # --------------------------------------------------------------------- #

    def pre_persist(
        self,
        context: VersioningContext,
        persisted: Mapping[str, Any],
        current: Mapping[str, Any],
        *,
        is_update: bool,
    ) -> None:
        """Capture the dirty set before the host writes ``current``.

        With versioning disabled nothing is diffed or cached.
        """
        if not context.enabled:
            context.reset()
            return
        context.dirty = diff_attributes(persisted, current)
        context.is_update = is_update
        context.phase = CyclePhase.DIRTY_CAPTURED

    def post_persist(
        self,
        context: VersioningContext,
        ref: OwnerRef,
        attributes: Mapping[str, Any],
    ) -> CommitResult:
        """Run the policy and, if the change counts, commit a snapshot.

        Raises
        ------
        LifecycleError
            If versioning is enabled but `pre_persist` did not run first.
        """
        if not context.enabled:
            context.reset()
            return CommitResult(CommitStatus.SKIPPED)
        if context.phase is not CyclePhase.DIRTY_CAPTURED or context.dirty is None:
            raise LifecycleError(f"post_persist for {ref} without a preceding pre_persist")

        try:
            config = self.registry.config_for(ref.owner_type)
            worthy = should_version(
                context.dirty,
                context.is_update,
                config.versionable_fields,
                config.excluded_fields(),
            )
            context.phase = CyclePhase.POLICY_EVALUATED
            reason = context.take_reason()
            if not worthy:
                context.phase = CyclePhase.SKIPPED
                logger.debug("Skipped versioning %s (dirty=%s)", ref, sorted(context.dirty))
                return CommitResult(CommitStatus.SKIPPED)

            candidate = build_snapshot(
                ref,
                attributes,
                actor_id=self._actors.current_actor_id(),
                reason=reason,
                snapshot_type=config.resolved_snapshot_type(),
                now=self._clock(),
            )
            result = self._commit(ref, candidate, config.versionable_fields, config.keep)
            context.phase = CyclePhase.COMMITTED
            return result
        finally:
            context.reset()

    def _commit(
        self,
        ref: OwnerRef,
        candidate: Snapshot,
        versionable_fields: tuple[str, ...],
        keep: int,
    ) -> CommitResult:
        with self.store.transaction(ref):
            match = find_duplicate(candidate, self.store.list_by_owner(ref), versionable_fields)
            if match is not None:
                snapshot = activate(self.store, ref, match)
                status = CommitStatus.REACTIVATED
                logger.debug("Reactivated snapshot %s for %s", snapshot.id, ref)
            else:
                snapshot = insert_active(self.store, ref, candidate)
                status = CommitStatus.INSERTED
                logger.info("Recorded snapshot %s for %s", snapshot.id, ref)
            purged = purge_old_snapshots(self.store, ref, keep)
        if purged:
            logger.info("Purged %d old snapshot(s) for %s", len(purged), ref)
        return CommitResult(status, snapshot, tuple(purged))

    # --------------------------------------------------------------------- #
    # History queries
    # --------------------------------------------------------------------- #

    def history(self, ref: OwnerRef) -> list[Snapshot]:
        """Return every snapshot of ``ref``, newest first."""
        return list(reversed(self.store.list_by_owner(ref)))

    def current(self, ref: OwnerRef) -> Snapshot | None:
        """Return the active snapshot of ``ref``, or None if it has none."""
        for snapshot in self.history(ref):
            if snapshot.active:
                return snapshot
        return None

    def previous(self, ref: OwnerRef, before_id: int | None = None) -> Snapshot | None:
        """Return the newest snapshot, or the newest one created before ``before_id``."""
        ordered = self.store.list_by_owner(ref)
        if before_id is not None:
            ids = [s.id for s in ordered]
            if before_id not in ids:
                raise SnapshotNotFoundError(before_id, ref)
            ordered = ordered[: ids.index(before_id)]
        return ordered[-1] if ordered else None

    def get_snapshot(self, ref: OwnerRef, snapshot_id: int) -> Snapshot:
        """Return snapshot ``snapshot_id`` if it belongs to ``ref``."""
        snapshot = self.store.get(snapshot_id)
        if snapshot is None or not snapshot.belongs_to(ref):
            raise SnapshotNotFoundError(snapshot_id, ref)
        return snapshot

    def snapshot_attributes(self, ref: OwnerRef, snapshot_id: int) -> dict[str, Any] | None:
        """Return the attributes captured by one of ``ref``'s snapshots, or None."""
        try:
            return self.get_snapshot(ref, snapshot_id).attributes()
        except SnapshotNotFoundError:
            return None

    def diff(
        self, ref: OwnerRef, snapshot_id: int, against_id: int | None = None
    ) -> dict[str, tuple[Any, Any]]:
        """Attribute changes between a snapshot and an older one.

        ``against_id`` defaults to the snapshot's predecessor; the very first
        snapshot is diffed against nothing.
        """
        target = self.get_snapshot(ref, snapshot_id)
        if against_id is not None:
            other: Snapshot | None = self.get_snapshot(ref, against_id)
        else:
            other = self.previous(ref, snapshot_id)
        return target.diff(other)


__all__ = ["CommitResult", "CommitStatus", "VersioningEngine"]
