"""SQLite-backed snapshot store.

Schema
------
One ``snapshots`` table; ``active`` is stored as 0/1 and ``created_at`` as
ISO-8601 text (always UTC, so lexical order is chronological). An index on
``(owner_type, owner_id, created_at)`` serves the per-owner history scans.

Transactions
------------
Connections run in autocommit mode. `transaction()` opens a dedicated
connection and issues ``BEGIN IMMEDIATE``, which takes SQLite's reserved lock
and serializes concurrent writers (threads or processes) on the same file.
Store calls made inside the block reuse that connection; the block commits on
success and rolls back on error.

Usage
-----
>>> store = SqliteSnapshotStore(Path("history.db"))
>>> engine = VersioningEngine(store, VersioningRegistry())
"""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import UTC
from pathlib import Path
from typing import Any

from versionable.core.contracts.snapshot import OwnerRef, Snapshot
from versionable.core.settings import get_logger

logger = get_logger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS snapshots (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        owner_type TEXT NOT NULL,
        owner_id TEXT NOT NULL,
        actor_id TEXT,
        active INTEGER NOT NULL DEFAULT 0,
        payload TEXT NOT NULL,
        reason TEXT,
        created_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_snapshots_owner "
    "ON snapshots(owner_type, owner_id, created_at)",
)

_COLUMNS = "id, owner_type, owner_id, actor_id, active, payload, reason, created_at"


class SqliteSnapshotStore:
    """Persist snapshots in a SQLite database file.

    Parameters
    ----------
    path : Path | str
        Database file; parent directories are created on demand.
    snapshot_type : type[Snapshot]
        Model used to hydrate rows (a `Snapshot` subclass for custom schemas).
    timeout : float
        Seconds to wait for another writer's lock before failing.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        snapshot_type: type[Snapshot] = Snapshot,
        timeout: float = 30.0,
    ) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._snapshot_type = snapshot_type
        self._timeout = timeout
        self._local = threading.local()
        self.init_schema()

    # ---------------------------- Connections -------------------------------

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path, timeout=self._timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Yield the open transaction's connection, or a short-lived one."""
        current: sqlite3.Connection | None = getattr(self._local, "conn", None)
        if current is not None:
            yield current
            return
        conn = self._connect()
        try:
            yield conn
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Create the snapshots table and index if missing."""
        with self._connection() as conn:
            for statement in _SCHEMA:
                conn.execute(statement)

    @contextmanager
    def transaction(self, ref: OwnerRef) -> Iterator[None]:
        """Run the block under ``BEGIN IMMEDIATE``; commit or roll back."""
        if getattr(self._local, "conn", None) is not None:
            yield
            return
        conn = self._connect()
        self._local.conn = conn
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield
            except BaseException:
                conn.execute("ROLLBACK")
                logger.warning("Rolled back snapshot transaction for %s", ref)
                raise
            conn.execute("COMMIT")
        finally:
            self._local.conn = None
            conn.close()

    # ------------------------------- Rows -----------------------------------

    def _hydrate(self, row: sqlite3.Row) -> Snapshot:
        data: dict[str, Any] = dict(row)
        data["active"] = bool(data["active"])
        return self._snapshot_type.model_validate(data)

    @staticmethod
    def _timestamp(snapshot: Snapshot) -> str:
        return snapshot.created_at.astimezone(UTC).isoformat(timespec="microseconds")

    # ------------------------------- CRUD -----------------------------------

    def insert(self, snapshot: Snapshot) -> int:
        with self._connection() as conn:
            cursor = conn.execute(
                "INSERT INTO snapshots "
                "(owner_type, owner_id, actor_id, active, payload, reason, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    snapshot.owner_type,
                    snapshot.owner_id,
                    snapshot.actor_id,
                    int(snapshot.active),
                    snapshot.payload,
                    snapshot.reason,
                    self._timestamp(snapshot),
                ),
            )
            snapshot_id = cursor.lastrowid
        if snapshot_id is None:
            raise sqlite3.DatabaseError("insert did not return a row id")
        return snapshot_id

    def update(self, snapshot: Snapshot) -> None:
        if snapshot.id is None:
            raise KeyError("cannot update a snapshot without an id")
        with self._connection() as conn:
            cursor = conn.execute(
                "UPDATE snapshots SET actor_id = ?, active = ?, payload = ?, reason = ?, "
                "created_at = ? WHERE id = ?",
                (
                    snapshot.actor_id,
                    int(snapshot.active),
                    snapshot.payload,
                    snapshot.reason,
                    self._timestamp(snapshot),
                    snapshot.id,
                ),
            )
            if cursor.rowcount == 0:
                raise KeyError(f"cannot update unknown snapshot {snapshot.id!r}")

    def get(self, snapshot_id: int) -> Snapshot | None:
        with self._connection() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM snapshots WHERE id = ?", (snapshot_id,)
            ).fetchone()
        return self._hydrate(row) if row else None

    def list_by_owner(self, ref: OwnerRef) -> list[Snapshot]:
        with self._connection() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM snapshots WHERE owner_type = ? AND owner_id = ? "
                "ORDER BY created_at ASC, id ASC",
                (ref.owner_type, ref.owner_id),
            ).fetchall()
        return [self._hydrate(row) for row in rows]

    def count_by_owner(self, ref: OwnerRef) -> int:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM snapshots WHERE owner_type = ? AND owner_id = ?",
                (ref.owner_type, ref.owner_id),
            ).fetchone()
        return int(row[0])

    def set_active_for_owner(self, ref: OwnerRef, active: bool) -> None:
        with self._connection() as conn:
            conn.execute(
                "UPDATE snapshots SET active = ? WHERE owner_type = ? AND owner_id = ?",
                (int(active), ref.owner_type, ref.owner_id),
            )

    def delete_many(self, ids: Iterable[int]) -> None:
        batch = [(snapshot_id,) for snapshot_id in ids]
        if not batch:
            return
        with self._connection() as conn:
            conn.executemany("DELETE FROM snapshots WHERE id = ?", batch)

    def owners(self) -> list[OwnerRef]:
        """Return every owner with at least one snapshot, sorted."""
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT DISTINCT owner_type, owner_id FROM snapshots "
                "ORDER BY owner_type, owner_id"
            ).fetchall()
        return [OwnerRef(owner_type=r["owner_type"], owner_id=r["owner_id"]) for r in rows]


__all__ = ["SqliteSnapshotStore"]
