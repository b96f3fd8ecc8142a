# tests/test_cli.py
"""
Tests for the Versionable command-line interface (CLI).

Scope
-----
These tests verify the interaction layer provided by Typer:
1.  **Command Registration**: `--help` lists every command.
2.  **Rendering**: history/show/diff print the stored snapshot data.
3.  **Maintenance**: `purge` trims history in the database.
4.  **Error Handling**: unknown snapshot ids exit with code 1.

We use `typer.testing.CliRunner` to invoke the app in-process, and build a
real SQLite snapshot database under `tmp_path` for each test.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from versionable.cli import app
from versionable.core.contracts.snapshot import OwnerRef
from versionable.core.registry import VersioningRegistry
from versionable.host import Record, RecordRepository
from versionable.storage.sqlite import SqliteSnapshotStore
from versionable.versioning.engine import VersioningEngine


@pytest.fixture
def runner() -> CliRunner:
    """Create a fresh CliRunner for each test."""
    return CliRunner()


@pytest.fixture
def db(tmp_path: Path) -> Path:
    """A database holding three snapshots of article #1 (titles v1..v3)."""
    path = tmp_path / "history.db"
    engine = VersioningEngine(SqliteSnapshotStore(path), VersioningRegistry(default_keep=0))
    repo = RecordRepository(engine, timestamps=False)
    rec = Record(kind="article", attributes={"title": "v1"})
    repo.save(rec.with_reason("first draft"))
    for title in ("v2", "v3"):
        rec.attributes["title"] = title
        repo.save(rec)
    return path


def test_cli_help_shows_usage(runner: CliRunner) -> None:
    """Invoking --help should print usage instructions and exit 0."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0, f"Help failed: {result.output}"
    for command in ("history", "show", "diff", "purge"):
        assert command in result.output


def test_history_lists_snapshots(runner: CliRunner, db: Path) -> None:
    result = runner.invoke(app, ["history", "article", "1", "--db", str(db)])
    assert result.exit_code == 0, result.output
    assert "yes" in result.output  # the active marker
    assert "first draft" in result.output
    for snapshot_id in ("1", "2", "3"):
        assert snapshot_id in result.output


def test_history_of_unknown_record(runner: CliRunner, db: Path) -> None:
    result = runner.invoke(app, ["history", "article", "404", "--db", str(db)])
    assert result.exit_code == 0
    assert "No snapshots" in result.output


def test_show_prints_attributes(runner: CliRunner, db: Path) -> None:
    result = runner.invoke(app, ["show", "2", "--db", str(db)])
    assert result.exit_code == 0, result.output
    assert "title" in result.output
    assert '"v2"' in result.output


def test_diff_against_predecessor(runner: CliRunner, db: Path) -> None:
    result = runner.invoke(app, ["diff", "3", "--db", str(db)])
    assert result.exit_code == 0, result.output
    assert '"v2"' in result.output and '"v3"' in result.output


def test_unknown_snapshot_exits_with_error(runner: CliRunner, db: Path) -> None:
    result = runner.invoke(app, ["show", "99", "--db", str(db)])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_purge_trims_history(runner: CliRunner, db: Path) -> None:
    """`purge --keep 1` leaves only the newest snapshot."""
    result = runner.invoke(app, ["purge", "article", "1", "--keep", "1", "--db", str(db)])
    assert result.exit_code == 0, result.output
    assert "Purged 2" in result.output

    remaining = SqliteSnapshotStore(db).list_by_owner(OwnerRef(owner_type="article", owner_id="1"))
    assert [s.attributes()["title"] for s in remaining] == ["v3"]


def test_purge_rejects_non_positive_keep(runner: CliRunner, db: Path) -> None:
    result = runner.invoke(app, ["purge", "article", "1", "--keep", "0", "--db", str(db)])
    assert result.exit_code != 0
