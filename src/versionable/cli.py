# src/versionable/cli.py
"""
Versionable Command Line Interface (CLI).

This module implements the operator-facing terminal interface using `typer`
and `rich`. It works on a SQLite snapshot database (the same file the HTTP API
serves), so history written by a host application can be inspected and
trimmed from a shell.

Features
--------
- **History**: Tabular view of a record's snapshots, newest first.
- **Show**: Pretty-print the attributes captured by one snapshot.
- **Diff**: Attribute-level changes between two snapshots.
- **Purge**: Apply a retention count to a record's history by hand.

Usage
-----
    $ versionable history article 42
    $ versionable show 17 --db var/history.db
    $ versionable diff 17 --against 12
    $ versionable purge article 42 --keep 5
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from versionable.core.contracts.snapshot import OwnerRef, Snapshot
from versionable.core.errors import SnapshotNotFoundError
from versionable.core.registry import VersioningRegistry
from versionable.core.settings import load_settings
from versionable.storage.sqlite import SqliteSnapshotStore
from versionable.versioning.engine import VersioningEngine
from versionable.versioning.retention import purge_old_snapshots

# Ensure env vars (like VERSIONABLE_DB_PATH) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="Versionable: inspect and maintain record snapshot history.",
    rich_markup_mode="markdown",
)
console = Console()

DbOption = Annotated[
    Path | None,
    typer.Option("--db", help="SQLite snapshot database (defaults to VERSIONABLE_DB_PATH)."),
]


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _engine(db: Path | None) -> VersioningEngine:
    """Helper: Open the snapshot database and wrap it in an engine."""
    path = db if db is not None else load_settings().db_path
    return VersioningEngine(SqliteSnapshotStore(path), VersioningRegistry())


def _load(engine: VersioningEngine, snapshot_id: int) -> Snapshot:
    """Helper: Fetch a snapshot by id or exit with a readable error."""
    snapshot = engine.store.get(snapshot_id)
    if snapshot is None:
        console.print(f"[bold red]Snapshot {snapshot_id} not found.[/bold red]")
        raise typer.Exit(code=1)
    return snapshot


def _fmt(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()
def history(
    owner_type: Annotated[str, typer.Argument(help="Record kind, e.g. 'article'.")],
    owner_id: Annotated[str, typer.Argument(help="Record identity.")],
    db: DbOption = None,
) -> None:
    """List the snapshots of one record, newest first."""
    engine = _engine(db)
    ref = OwnerRef(owner_type=owner_type, owner_id=owner_id)
    snapshots = engine.history(ref)
    if not snapshots:
        console.print(f"[yellow]No snapshots recorded for {ref}.[/yellow]")
        return

    table = Table(title=f"History of {ref}")
    table.add_column("ID", justify="right")
    table.add_column("Active")
    table.add_column("Actor")
    table.add_column("Reason")
    table.add_column("Created (UTC)")
    for snap in snapshots:
        table.add_row(
            str(snap.id),
            "[green]yes[/green]" if snap.active else "no",
            snap.actor_id or "-",
            escape(snap.reason or ""),
            snap.created_at.strftime("%Y-%m-%d %H:%M:%S"),
        )
    console.print(table)


@app.command()
def show(
    snapshot_id: Annotated[int, typer.Argument(help="Snapshot id.")],
    db: DbOption = None,
) -> None:
    """Print the attributes captured by one snapshot."""
    snap = _load(_engine(db), snapshot_id)
    body = "\n".join(
        f"[bold]{escape(name)}[/bold]: {escape(_fmt(value))}"
        for name, value in sorted(snap.attributes().items())
    )
    status = "active" if snap.active else "inactive"
    console.print(
        Panel(
            body or "[dim](no attributes)[/dim]",
            title=f"Snapshot {snap.id} of {snap.owner} ({status})",
            border_style="green" if snap.active else "white",
        )
    )


@app.command()
def diff(
    snapshot_id: Annotated[int, typer.Argument(help="Snapshot id.")],
    against: Annotated[
        int | None, typer.Option("--against", help="Older snapshot id (default: predecessor).")
    ] = None,
    db: DbOption = None,
) -> None:
    """Show attribute changes between a snapshot and an older one."""
    engine = _engine(db)
    snap = _load(engine, snapshot_id)
    try:
        changes = engine.diff(snap.owner, snapshot_id, against)
    except SnapshotNotFoundError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc

    if not changes:
        console.print("[dim]No attribute changes.[/dim]")
        return
    table = Table(title=f"Changes in snapshot {snapshot_id}")
    table.add_column("Attribute")
    table.add_column("Before", style="red")
    table.add_column("After", style="green")
    for name, (before, after) in changes.items():
        table.add_row(escape(name), escape(_fmt(before)), escape(_fmt(after)))
    console.print(table)


@app.command()
def purge(
    owner_type: Annotated[str, typer.Argument(help="Record kind.")],
    owner_id: Annotated[str, typer.Argument(help="Record identity.")],
    keep: Annotated[int, typer.Option("--keep", min=1, help="Snapshots to retain.")],
    db: DbOption = None,
) -> None:
    """Delete the oldest snapshots of a record beyond `--keep`."""
    engine = _engine(db)
    ref = OwnerRef(owner_type=owner_type, owner_id=owner_id)
    with engine.store.transaction(ref):
        purged = purge_old_snapshots(engine.store, ref, keep)
    if purged:
        ids = ", ".join(map(str, purged))
        console.print(f"[green]Purged {len(purged)} snapshot(s):[/green] {ids}")
    else:
        console.print("[dim]Nothing to purge.[/dim]")


if __name__ == "__main__":
    app()
