"""Tests for the Versionable FastAPI application.

This module verifies the HTTP contract:
- `GET /health` responds with status, environment and package version.
- Snapshot routes list history, expose the active snapshot, single
  snapshots and diffs, and answer 404 for snapshots of other records.

Each test builds its own app over an in-memory store via `create_app(store)`.
"""

from __future__ import annotations

import inspect
from typing import Final

import pytest
from fastapi.testclient import TestClient

from versionable import __version__ as PKG_VERSION
from versionable.api.app import create_app
from versionable.api.routers import snapshots
from versionable.core.registry import VersioningRegistry
from versionable.host import Record, RecordRepository
from versionable.storage.memory import InMemorySnapshotStore
from versionable.versioning.engine import VersioningEngine

ALLOWED_ENVS: Final[set[str]] = {"dev", "test", "prod"}
BASE: Final[str] = "/owners/article/1/snapshots"


@pytest.fixture
def client() -> TestClient:
    """An app serving article #1 with snapshots v1 (id 1) and v2 (id 2), plus article #2."""
    store = InMemorySnapshotStore()
    repo = RecordRepository(
        VersioningEngine(store, VersioningRegistry(default_keep=0)), timestamps=False
    )
    rec = Record(kind="article", attributes={"title": "v1", "words": 10})
    repo.save(rec)
    rec.attributes["title"] = "v2"
    repo.save(rec.with_reason("retitle"))
    repo.save(Record(kind="article", attributes={"title": "other"}))
    return TestClient(create_app(store))


def test_health_endpoint_contract(client: TestClient) -> None:
    """`GET /health` returns a stable shape and expected values."""
    resp = client.get("/health")
    assert resp.status_code == 200

    data = resp.json()
    assert data["status"] == "ok"
    assert data["environment"] in ALLOWED_ENVS
    assert data["version"] == PKG_VERSION


def test_list_snapshots_newest_first(client: TestClient) -> None:
    resp = client.get(BASE)
    assert resp.status_code == 200
    items = resp.json()
    assert [i["id"] for i in items] == [2, 1]
    assert items[0]["active"] is True and items[1]["active"] is False
    assert items[0]["reason"] == "retitle"
    assert items[0]["attributes"] == {"title": "v2", "words": 10}


def test_current_snapshot(client: TestClient) -> None:
    resp = client.get(f"{BASE}/current")
    assert resp.status_code == 200
    assert resp.json()["id"] == 2

    missing = client.get("/owners/article/404/snapshots/current")
    assert missing.status_code == 404


def test_get_snapshot_is_owner_scoped(client: TestClient) -> None:
    """Snapshot 3 belongs to article #2, so article #1 cannot read it."""
    assert client.get(f"{BASE}/1").json()["attributes"]["title"] == "v1"
    assert client.get(f"{BASE}/3").status_code == 404
    assert client.get("/owners/article/2/snapshots/3").status_code == 200


def test_diff_endpoint(client: TestClient) -> None:
    resp = client.get(f"{BASE}/2/diff")
    assert resp.status_code == 200
    body = resp.json()
    assert body["against_id"] == 1
    assert body["changes"] == {"title": {"old": "v1", "new": "v2"}}

    first = client.get(f"{BASE}/1/diff").json()
    assert first["against_id"] is None
    assert set(first["changes"]) == {"title", "words"}

    explicit = client.get(f"{BASE}/1/diff", params={"against": 2}).json()
    assert explicit["changes"]["title"] == {"old": "v2", "new": "v1"}

    assert client.get(f"{BASE}/2/diff", params={"against": 3}).status_code == 404


def test_snapshot_routes_run_in_threadpool() -> None:
    """Handlers that reach the store are sync, so a blocked SQLite lock never stalls the loop."""
    endpoints = [route.endpoint for route in snapshots.router.routes]  # type: ignore[attr-defined]
    assert endpoints
    assert not any(inspect.iscoroutinefunction(endpoint) for endpoint in endpoints)
