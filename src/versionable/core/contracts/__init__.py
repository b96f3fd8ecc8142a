"""Pydantic contracts shared across the engine, stores, CLI and API."""

from __future__ import annotations

from .config import VersioningConfig
from .snapshot import OwnerRef, Snapshot, decode_payload, encode_payload

__all__ = ["OwnerRef", "Snapshot", "VersioningConfig", "decode_payload", "encode_payload"]
