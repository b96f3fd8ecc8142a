"""Attribute differ: which attributes changed since the last persist."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from versionable.core.equality import loosely_equal


def diff_attributes(persisted: Mapping[str, Any], current: Mapping[str, Any]) -> dict[str, Any]:
    """Return the dirty attributes of a record, mapped to their new values.

    An attribute is dirty when it is missing from ``persisted`` or its value
    is not loosely equal to the persisted one. Attributes that only exist in
    ``persisted`` are ignored (records do not version attribute removal).

    Must be called before the host overwrites ``persisted`` with ``current``.
    """
    return {
        name: value
        for name, value in current.items()
        if name not in persisted or not loosely_equal(persisted[name], value)
    }


__all__ = ["diff_attributes"]
