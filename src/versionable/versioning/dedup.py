"""
Deduplicator: find a historical snapshot identical to a candidate.

Only the configured versionable fields take part in the comparison; all other
attributes may differ freely. Values are compared with
:func:`versionable.core.equality.loosely_equal` after both sides went through
the payload encoding, so a live ``Decimal("1.50")`` matches a stored ``"1.50"``.

Design Notes
------------
- **Order**: history is scanned in ascending creation order and the *first*
  full match wins; at most one snapshot is ever reactivated.
- **Empty field set**: with no versionable fields there is nothing to compare,
  and "all of zero fields are equal" would match the oldest snapshot on every
  write. That case never matches, which turns every commit into an insert.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from versionable.core.contracts.snapshot import Snapshot
from versionable.core.equality import loosely_equal


def _matches(candidate: dict[str, Any], existing: dict[str, Any], fields: Sequence[str]) -> bool:
    equal = sum(1 for name in fields if loosely_equal(existing.get(name), candidate.get(name)))
    return equal > 0 and equal == len(fields)


def find_duplicate(
    candidate: Snapshot,
    history: Iterable[Snapshot],
    versionable_fields: Sequence[str],
) -> Snapshot | None:
    """Return the earliest snapshot in ``history`` matching ``candidate``, or None."""
    fields = tuple(dict.fromkeys(versionable_fields))
    if not fields:
        return None
    wanted = candidate.attributes()
    for existing in sorted(history, key=Snapshot.sort_key):
        if _matches(wanted, existing.attributes(), fields):
            return existing
    return None


__all__ = ["find_duplicate"]
