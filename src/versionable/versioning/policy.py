"""Versioning policy: is a change worth a new snapshot?

Rules
-----
- Disabled versioning never versions, whatever the dirty set holds.
- Create: any dirty attribute counts (the first snapshot captures the
  initial state).
- Update: excluded attributes (deny-list plus the timestamp columns the host
  touches) are removed first. What remains must intersect the tracked
  attributes; with no tracked attributes configured, anything remaining
  counts. A pure ``updated_at`` touch therefore never versions.
"""

from __future__ import annotations

from collections.abc import Iterable


def should_version(
    dirty: Iterable[str],
    is_update: bool,
    tracked_fields: Iterable[str] = (),
    excluded_fields: Iterable[str] = (),
    *,
    enabled: bool = True,
) -> bool:
    """Decide whether the dirty attributes of a save warrant a snapshot."""
    if not enabled:
        return False
    changed = set(dirty)
    if not is_update:
        return bool(changed)
    remaining = changed - set(excluded_fields)
    tracked = set(tracked_fields)
    if tracked:
        remaining &= tracked
    return bool(remaining)


__all__ = ["should_version"]
