"""
Per-record versioning context.

Every versioned record instance owns one `VersioningContext`. The host passes
it explicitly into the engine's lifecycle hooks; the engine keeps the state of
the current commit cycle in it and resets it when the cycle ends.

Cycle
-----
``IDLE -> DIRTY_CAPTURED`` (pre-persist) ``-> POLICY_EVALUATED`` (post-persist)
``-> SKIPPED | COMMITTED`` ``-> IDLE``.

Only ``enabled`` survives between cycles. ``reason`` is a transient slot: the
engine consumes it at the end of the next enabled cycle, whether or not that
cycle produced a snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class CyclePhase(str, Enum):
    """Where a record currently is in its commit cycle."""

    IDLE = "idle"
    DIRTY_CAPTURED = "dirty_captured"
    POLICY_EVALUATED = "policy_evaluated"
    SKIPPED = "skipped"
    COMMITTED = "committed"


@dataclass
class VersioningContext:
    """Mutable per-instance state the engine needs across one save."""

    enabled: bool = True
    reason: str | None = None
    phase: CyclePhase = CyclePhase.IDLE
    dirty: dict[str, Any] | None = None
    is_update: bool = False

    def enable(self) -> VersioningContext:
        self.enabled = True
        return self

    def disable(self) -> VersioningContext:
        self.enabled = False
        return self

    def set_reason(self, reason: str | None) -> VersioningContext:
        """Annotate the next snapshot with ``reason``."""
        self.reason = reason
        return self

    def take_reason(self) -> str | None:
        """Return the pending reason and clear the slot."""
        reason, self.reason = self.reason, None
        if reason is not None and not reason.strip():
            return None
        return reason

    def reset(self) -> None:
        """End the current cycle; keep the enabled flag."""
        self.phase = CyclePhase.IDLE
        self.dirty = None
        self.is_update = False


__all__ = ["CyclePhase", "VersioningContext"]
