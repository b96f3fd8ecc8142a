"""Exception hierarchy for Versionable.

Storage adapter failures are *not* wrapped: they propagate to the caller as-is
and the store's transaction scope rolls the owner's history back. The classes
below cover the failures that originate in Versionable itself.
"""

from __future__ import annotations


class VersionableError(Exception):
    """Base class for every error raised by Versionable."""


class ConfigurationError(VersionableError, ValueError):
    """A record kind was configured with invalid versioning options.

    Raised at registration time (never during a commit) so that a broken
    configuration is surfaced while the host is being set up.
    """


class SnapshotNotFoundError(VersionableError, LookupError):
    """The requested snapshot does not exist or belongs to another owner."""

    def __init__(self, snapshot_id: int, owner: object | None = None) -> None:
        self.snapshot_id = snapshot_id
        self.owner = owner
        where = f" for {owner}" if owner is not None else ""
        super().__init__(f"Snapshot {snapshot_id} not found{where}")


class LifecycleError(VersionableError, RuntimeError):
    """The host invoked the engine's lifecycle hooks out of order."""


__all__ = [
    "ConfigurationError",
    "LifecycleError",
    "SnapshotNotFoundError",
    "VersionableError",
]
