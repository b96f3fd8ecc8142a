"""Versionable package bootstrap.

Versionable captures a historical snapshot of a record's attributes on every
meaningful change, keeps exactly one snapshot active per record, reactivates
identical historical snapshots instead of duplicating them, and trims old
history under a retention limit.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
