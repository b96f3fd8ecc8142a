"""Core package initializer for Versionable.

Holds the shared building blocks used by the versioning engine:
    from versionable.core.settings import settings, load_settings, Settings, get_logger
"""

from __future__ import annotations

__all__ = ["__doc__"]
