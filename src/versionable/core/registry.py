"""Registry of versioning configuration per record kind.

The engine never looks configuration up from ambient globals: a
`VersioningRegistry` is built at setup time and injected into the engine.
Every validation problem (negative retention, a snapshot type that is not a
`Snapshot` subclass, ...) is raised here as a `ConfigurationError`, so a bad
setup fails before the first record is saved.

Example
-------
>>> registry = VersioningRegistry()
>>> registry.register("article", keep=5, versionable_fields=("title", "body"))
VersioningConfig(keep=5, ...)
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from versionable.core.contracts.config import VersioningConfig
from versionable.core.contracts.snapshot import Snapshot
from versionable.core.errors import ConfigurationError
from versionable.core.settings import get_logger, load_settings

logger = get_logger(__name__)


class VersioningRegistry:
    """Maps record kinds to their `VersioningConfig`.

    Parameters
    ----------
    default_keep : int | None
        Retention applied to kinds that do not set ``keep``. ``None`` reads
        ``VERSIONABLE_DEFAULT_KEEP`` from settings.
    strict : bool
        When True, looking up an unregistered kind raises instead of falling
        back to the default configuration.
    """

    def __init__(self, *, default_keep: int | None = None, strict: bool = False) -> None:
        keep = load_settings().default_keep if default_keep is None else default_keep
        self._default = self._build("<default>", {"keep": keep})
        self._configs: dict[str, VersioningConfig] = {}
        self._strict = strict

    @staticmethod
    def _build(kind: str, options: dict[str, Any]) -> VersioningConfig:
        snapshot_type = options.get("snapshot_type")
        if snapshot_type is not None and not (
            isinstance(snapshot_type, type) and issubclass(snapshot_type, Snapshot)
        ):
            raise ConfigurationError(
                f"snapshot_type for {kind!r} must be a Snapshot subclass, got {snapshot_type!r}"
            )
        try:
            config = VersioningConfig(**options)
        except ValidationError as exc:
            raise ConfigurationError(f"invalid versioning config for {kind!r}: {exc}") from exc
        if config.snapshot_type is None:
            logger.debug("Kind %r uses the default Snapshot type", kind)
            config = config.model_copy(update={"snapshot_type": Snapshot})
        return config

    def register(
        self, kind: str, config: VersioningConfig | None = None, **options: Any
    ) -> VersioningConfig:
        """Register (or replace) the configuration for ``kind``.

        Either pass a ready `VersioningConfig` or keyword options; keyword
        options are layered over the default retention.
        """
        if not kind:
            raise ConfigurationError("record kind must be a non-empty string")
        if config is not None and options:
            raise ConfigurationError("pass either a VersioningConfig or keyword options, not both")
        if config is not None:
            resolved = self._build(kind, config.model_dump())
        else:
            resolved = self._build(kind, {"keep": self._default.keep, **options})
        self._configs[kind] = resolved
        logger.info(
            "Registered versioning for %r (keep=%d, versionable=%s)",
            kind,
            resolved.keep,
            list(resolved.versionable_fields),
        )
        return resolved

    def config_for(self, kind: str) -> VersioningConfig:
        """Return the configuration for ``kind`` (or the default one)."""
        if kind in self._configs:
            return self._configs[kind]
        if self._strict:
            raise ConfigurationError(f"record kind {kind!r} is not registered for versioning")
        return self._default

    def kinds(self) -> tuple[str, ...]:
        """Return the registered kinds as a sorted tuple (stable for tests)."""
        return tuple(sorted(self._configs))

    def __contains__(self, kind: object) -> bool:
        return kind in self._configs


__all__ = ["VersioningRegistry"]
