"""Actor resolution: who triggered the change being versioned.

The engine consults an `ActorResolver` exactly once per commit, when the
snapshot is built. An absent actor is not an error; the snapshot simply
records ``actor_id=None``.

The default resolver reads a context variable, so web handlers or jobs can
scope the acting identity around the code that saves records:

>>> with acting_as("user-42"):
...     repo.save(article)
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Protocol

_current_actor: ContextVar[str | None] = ContextVar("versionable_actor", default=None)


class ActorResolver(Protocol):
    """Anything that can report the current actor's identity."""

    def current_actor_id(self) -> str | None: ...


class ContextActorResolver:
    """Resolve the actor set by the innermost :func:`acting_as` block."""

    def current_actor_id(self) -> str | None:
        return _current_actor.get()


class StaticActorResolver:
    """Always report the same actor (scripts, migrations, tests)."""

    def __init__(self, actor_id: str | None) -> None:
        self.actor_id = actor_id

    def current_actor_id(self) -> str | None:
        return self.actor_id


@contextmanager
def acting_as(actor_id: str | int | None) -> Iterator[None]:
    """Scope ``actor_id`` as the current actor for the enclosed block."""
    token = _current_actor.set(None if actor_id is None else str(actor_id))
    try:
        yield
    finally:
        _current_actor.reset(token)


__all__ = ["ActorResolver", "ContextActorResolver", "StaticActorResolver", "acting_as"]
