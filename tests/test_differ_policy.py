"""Unit tests for the attribute differ and the versioning policy."""

from __future__ import annotations

from versionable.versioning.differ import diff_attributes
from versionable.versioning.policy import should_version


def test_diff_reports_changed_and_new_attributes() -> None:
    """Changed values and attributes absent from the persisted state are dirty."""
    persisted = {"title": "Draft", "views": 1, "gone": True}
    current = {"title": "Final", "views": 1, "tags": ["a"]}
    assert diff_attributes(persisted, current) == {"title": "Final", "tags": ["a"]}


def test_diff_ignores_representation_changes() -> None:
    """`"1"` -> `1` is the same value, so it is not dirty."""
    assert diff_attributes({"views": "1", "price": "2.50"}, {"views": 1, "price": 2.5}) == {}


def test_diff_on_create_marks_everything_dirty() -> None:
    """Against an empty persisted state every attribute is dirty."""
    assert diff_attributes({}, {"a": None, "b": 2}) == {"a": None, "b": 2}


def test_create_versions_iff_something_is_dirty() -> None:
    """On create, any dirty attribute (even an excluded one) counts."""
    assert should_version({"updated_at"}, False, (), {"updated_at"})
    assert not should_version(set(), False)


def test_update_ignores_excluded_and_timestamp_fields() -> None:
    """Timestamp-only or deny-listed changes never version an update."""
    excluded = {"updated_at", "deleted_at", "view_count"}
    assert not should_version({"updated_at"}, True, (), excluded)
    assert not should_version({"updated_at", "view_count"}, True, (), excluded)
    assert should_version({"updated_at", "title"}, True, (), excluded)


def test_update_respects_tracked_fields() -> None:
    """With tracked fields configured, only their changes count on update."""
    assert should_version({"title"}, True, ("title",), ())
    assert not should_version({"body"}, True, ("title",), ())
    assert not should_version({"title"}, True, ("title",), ("title",))


def test_disabled_never_versions() -> None:
    """The disabled flag wins over any dirty set."""
    assert not should_version({"title"}, False, enabled=False)
    assert not should_version({"title"}, True, enabled=False)
