"""Unit tests for the loose value equality used by the differ and deduplicator."""

from __future__ import annotations

from decimal import Decimal

import pytest

from versionable.core.equality import loosely_equal


@pytest.mark.parametrize(
    ("left", "right"),
    [
        (1, "1"),
        ("1", "1.0"),
        (1.5, "1.50"),
        (Decimal("2.50"), "2.5"),
        (" 3 ", 3),
        (1, 1.0),
        ("abc", "abc"),
        ({"a": 1}, {"a": 1}),
        (None, None),
    ],
)
def test_equal_values(left: object, right: object) -> None:
    """Representations of the same value compare equal, in both directions."""
    assert loosely_equal(left, right)
    assert loosely_equal(right, left)


@pytest.mark.parametrize(
    ("left", "right"),
    [
        (None, ""),
        (None, 0),
        ("abc", "ABC"),
        ("1", "one"),
        (1, 2),
        ("1", "2"),
        ("", "0"),
        ([1], [2]),
        ("Infinity", "inf"),
        ("NaN", "nan"),
        ("sNaN", "1"),
        ("sNaN", 0),
        ("1_000", 1000),
        (float("inf"), "Infinity"),
    ],
)
def test_different_values(left: object, right: object) -> None:
    """None only equals None; non-numeric strings compare exactly."""
    assert not loosely_equal(left, right)
    assert not loosely_equal(right, left)


@pytest.mark.parametrize("text", ["sNaN", "NaN", "Infinity", "-inf", "1_000"])
def test_special_decimal_strings_are_text(text: str) -> None:
    """Strings Decimal() would accept but that are not finite literals compare exactly."""
    assert loosely_equal(text, text)
    assert not loosely_equal(text, text.upper() + " ")
