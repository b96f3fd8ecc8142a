"""Loose value equality shared by the attribute differ and the deduplicator.

Attribute values reach the engine from two directions: live values set on a
record (``1``, ``Decimal("2.50")``) and values decoded from a stored payload
(``"1"``, ``"2.5"``). Comparing them with plain ``==`` would report changes
that are only a difference in representation, so both the dirty check and the
duplicate check use :func:`loosely_equal`.

Rules
-----
- ``None`` only equals ``None``.
- Values equal under ``==`` are equal (this covers ``1 == 1.0 == True``).
- A number and a numeric string, or two numeric strings, are compared by
  numeric value: ``1 == "1" == "1.0" == " 1e0 "``. Only plain finite
  decimal literals count as numeric strings; ``"NaN"``, ``"Infinity"`` and
  ``"1_000"`` are text.
- Everything else must be equal under ``==``; in particular non-numeric
  strings are compared exactly (case and whitespace matter).
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any

_NUMERIC = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _as_number(value: Any) -> Decimal | None:
    """Return ``value`` as a Decimal if it is a number or a numeric string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float | Decimal):
        number = Decimal(str(value))
        return number if number.is_finite() else None
    if isinstance(value, str) and _NUMERIC.fullmatch(value.strip()):
        return Decimal(value.strip())
    return None


def loosely_equal(left: Any, right: Any) -> bool:
    """Return True if ``left`` and ``right`` hold the same value."""
    if left is None or right is None:
        return left is None and right is None
    if left == right:
        return True
    if isinstance(left, str) or isinstance(right, str):
        a, b = _as_number(left), _as_number(right)
        if a is not None and b is not None:
            return a == b
    return False


__all__ = ["loosely_equal"]
