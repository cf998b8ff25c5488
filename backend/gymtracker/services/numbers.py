"""Lenient parsing of form text, in the spirit of ``parseInt``/``parseFloat``."""
from __future__ import annotations

import re

_INT = re.compile(r"\s*([+-]?\d+)")
_NUMBER = re.compile(r"\s*([+-]?(?:\d+(?:[.,]\d*)?|[.,]\d+))")


def parse_int(value, default: int) -> int:
    """Leading integer of ``value`` or ``default``: ``"12abc" -> 12``, ``"" -> default``."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    m = _INT.match(str(value)) if value is not None else None
    return int(m.group(1)) if m else default


def parse_number(value) -> float | None:
    """Leading decimal number of ``value`` (comma accepted as separator), else None."""
    if value is None:
        return None
    m = _NUMBER.match(str(value))
    if not m:
        return None
    return float(m.group(1).replace(",", "."))
