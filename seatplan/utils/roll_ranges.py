"""Roll-number range compaction shared by summaries and printed room sheets."""

from __future__ import annotations

import re
from typing import Iterable, Optional


_PREFIXED_ROLL = re.compile(r"(\d+)-(\d+)")
_LEADING_NUMBER = re.compile(r"\s*([+-]?\d+)")


def roll_number(roll: str) -> Optional[int]:
    """Numeric part of a roll: digits after the dash in ``1043-7``, else the leading integer."""
    prefixed = _PREFIXED_ROLL.search(roll)
    if prefixed:
        return int(prefixed.group(2))
    leading = _LEADING_NUMBER.match(roll)
    if leading:
        return int(leading.group(1))
    return None


def _span(start: int, end: int) -> str:
    return str(start) if start == end else f"{start} to {end}"


def format_roll_ranges(rolls: Iterable[str]) -> str:
    """Compact rolls into ``"1 to 3, 5"`` form, walking them in the given order.

    Rolls without a number are kept verbatim and never merge with neighbours.
    """
    spans: list[str] = []
    start: Optional[int] = None
    end: Optional[int] = None

    for roll in rolls:
        value = roll_number(roll)
        if start is not None and value is not None and value == end + 1:
            end = value
            continue
        if start is not None:
            spans.append(_span(start, end))
        if value is None:
            spans.append(roll)
            start = end = None
        else:
            start = end = value

    if start is not None:
        spans.append(_span(start, end))
    return ", ".join(spans)
