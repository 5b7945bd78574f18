"""Helpers for reading handwritten numerals out of OCR tokens."""

from __future__ import annotations

import re
from typing import List, Optional

__all__ = ["parse_numerics", "jersey_number", "is_bare_integer", "is_quarter_indicator"]

_SPLIT_PATTERN = re.compile(r"[\s,]+")
_INTEGER_PATTERN = re.compile(r"^\d+$")
_FRACTION_PATTERN = re.compile(r"^(\d+)/(\d+)$")
_JERSEY_PATTERN = re.compile(r"^#?(\d{1,3})$")
_QUARTER_PATTERN = re.compile(r"^\dQ", re.IGNORECASE)


def parse_numerics(raw: str) -> List[int]:
    """Return every integer written in a token.

    ``"4/8"`` (made/attempted) yields both values, ``"12 3"`` yields two
    values and anything carrying letters or symbols yields nothing.
    """
    values: List[int] = []
    if not raw:
        return values
    for part in _SPLIT_PATTERN.split(raw.strip()):
        fraction = _FRACTION_PATTERN.match(part)
        if fraction:
            values.extend(int(group) for group in fraction.groups())
        elif _INTEGER_PATTERN.match(part):
            values.append(int(part))
    return values


def jersey_number(raw: str) -> Optional[str]:
    """Return the 1-3 digit numeral of a jersey token such as ``"23"`` or ``"#7"``."""
    if not raw:
        return None
    match = _JERSEY_PATTERN.match(raw.strip())
    return match.group(1) if match else None


def is_bare_integer(raw: str) -> bool:
    return bool(_INTEGER_PATTERN.match(raw.strip())) if raw else False


def is_quarter_indicator(raw: str) -> bool:
    """Quarter-played markers are written as a digit followed by ``Q`` (``1Q``, ``4Q``)."""
    return bool(_QUARTER_PATTERN.match(raw.strip())) if raw else False
