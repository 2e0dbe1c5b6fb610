"""Partition naming rules for node data roots.

DATE partitions are eight-digit directories such as ``20250328``.
HOUR units are integer-named directories or files such as ``9`` or ``23``.
"""

from __future__ import annotations

import re

from core.constants import DATE_DIR_NAME_LENGTH

_DATE_PATTERN = re.compile(r"[0-9]{%d}" % DATE_DIR_NAME_LENGTH)
_HOUR_PATTERN = re.compile(r"[+-]?[0-9]+")


def is_date_dir(name: str) -> bool:
    """Return whether a directory name is a DATE partition."""
    return _DATE_PATTERN.fullmatch(name) is not None


def is_hour_unit(name: str) -> bool:
    """Return whether a directory or file name is an HOUR unit."""
    return _HOUR_PATTERN.fullmatch(name) is not None


def hour_sort_key(name: str) -> tuple[int, str]:
    """Sort HOUR units numerically, breaking ties by raw name."""
    return int(name), name
