"""Numeric-aware ordering of free-form tag strings."""

import re
from collections.abc import Iterable

# Digit runs are left-padded to this width; longer runs are kept as they are
NUM_WIDTH = 6

DIGITS_PATTERN = re.compile(r"[0-9]+")


def expand(version: str) -> str:
    """Zero-pad every run of digits so string order follows numeric order.

    Args:
        version: Tag string, e.g. "v1.10"

    Returns:
        Expanded string, e.g. "v000001.000010"
    """
    return DIGITS_PATTERN.sub(lambda m: m.group().zfill(NUM_WIDTH), version)


def biggest(first: str, second: str) -> str:
    """Return whichever tag is biggest; ties go to ``second``."""
    if expand(first) > expand(second):
        return first
    return second


def latest_of(tags: Iterable[str]) -> str:
    """Fold tags through biggest() starting from the empty string.

    Raises:
        ValueError: If there are no tags
    """
    tags = list(tags)
    if not tags:
        raise ValueError("latest_of() needs at least one tag")

    latest = ""
    for tag in tags:
        latest = biggest(latest, tag)
    return latest
