"""Sampling from the textual ranges in the benchmark table.

Two flavours exist because the table writes them differently:

- unsigned ranges (``"12–14"``, ``"5/7"``, ``"1"``) -> :func:`roll_uniform`
- signed ranges (``"-2 to +0"``, ``"+3/+5"``) -> :func:`roll_signed`

Every sampler takes the :class:`~adv_manager.core.rng.RandomSource` to draw
from, so tests can script or seed the outcome.
"""

from __future__ import annotations

import re

from adv_manager.core.rng import RandomSource

# Unsigned range separators: slash, hyphen, en dash.
_RANGE_SPLIT_RE = re.compile(r"[/–-]")
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")
_SIGNED_INT_RE = re.compile(r"[+-]?\d+")


def _range_endpoints(text: object) -> list[int]:
    if text is None:
        return []
    ints: list[int] = []
    for part in _RANGE_SPLIT_RE.split(str(text)):
        m = _LEADING_INT_RE.match(part)
        if m:
            ints.append(int(m.group(1)))
    return ints[:2]


def roll_uniform(text: object, rng: RandomSource) -> int | None:
    """Sample an integer from an unsigned range text.

    Two endpoints give a uniform draw from the closed interval, one endpoint
    is returned as-is, and text with no integers yields None.
    """
    ends = _range_endpoints(text)
    if len(ends) == 2:
        low, high = sorted(ends)
        return rng.random_int(low, high)
    if len(ends) == 1:
        return ends[0]
    return None


def roll_signed(text: object, rng: RandomSource) -> int | None:
    """Sample an integer between the smallest and largest signed token."""
    if text is None:
        return None
    tokens = sorted(int(t) for t in _SIGNED_INT_RE.findall(str(text)))
    if len(tokens) >= 2:
        return rng.random_int(tokens[0], tokens[-1])
    if len(tokens) == 1:
        return tokens[0]
    return None


def parse_threshold_pair(text: object) -> tuple[int, int] | None:
    """Parse ``"major/severe"`` into a tuple, or None."""
    if not text:
        return None
    parts = str(text).split("/")
    if len(parts) < 2:
        return None
    try:
        return int(parts[0].strip()), int(parts[1].strip())
    except ValueError:
        return None


def roll_threshold_pair(
    min_text: object,
    max_text: object,
    rng: RandomSource,
) -> tuple[int, int] | None:
    """Roll major and severe thresholds between two ``"major/severe"`` pairs.

    The two values are drawn independently, each from its own column.
    """
    low = parse_threshold_pair(min_text)
    high = parse_threshold_pair(max_text)
    if low is None or high is None:
        return None
    major = rng.random_int(*sorted((low[0], high[0])))
    severe = rng.random_int(*sorted((low[1], high[1])))
    return major, severe
