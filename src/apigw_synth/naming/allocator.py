"""
apigw_synth.naming.allocator

Proportional, length-bounded name allocation.

Responsibilities:
- Join name segments with dashes when they fit within a provider limit.
- Otherwise shorten every segment proportionally (ceiling division, leftmost first)
  so the joined name fits, keeping at least one character per segment.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

SEPARATOR = "-"


class NameAllocationError(ValueError):
    pass


def allocate_name(segments: Sequence[str], max_length: int) -> str:
    """
    Allocate a dash-joined identifier no longer than `max_length`.

    The surplus is split across segments in order: segment `i` of `n` gives up
    `ceil(remaining / (n - i))` characters. With three segments that is `ceil(s/3)`,
    then `ceil(rest/2)`, then the rest.

    Raises `NameAllocationError` when no segments are given, a segment is empty, or
    `max_length` cannot hold one character per segment plus separators.
    """

    parts = list(segments)
    if not parts:
        raise NameAllocationError("at least one name segment is required")
    if any(not p for p in parts):
        raise NameAllocationError(f"name segments must be non-empty: {parts!r}")

    joined = SEPARATOR.join(parts)
    if len(joined) <= max_length:
        return joined

    floor = 2 * len(parts) - 1
    if max_length < floor:
        raise NameAllocationError(
            f"max_length={max_length} cannot fit {len(parts)} segments (minimum {floor})"
        )

    cuts = _proportional_cuts(len(joined) - max_length, len(parts))
    keep = [max(len(p) - cut, 1) for p, cut in zip(parts, cuts)]
    _absorb_overflow(keep, max_length - (len(parts) - 1))

    shortened = [_shorten(p, k) for p, k in zip(parts, keep)]
    return SEPARATOR.join(shortened)


def _proportional_cuts(surplus: int, count: int) -> list[int]:
    cuts: list[int] = []
    remaining = surplus
    for i in range(count):
        cut = math.ceil(remaining / (count - i))
        cuts.append(cut)
        remaining -= cut
    return cuts


def _absorb_overflow(keep: list[int], budget: int) -> None:
    # Clamped segments leave part of the surplus unabsorbed; take it from the longest.
    overflow = sum(keep) - budget
    while overflow > 0:
        longest = max(range(len(keep)), key=lambda i: keep[i])
        keep[longest] -= 1
        overflow -= 1


def _shorten(segment: str, keep: int) -> str:
    # A trailing dash would leave "--" once segments are rejoined.
    return segment[:keep].rstrip(SEPARATOR) or segment[:1]


# --- Module Notes -----------------------------------------------------------
# `_absorb_overflow` terminates because `budget >= len(keep)` is guaranteed by the
# floor check, so the longest entry is always > 1 while overflow remains.
