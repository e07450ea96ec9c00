"""Set operations over collections of ranges.

Every function here is pure: it accepts ranges in any order, never mutates
them, and returns a fresh list ordered as documented.
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from timeranges.range import Range

logger = logging.getLogger(__name__)


def _check_range(value: Any, operation: str) -> None:
    if not isinstance(value, Range):
        raise TypeError(
            f"{operation}() expects Range values.\n"
            f"Got {type(value).__name__!r}: {value!r}\n"
            f"Hint: Wrap bounds in a Range: Range(begin, end)"
        )


def _end_before(left: Range, right: Range) -> bool:
    """True if `left` ends strictly before `right` (unbounded is +infinity)."""
    if left._end_utc is None:
        return False
    return right._end_utc is None or left._end_utc < right._end_utc


def _clip(base: Range, other: Range) -> Range | None:
    """Intersection of two ranges, or None when it has no length."""
    first = base if base._begin_utc >= other._begin_utc else other
    last = base if _end_before(base, other) else other
    if last._end_utc is not None and first._begin_utc >= last._end_utc:
        return None
    return Range(first.begin, last.end)


def merge(ranges: Iterable[Range]) -> list[Range]:
    """Union ranges into the fewest disjoint spans, ordered by begin.

    Overlapping and touching ranges are coalesced. An unbounded range absorbs
    every range that begins after it.

    Example:
        >>> merge([Range(t0, t2), Range(t1, t3), Range(t5, t6)])
        [Range(t0, t3), Range(t5, t6)]
    """
    items = list(ranges)
    for item in items:
        _check_range(item, "merge")
    items.sort()
    if not items:
        return []

    merged: list[Range] = []
    current = items[0]
    for nxt in items[1:]:
        reaches = current._end_utc is None or nxt._begin_utc <= current._end_utc
        if reaches:
            if _end_before(current, nxt):
                current = Range(current.begin, nxt.end)
        else:
            merged.append(current)
            current = nxt
    merged.append(current)

    logger.debug("merge: %d ranges -> %d", len(items), len(merged))
    return merged


def slice(ranges: Iterable[Range]) -> list[Range]:
    """Partition the union of ranges at every boundary of every input.

    Unlike `merge`, which hides internal seams, each begin and end found in
    the input becomes a cut point. Gaps between inputs are left out.

    Example:
        >>> slice([Range(t0, t4), Range(t2, t6)])
        [Range(t0, t2), Range(t2, t4), Range(t4, t6)]
    """
    items = list(ranges)
    for item in items:
        _check_range(item, "slice")

    # Keep the first datetime seen for each distinct instant
    points: dict[datetime, datetime] = {}
    for item in items:
        points.setdefault(item._begin_utc, item.begin)
        if item.end is not None:
            points.setdefault(item._end_utc, item.end)
    cuts = sorted(points)

    blocks = merge(items)
    slices: list[Range] = []
    idx = 0
    for pos, cut in enumerate(cuts):
        # Skip coverage blocks that end at or before this cut
        while idx < len(blocks) and (
            blocks[idx]._end_utc is not None and blocks[idx]._end_utc <= cut
        ):
            idx += 1
        if idx == len(blocks):
            break

        block = blocks[idx]
        if block._begin_utc > cut:
            continue

        # Every block bound is a cut, so the next cut never passes block's end
        if pos + 1 < len(cuts):
            slices.append(Range(points[cut], points[cuts[pos + 1]]))
        elif block.end is None:
            slices.append(Range(points[cut]))

    logger.debug("slice: %d ranges -> %d", len(items), len(slices))
    return slices


def intersect(base: Range, *others: Range | None) -> list[Range]:
    """Intersect `base` with each of `others`, keeping their order.

    A None entry means "no constraint" and yields `base` itself. Entries that
    do not overlap `base` are dropped; results are not re-sorted.

    Calling with no others at all intersects with an empty collection and
    returns an empty list, while `intersect(base, None)` returns `[base]`.
    """
    _check_range(base, "intersect")
    results: list[Range] = []
    for other in others:
        if other is None:
            results.append(base)
            continue
        _check_range(other, "intersect")
        clipped = _clip(base, other)
        if clipped is not None:
            results.append(clipped)

    logger.debug("intersect: %d others -> %d", len(others), len(results))
    return results


def difference(base: Range, *subtract: Range | None) -> list[Range]:
    """Remove the union of `subtract` from `base`.

    None entries and entries that do not overlap `base` are ignored. When
    nothing overlaps, `[base]` is returned unchanged; when `base` is fully
    covered the result is empty. Remaining pieces are ordered by begin.
    """
    _check_range(base, "difference")
    clipped: list[Range] = []
    for other in subtract:
        if other is None:
            continue
        _check_range(other, "difference")
        if not base.overlaps(other):
            continue
        piece = _clip(base, other)
        if piece is not None:
            clipped.append(piece)

    if not clipped:
        return [base]

    holes = merge(clipped)
    remaining: list[Range] = []
    cursor: Range | None = base
    for hole in holes:
        if hole._begin_utc > cursor._begin_utc:
            remaining.append(Range(cursor.begin, hole.begin))
        if hole.end is None:
            cursor = None
            break
        cursor = Range(hole.end, base.end)

    if cursor is not None and not cursor.is_empty:
        remaining.append(cursor)

    logger.debug(
        "difference: %d holes -> %d remaining", len(holes), len(remaining)
    )
    return remaining
