"""Interval algebra over silence and non-silence spans."""

from collections.abc import Iterable

from clipgenius.asset_annotator.schemas import Interval

SILENCE_PAD_SECONDS = 0.05


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def merge_intervals(
    intervals: Iterable[Interval],
    pad: float = 0.0,
) -> list[Interval]:
    """Pad intervals and merge overlapping or touching ones.

    Args:
        intervals: Intervals in any order.
        pad: Seconds added on both sides before merging.

    Returns:
        Sorted, disjoint intervals.
    """
    sorted_intervals = sorted(intervals, key=lambda x: x.start)
    if not sorted_intervals:
        return []

    merged: list[Interval] = []
    current_start = sorted_intervals[0].start - pad
    current_end = sorted_intervals[0].end + pad

    for interval in sorted_intervals[1:]:
        start = interval.start - pad
        end = interval.end + pad
        if start <= current_end:
            # Overlapping or adjacent, extend the current interval
            current_end = max(current_end, end)
        else:
            merged.append(Interval(start=current_start, end=current_end))
            current_start, current_end = start, end

    merged.append(Interval(start=current_start, end=current_end))
    return merged


def invert_intervals(domain: Interval, merged: Iterable[Interval]) -> list[Interval]:
    """Return the parts of ``domain`` not covered by ``merged``.

    Args:
        domain: The full span, usually 0..duration.
        merged: Sorted, merged intervals (see ``merge_intervals``).

    Returns:
        Gaps clamped into the domain; empty or negative gaps are dropped.
    """
    gaps: list[Interval] = []
    cursor = domain.start

    for interval in merged:
        start = clamp(interval.start, domain.start, domain.end)
        end = clamp(interval.end, domain.start, domain.end)
        if start > cursor:
            gaps.append(Interval(start=cursor, end=start))
        cursor = max(cursor, end)

    if cursor < domain.end:
        gaps.append(Interval(start=cursor, end=domain.end))

    return [g for g in gaps if g.end > g.start]


def overlap_seconds(interval: Interval, intervals: Iterable[Interval]) -> float:
    """Total seconds of ``interval`` covered by ``intervals``."""
    total = 0.0
    for other in intervals:
        total += max(0.0, min(interval.end, other.end) - max(interval.start, other.start))
    return total
