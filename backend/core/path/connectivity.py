"""
Connectivity checks between railway segments.

Two segments are connected when the last point of the first equals the
first point of the second. Comparison is exact, with no tolerance, so a
dataset with tiny precision differences between shared endpoints will not
connect. All functions here are pure and recompute from scratch.
"""

from typing import Hashable, Iterable, List, Optional, Sequence

from core.models.segment import RailSegment, Point


def start_point(segment: RailSegment) -> Optional[Point]:
    """First point of the segment, or None for empty geometry."""
    return segment.start


def end_point(segment: RailSegment) -> Optional[Point]:
    """Last point of the segment, or None for empty geometry."""
    return segment.end


def points_equal(a: Optional[Point], b: Optional[Point]) -> bool:
    """Exact equality of both coordinate components."""
    if a is None or b is None:
        return False
    return a[0] == b[0] and a[1] == b[1]


def connected(a: RailSegment, b: RailSegment) -> bool:
    """
    Check whether `b` continues the path where `a` ends.

    Directional: connected(a, b) does not imply connected(b, a).
    """
    if not a.has_geometry or not b.has_geometry:
        return False
    return points_equal(end_point(a), start_point(b))


def first_break(segments: Sequence[RailSegment]) -> Optional[int]:
    """
    Find the first adjacent pair that is not connected.

    Returns:
        Index i such that (segments[i], segments[i+1]) is not connected,
        or None when the whole sequence is connected
    """
    for i in range(len(segments) - 1):
        if not connected(segments[i], segments[i + 1]):
            return i
    return None


def path_connected(segments: Sequence[RailSegment]) -> bool:
    """True if every consecutive pair is connected. Vacuously true for 0 or 1 segments."""
    return first_break(segments) is None


def find_extensions(
    segment: RailSegment,
    candidates: Iterable[RailSegment],
    exclude: Iterable[Hashable] = ()
) -> List[Hashable]:
    """
    Find the segments that can follow `segment`.

    Args:
        segment: Current last segment of the path
        candidates: Segments to search, usually the whole catalog
        exclude: Identifiers to leave out (already selected)

    Returns:
        Identifiers of connected segments, in search order
    """
    excluded = set(exclude)
    return [
        other.id for other in candidates
        if other.id not in excluded and connected(segment, other)
    ]
