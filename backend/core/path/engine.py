"""
Path selection engine.

The engine owns the ordered list of selected segments and recomputes every
derived value (connectivity, next-segment candidates, total distance) inside
the operation that changes the selection. Operations are synchronous and
all-or-nothing: a rejected operation raises and leaves the state untouched.
"""

import logging
from typing import FrozenSet, Hashable, List, Optional

from core.calculations import total_length_km
from core.catalog import SegmentCatalog
from core.constants import MAX_SEGMENTS, EMPTY_CANDIDATES_NONE, EMPTY_CANDIDATES_ALL, EMPTY_CANDIDATE_POLICIES
from core.models.path import PathSnapshot, PathState
from core.models.segment import RailSegment
from core.path.connectivity import connected, first_break, find_extensions
from core.path.errors import (
    NotConnected, SegmentLimitReached, PathBroken, IndexOutOfRange, UnknownSegment
)

logger = logging.getLogger(__name__)


class PathSelectionEngine:
    """
    State machine for building a contiguous path one segment at a time.

    States: EMPTY, BUILDING, FULL (at the segment limit) and BROKEN (a
    removal left a gap). A BROKEN path accepts remove() and clear() but
    rejects select() with PathBroken, so every accepted select() leaves the
    path connected.
    """

    def __init__(
        self,
        catalog: SegmentCatalog,
        max_segments: int = MAX_SEGMENTS,
        empty_candidates: str = EMPTY_CANDIDATES_NONE
    ):
        if max_segments < 1:
            raise ValueError(f"max_segments must be at least 1, got {max_segments}")
        if empty_candidates not in EMPTY_CANDIDATE_POLICIES:
            raise ValueError(
                f"empty_candidates must be one of {EMPTY_CANDIDATE_POLICIES}, got {empty_candidates!r}"
            )

        self.catalog = catalog
        self.max_segments = max_segments
        self.empty_candidates = empty_candidates

        self._selection: List[RailSegment] = []
        self._candidates: FrozenSet[Hashable] = frozenset()
        self._connected = True
        self._break_index: Optional[int] = None
        self._hovered: Optional[RailSegment] = None
        self._recompute()

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def selection(self) -> List[RailSegment]:
        return list(self._selection)

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def candidates(self) -> FrozenSet[Hashable]:
        return self._candidates

    @property
    def total_km(self) -> float:
        """Sum of segment lengths, recomputed from the selection on every read."""
        return total_length_km(segment.length_km for segment in self._selection)

    @property
    def state(self) -> PathState:
        if not self._selection:
            return PathState.EMPTY
        if not self._connected:
            return PathState.BROKEN
        if len(self._selection) >= self.max_segments:
            return PathState.FULL
        return PathState.BUILDING

    def _compute_candidates(self, selection: List[RailSegment]) -> FrozenSet[Hashable]:
        if not selection:
            if self.empty_candidates == EMPTY_CANDIDATES_ALL:
                return frozenset(segment.id for segment in self.catalog if segment.has_geometry)
            return frozenset()

        last = selection[-1]
        selected_ids = {segment.id for segment in selection}
        return frozenset(find_extensions(last, self.catalog.starting_at(last.end), exclude=selected_ids))

    def _recompute(self) -> None:
        """Recompute connectivity and candidates from the current selection."""
        self._break_index = first_break(self._selection)
        self._connected = self._break_index is None
        self._candidates = self._compute_candidates(self._selection)

    def _lookup(self, segment_id: Hashable) -> RailSegment:
        segment = self.catalog.by_id(segment_id)
        if segment is None:
            raise UnknownSegment(segment_id)
        return segment

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def select(self, segment_id: Hashable) -> bool:
        """
        Extend the path with a clicked segment.

        Args:
            segment_id: Identifier of the clicked segment

        Returns:
            True if the segment was appended, False if it was already selected

        Raises:
            UnknownSegment: If the identifier is not in the catalog
            PathBroken: If the path has a gap
            NotConnected: If the segment does not start where the path ends
            SegmentLimitReached: If the path is already at the segment limit
        """
        segment = self._lookup(segment_id)

        if any(selected.id == segment.id for selected in self._selection):
            logger.debug(f"Segment {segment_id!r} already selected")
            return False

        if self._selection:
            if not self._connected:
                logger.info(f"Rejected segment {segment_id!r}: path is broken at {self._break_index}")
                raise PathBroken(self._break_index)

            last = self._selection[-1]
            if not connected(last, segment):
                logger.info(f"Rejected segment {segment_id!r}: not connected to {last.id!r}")
                raise NotConnected(last.id, segment.id, last.name, segment.name)

            if len(self._selection) >= self.max_segments:
                logger.info(f"Rejected segment {segment_id!r}: limit of {self.max_segments} reached")
                raise SegmentLimitReached(self.max_segments)

        self._selection.append(segment)
        self._recompute()

        logger.debug(f"Selected segment {segment_id!r} ({segment.name}), "
                     f"{len(self._selection)} segments, {len(self._candidates)} candidates")
        return True

    def remove(self, index: int) -> RailSegment:
        """
        Remove the segment at a position in the selection.

        Removing an interior segment may leave the path BROKEN; the gap is
        reported through `connected`, never repaired automatically.

        Raises:
            IndexOutOfRange: If index is not a valid position (negative
                indices are not accepted)
        """
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._selection):
            raise IndexOutOfRange(index, len(self._selection))

        removed = self._selection.pop(index)
        self._recompute()

        if not self._connected:
            logger.info(f"Removed segment {removed.id!r} at {index}; path broken at {self._break_index}")
        else:
            logger.debug(f"Removed segment {removed.id!r} at {index}")
        return removed

    def clear(self) -> None:
        """Reset to an empty selection."""
        self._selection = []
        self._recompute()
        logger.debug("Selection cleared")

    def hover(self, segment_id: Optional[Hashable]) -> Optional[RailSegment]:
        """
        Track the segment under the pointer (None to clear).

        Hovering is informational and never changes the selection.
        """
        self._hovered = None if segment_id is None else self._lookup(segment_id)
        return self._hovered

    def unhover(self) -> None:
        self._hovered = None

    def snapshot(self) -> PathSnapshot:
        """Return a consistent read-only view of the current state."""
        return PathSnapshot(
            selection=tuple(self._selection),
            connected=self._connected,
            total_km=self.total_km,
            candidates=self._candidates,
            state=self.state,
            max_segments=self.max_segments,
            break_index=self._break_index,
            hovered=self._hovered,
        )
