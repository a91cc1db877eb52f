"""
Path selection models.

Snapshot and state types handed from the path selection engine to the
presentation layer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, Tuple, FrozenSet, Hashable

from core.models.segment import RailSegment


class PathState(str, Enum):
    """Lifecycle state of a selected path."""
    EMPTY = "empty"
    BUILDING = "building"
    FULL = "full"
    BROKEN = "broken"  # Only reachable by removing an interior segment


@dataclass(frozen=True)
class PathSnapshot:
    """
    Read-only view of the engine state at one instant.

    All fields are computed from the same selection, so candidates and
    total distance never lag behind the segments they describe.
    """
    selection: Tuple[RailSegment, ...]
    connected: bool
    total_km: float
    candidates: FrozenSet[Hashable]
    state: PathState
    max_segments: int
    break_index: Optional[int] = None  # First pair (i, i+1) that is not connected
    hovered: Optional[RailSegment] = None

    @property
    def segment_ids(self) -> Tuple[Hashable, ...]:
        return tuple(segment.id for segment in self.selection)

    @property
    def remaining(self) -> int:
        """Slots left before the segment limit."""
        return self.max_segments - len(self.selection)

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to a JSON-friendly dictionary."""
        return {
            'selection': [segment.to_dict() for segment in self.selection],
            'segment_ids': list(self.segment_ids),
            'connected': self.connected,
            'total_km': self.total_km,
            'candidates': sorted(self.candidates, key=str),
            'state': self.state.value,
            'break_index': self.break_index,
            'hovered': self.hovered.to_dict() if self.hovered else None,
            'remaining': self.remaining,
            'max_segments': self.max_segments,
        }
