"""
Segment data models.

This module defines the data structures for railway line segments loaded
from the rail lines dataset.
"""

from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Tuple, Hashable
import pandas as pd

Point = Tuple[float, float]


@dataclass(frozen=True)
class RailSegment:
    """
    Represents one railway line feature.

    Multi-part geometries are stored flattened: all parts are concatenated
    in order, so the first and last points are the segment's endpoints.
    """
    id: Hashable
    name: str  # Yard name
    length_km: float

    # Geometry ([x, y] = [lon, lat] pairs)
    coordinates: Tuple[Point, ...] = ()
    geometry_type: str = "LineString"
    part_count: int = 1

    @property
    def start(self) -> Optional[Point]:
        """First point of the path, or None for empty geometry."""
        return self.coordinates[0] if self.coordinates else None

    @property
    def end(self) -> Optional[Point]:
        """Last point of the path, or None for empty geometry."""
        return self.coordinates[-1] if self.coordinates else None

    @property
    def has_geometry(self) -> bool:
        return bool(self.coordinates)

    @property
    def point_count(self) -> int:
        return len(self.coordinates)

    def to_dict(self) -> Dict[str, Any]:
        """Convert segment to dictionary for DataFrame creation and JSON responses."""
        return {
            'id': self.id,
            'name': self.name,
            'length_km': self.length_km,
            'geometry_type': self.geometry_type,
            'part_count': self.part_count,
            'point_count': self.point_count,
            'start': list(self.start) if self.start else None,
            'end': list(self.end) if self.end else None,
        }


def segments_to_dataframe(segments: List[RailSegment]) -> pd.DataFrame:
    """
    Convert a list of segments to a pandas DataFrame.

    Args:
        segments: List of RailSegment objects

    Returns:
        pandas DataFrame with one row per segment, plus a 'coordinates'
        column holding the flattened geometry
    """
    if not segments:
        return pd.DataFrame(columns=['id', 'name', 'length_km', 'point_count', 'coordinates'])

    rows = []
    for segment in segments:
        row = segment.to_dict()
        row['coordinates'] = list(segment.coordinates)
        rows.append(row)

    return pd.DataFrame(rows)
