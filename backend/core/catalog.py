"""
Segment catalog.

This module turns a GeoJSON feature collection of railway lines into an
immutable, order-preserving collection of RailSegment objects. The catalog
is built once and never mutated; reloading the dataset creates a new one.
"""

import logging
import math
from collections import defaultdict
from typing import Any, Dict, Hashable, Iterator, List, Mapping, Optional, Tuple

import pandas as pd

from core.calculations import parts_length_km, total_length_km, bounding_box
from core.constants import NAME_PROPERTY, LENGTH_PROPERTY, ID_PROPERTY, FALLBACK_ID_PROPERTY
from core.models.segment import RailSegment, Point, segments_to_dataframe
from core.validation import (
    InvalidDataset, validate_feature_collection, validate_geometry,
    validate_length, describe_feature
)

logger = logging.getLogger(__name__)


def build_segment(feature: Mapping[str, Any], position: int) -> RailSegment:
    """
    Build a RailSegment from one named GeoJSON feature.

    Args:
        feature: GeoJSON feature with a YARDNAME property
        position: Index of the feature in the collection (for error messages)

    Returns:
        RailSegment with flattened coordinates

    Raises:
        InvalidDataset: If geometry, identifier or length are invalid
    """
    context = describe_feature(feature, position)
    properties = feature.get('properties') or {}

    segment_id = properties.get(ID_PROPERTY)
    if segment_id is None:
        segment_id = properties.get(FALLBACK_ID_PROPERTY)
    if segment_id is None:
        raise InvalidDataset(f"{context}: missing {ID_PROPERTY}")
    if not isinstance(segment_id, Hashable) or isinstance(segment_id, bool):
        raise InvalidDataset(f"{context}: invalid {ID_PROPERTY} {segment_id!r}")
    if isinstance(segment_id, float):
        if not math.isfinite(segment_id):
            raise InvalidDataset(f"{context}: invalid {ID_PROPERTY} {segment_id!r}")
        # Exports sometimes write integer ids as 7.0
        if segment_id.is_integer():
            segment_id = int(segment_id)

    geometry_type, parts = validate_geometry(feature.get('geometry'), context)

    # Parts are concatenated in order for endpoint extraction
    coordinates: Tuple[Point, ...] = tuple(point for part in parts for point in part)

    length_km = validate_length(properties.get(LENGTH_PROPERTY), context)
    if length_km is None:
        length_km = parts_length_km(parts)
        logger.debug(f"{context}: no {LENGTH_PROPERTY}, using geodesic length {length_km:.3f} km")

    return RailSegment(
        id=segment_id,
        name=str(properties[NAME_PROPERTY]),
        length_km=length_km,
        coordinates=coordinates,
        geometry_type=geometry_type,
        part_count=len(parts),
    )


class SegmentCatalog:
    """
    Immutable collection of railway segments.

    Segments keep the order of the source features. Lookups by identifier
    and by start point are indexed at construction time.
    """

    def __init__(self, segments: List[RailSegment], dropped: int = 0):
        self._segments: Tuple[RailSegment, ...] = tuple(segments)
        self._by_id: Dict[Hashable, RailSegment] = {}
        starts: Dict[Point, List[RailSegment]] = defaultdict(list)

        for segment in self._segments:
            if segment.id in self._by_id:
                raise InvalidDataset(f"Duplicate segment identifier {segment.id!r}")
            self._by_id[segment.id] = segment
            # Empty geometry can never connect to anything
            if segment.has_geometry:
                starts[segment.start].append(segment)

        self._by_start: Dict[Point, Tuple[RailSegment, ...]] = {
            point: tuple(found) for point, found in starts.items()
        }
        self.dropped = dropped

    @classmethod
    def load(cls, raw: Any) -> "SegmentCatalog":
        """
        Build a catalog from a parsed GeoJSON FeatureCollection.

        Features without a yard name are dropped here, once, and never
        reconsidered.

        Raises:
            InvalidDataset: If the document or any named feature is malformed
        """
        features = validate_feature_collection(raw)

        segments = []
        dropped = 0
        for position, feature in enumerate(features):
            if not isinstance(feature, Mapping):
                raise InvalidDataset(f"Feature #{position}: expected a JSON object")

            properties = feature.get('properties') or {}
            if not properties.get(NAME_PROPERTY):
                dropped += 1
                continue

            segments.append(build_segment(feature, position))

        if dropped:
            logger.info(f"Dropped {dropped} features without {NAME_PROPERTY}")

        catalog = cls(segments, dropped=dropped)
        logger.info(f"Loaded segment catalog with {len(catalog)} segments")
        return catalog

    def by_id(self, segment_id: Hashable) -> Optional[RailSegment]:
        """Return the segment with this identifier, or None."""
        return self._by_id.get(segment_id)

    def all(self) -> Tuple[RailSegment, ...]:
        """Return every segment in source order."""
        return self._segments

    def starting_at(self, point: Optional[Point]) -> Tuple[RailSegment, ...]:
        """Return segments whose first point equals `point` exactly, in source order."""
        if point is None:
            return ()
        return self._by_start.get(point, ())

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[RailSegment]:
        return iter(self._segments)

    def __contains__(self, segment_id: object) -> bool:
        try:
            return segment_id in self._by_id
        except TypeError:
            return False

    def to_dataframe(self) -> pd.DataFrame:
        """Return the catalog as a DataFrame, one row per segment."""
        return segments_to_dataframe(list(self._segments))

    def summary(self) -> Dict[str, Any]:
        """
        Summarise the catalog.

        Returns:
            dict with segment count, total km, dropped feature count and
            per-yard km totals (largest first)
        """
        if not self._segments:
            return {
                'segment_count': 0,
                'total_km': 0.0,
                'yard_count': 0,
                'dropped_features': self.dropped,
                'bounds': None,
                'yards': [],
            }

        df = self.to_dataframe()
        points = [point for segment in self._segments for point in segment.coordinates]
        yards = (
            df.groupby('name')
            .agg(segment_count=('id', 'count'), total_km=('length_km', 'sum'))
            .reset_index()
            .sort_values(['total_km', 'name'], ascending=[False, True])
        )

        return {
            'segment_count': len(self._segments),
            'total_km': total_length_km(segment.length_km for segment in self._segments),
            'yard_count': int(df['name'].nunique()),
            'dropped_features': self.dropped,
            # (min_lon, min_lat, max_lon, max_lat) for fitting the map view
            'bounds': list(bounding_box(points)) if points else None,
            'yards': [
                {
                    'name': row['name'],
                    'segment_count': int(row['segment_count']),
                    'total_km': float(row['total_km']),
                }
                for _, row in yards.iterrows()
            ],
        }
