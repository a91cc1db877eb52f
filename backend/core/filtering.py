"""
Spatial filtering of catalog segments.

This module provides bounding-box filtering so the presentation layer can
ask for the segments visible in the current map viewport.
"""

import pandas as pd
import logging
from typing import Optional, Tuple
from shapely.geometry import LineString, Point, box

from core.constants import MIN_LATITUDE, MAX_LATITUDE, MIN_LONGITUDE, MAX_LONGITUDE

logger = logging.getLogger(__name__)


def filter_segments_by_bounds(
    segments: pd.DataFrame,
    lat_bounds: Optional[Tuple[float, float]] = None,
    lon_bounds: Optional[Tuple[float, float]] = None
) -> pd.DataFrame:
    """
    Filter segments to those whose line crosses or touches a bounding box.

    Args:
        segments: Catalog DataFrame with a 'coordinates' column of [lon, lat] points
        lat_bounds: Optional (min_lat, max_lat) tuple
        lon_bounds: Optional (min_lon, max_lon) tuple

    Returns:
        Filtered segments DataFrame
    """
    if segments.empty:
        return segments

    if lat_bounds is None and lon_bounds is None:
        return segments

    if 'coordinates' not in segments.columns:
        logger.warning("Cannot filter by bounds: missing 'coordinates' column")
        return segments

    initial_count = len(segments)

    lat_min, lat_max = lat_bounds if lat_bounds else (MIN_LATITUDE, MAX_LATITUDE)
    lon_min, lon_max = lon_bounds if lon_bounds else (MIN_LONGITUDE, MAX_LONGITUDE)

    # Validate bounds
    if lat_min > lat_max:
        lat_min, lat_max = lat_max, lat_min
    if lon_min > lon_max:
        lon_min, lon_max = lon_max, lon_min

    viewport = box(lon_min, lat_min, lon_max, lat_max)

    def segment_in_bounds(coordinates) -> bool:
        """Check if the segment line intersects the viewport."""
        if not coordinates:
            return False
        if len(coordinates) == 1:
            return viewport.intersects(Point(coordinates[0]))
        return viewport.intersects(LineString(coordinates))

    mask = segments['coordinates'].apply(segment_in_bounds).astype(bool)
    filtered = segments[mask]

    logger.info(f"Spatial filter ({lat_min:.4f},{lon_min:.4f}) to ({lat_max:.4f},{lon_max:.4f}): "
                f"{initial_count} -> {len(filtered)} segments")

    return filtered


def validate_bounds(
    lat_bounds: Optional[Tuple[float, float]] = None,
    lon_bounds: Optional[Tuple[float, float]] = None
) -> Tuple[bool, Optional[str]]:
    """
    Validate bounding box parameters.

    Args:
        lat_bounds: Optional (min, max) latitude
        lon_bounds: Optional (min, max) longitude

    Returns:
        Tuple of (is_valid, error_message)
    """
    if lat_bounds is not None:
        lat_min, lat_max = lat_bounds
        if lat_min < MIN_LATITUDE or lat_max > MAX_LATITUDE:
            return False, "Latitude must be between -90 and 90"
        if lat_min > lat_max:
            return False, "lat_min must be less than lat_max"

    if lon_bounds is not None:
        lon_min, lon_max = lon_bounds
        if lon_min < MIN_LONGITUDE or lon_max > MAX_LONGITUDE:
            return False, "Longitude must be between -180 and 180"
        if lon_min > lon_max:
            return False, "lon_min must be less than lon_max"

    return True, None
