"""
Shared calculations module.

This module contains the geometric calculations used when building the
segment catalog and summarising a selected path. It provides a single
source of truth for distance arithmetic.
"""

import math
import numpy as np
from geopy.distance import geodesic
from typing import Iterable, Sequence, Tuple
import logging

from core.constants import METERS_PER_KILOMETER

logger = logging.getLogger(__name__)


# =============================================================================
# BASIC GEOMETRIC CALCULATIONS
# =============================================================================

def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate distance between two points in meters."""
    return geodesic((lat1, lon1), (lat2, lon2)).meters


def polyline_length_km(coordinates: Sequence[Tuple[float, float]]) -> float:
    """
    Calculate the geodesic length of a polyline.

    Args:
        coordinates: Ordered [lon, lat] pairs (GeoJSON order)

    Returns:
        float: Length in kilometers, 0.0 for fewer than two points
    """
    if len(coordinates) < 2:
        return 0.0

    total_m = 0.0
    for (lon1, lat1), (lon2, lat2) in zip(coordinates[:-1], coordinates[1:]):
        total_m += calculate_distance(lat1, lon1, lat2, lon2)

    return meters_to_kilometers(total_m)


def parts_length_km(parts: Iterable[Sequence[Tuple[float, float]]]) -> float:
    """
    Calculate the length of a multi-part line.

    Parts are measured separately: the gap between the end of one part and
    the start of the next is not track and does not count.
    """
    return sum(polyline_length_km(part) for part in parts)


def bounding_box(coordinates: Sequence[Tuple[float, float]]) -> Tuple[float, float, float, float]:
    """
    Calculate the bounding box of a set of [lon, lat] points.

    Returns:
        Tuple of (min_lon, min_lat, max_lon, max_lat)
    """
    if len(coordinates) == 0:
        raise ValueError("Cannot compute bounding box of an empty geometry")

    points = np.asarray(coordinates, dtype=float)
    min_lon, min_lat = points.min(axis=0)
    max_lon, max_lat = points.max(axis=0)
    return float(min_lon), float(min_lat), float(max_lon), float(max_lat)


# =============================================================================
# UNIT CONVERSIONS
# =============================================================================

def meters_to_kilometers(distance_m: float) -> float:
    """Convert meters to kilometers."""
    return distance_m / METERS_PER_KILOMETER


def kilometers_to_meters(distance_km: float) -> float:
    """Convert kilometers to meters."""
    return distance_km * METERS_PER_KILOMETER


# =============================================================================
# AGGREGATION
# =============================================================================

def total_length_km(lengths: Iterable[float]) -> float:
    """
    Sum segment lengths in kilometers.

    Uses math.fsum so the total does not depend on the order segments were
    added or removed in.
    """
    return math.fsum(lengths)
