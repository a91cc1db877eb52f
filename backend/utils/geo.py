"""
Geographic utilities module - re-exports from core.calculations.

This module keeps geographic helpers importable from utils while the
implementations live in the consolidated core.calculations module.
"""

from core.calculations import (
    calculate_distance,
    polyline_length_km,
    parts_length_km,
    bounding_box,
    meters_to_kilometers,
    kilometers_to_meters
)

__all__ = [
    'calculate_distance',
    'polyline_length_km',
    'parts_length_km',
    'bounding_box',
    'meters_to_kilometers',
    'kilometers_to_meters'
]
