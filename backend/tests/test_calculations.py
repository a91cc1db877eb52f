"""
Tests for distance calculations and the utils.geo re-exports.
"""

import pytest

from core.calculations import total_length_km
from utils.geo import (
    calculate_distance,
    polyline_length_km,
    parts_length_km,
    bounding_box,
    meters_to_kilometers,
    kilometers_to_meters,
)


class TestDistances:
    """Tests for geodesic distances."""

    def test_one_degree_latitude(self):
        """One degree of latitude is roughly 111 km."""
        assert calculate_distance(42.0, -71.8, 43.0, -71.8) == pytest.approx(111_000, rel=0.01)

    def test_polyline_uses_lon_lat_order(self):
        # [lon, lat] pairs: a 0.1 degree step north
        assert polyline_length_km([(-71.8, 42.0), (-71.8, 42.1)]) == pytest.approx(11.1, abs=0.1)

    def test_short_polylines(self):
        assert polyline_length_km([]) == 0.0
        assert polyline_length_km([(0.0, 0.0)]) == 0.0

    def test_parts_ignore_gaps(self):
        """The jump between parts does not count as track."""
        parts = [[(0.0, 0.0), (0.0, 0.1)], [(10.0, 10.0), (10.0, 10.1)]]
        assert parts_length_km(parts) == pytest.approx(
            polyline_length_km(parts[0]) + polyline_length_km(parts[1])
        )


class TestHelpers:
    """Tests for unit conversions, aggregation and bounds."""

    def test_unit_conversions(self):
        assert meters_to_kilometers(1500) == 1.5
        assert kilometers_to_meters(1.5) == 1500

    def test_total_length_is_order_independent(self):
        lengths = [0.1] * 10 + [1e6]
        assert total_length_km(lengths) == total_length_km(reversed(lengths))

    def test_total_length_empty(self):
        assert total_length_km([]) == 0

    def test_bounding_box(self):
        assert bounding_box([(-72.0, 42.5), (-71.0, 42.0)]) == (-72.0, 42.0, -71.0, 42.5)

    def test_bounding_box_empty(self):
        with pytest.raises(ValueError):
            bounding_box([])
