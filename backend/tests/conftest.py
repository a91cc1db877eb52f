"""
Shared fixtures for railway catalog and path selection tests.
"""

import pytest

from core.catalog import SegmentCatalog


def make_feature(object_id, start, end, km, name="Yard", geometry_type="LineString", extra_points=()):
    """Build a GeoJSON line feature from start to end."""
    coordinates = [list(start), *[list(p) for p in extra_points], list(end)]
    if geometry_type == "MultiLineString":
        coordinates = [coordinates]
    return {
        "type": "Feature",
        "properties": {"OBJECTID": object_id, "YARDNAME": name, "KM": km},
        "geometry": {"type": geometry_type, "coordinates": coordinates},
    }


def make_collection(*features):
    return {"type": "FeatureCollection", "features": list(features)}


@pytest.fixture
def feature_factory():
    return make_feature


@pytest.fixture
def collection_factory():
    return make_collection


@pytest.fixture
def abc_catalog():
    """A -> B connected; C unconnected. Nothing starts at B's end."""
    return SegmentCatalog.load(make_collection(
        make_feature(1, (0, 0), (1, 1), 5, name="A"),
        make_feature(2, (1, 1), (2, 2), 3, name="B"),
        make_feature(3, (5, 5), (6, 6), 2, name="C"),
    ))


@pytest.fixture
def abcd_catalog():
    """A -> B -> D connected; C unconnected."""
    return SegmentCatalog.load(make_collection(
        make_feature(1, (0, 0), (1, 1), 5, name="A"),
        make_feature(2, (1, 1), (2, 2), 3, name="B"),
        make_feature(3, (5, 5), (6, 6), 2, name="C"),
        make_feature(4, (2, 2), (3, 3), 4, name="D"),
    ))


@pytest.fixture
def chain_catalog():
    """25 segments chained end to start: segment i runs from (i, 0) to (i + 1, 0)."""
    return SegmentCatalog.load(make_collection(
        *[make_feature(i, (i, 0), (i + 1, 0), 1.5, name=f"Yard {i % 3}") for i in range(25)]
    ))
