"""
Input validation utilities for core functions.

This module provides the exception hierarchy and the validation functions
that guard the GeoJSON dataset before it becomes a segment catalog.
"""

import math
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple
from pathlib import Path

from core.constants import (
    FEATURE_COLLECTION_TYPE, SUPPORTED_GEOMETRY_TYPES, MULTI_LINE_STRING,
    LENGTH_PROPERTY, NAME_PROPERTY, MAX_DATASET_SIZE_BYTES, DATASET_EXTENSIONS,
    MIN_LATITUDE, MAX_LATITUDE, MIN_LONGITUDE, MAX_LONGITUDE
)

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


class InvalidDataset(ValidationError):
    """Raised when a raw dataset cannot be turned into a segment catalog."""
    pass


def validate_feature_collection(raw: Any, context: str = "Dataset") -> List[Mapping[str, Any]]:
    """
    Validate that raw input is a GeoJSON FeatureCollection.

    Args:
        raw: Parsed JSON document
        context: Context description for error messages

    Returns:
        The list of features

    Raises:
        InvalidDataset: If the document is not a feature collection
    """
    if raw is None:
        raise InvalidDataset(f"{context}: document is None")

    if not isinstance(raw, Mapping):
        raise InvalidDataset(f"{context}: expected a JSON object, got {type(raw).__name__}")

    if raw.get('type') != FEATURE_COLLECTION_TYPE:
        raise InvalidDataset(f"{context}: expected type '{FEATURE_COLLECTION_TYPE}', got {raw.get('type')!r}")

    features = raw.get('features')
    if not isinstance(features, list):
        raise InvalidDataset(f"{context}: 'features' must be a list")

    logger.debug(f"{context}: feature collection with {len(features)} features")
    return features


def _validate_point(point: Any, context: str) -> Tuple[float, float]:
    if not isinstance(point, (list, tuple)) or len(point) < 2:
        raise InvalidDataset(f"{context}: invalid coordinate {point!r}")

    try:
        x, y = float(point[0]), float(point[1])
    except (ValueError, TypeError) as e:
        raise InvalidDataset(f"{context}: non-numeric coordinate {point!r}") from e

    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidDataset(f"{context}: non-finite coordinate {point!r}")

    # GeoJSON positions are [lon, lat]
    if not MIN_LONGITUDE <= x <= MAX_LONGITUDE or not MIN_LATITUDE <= y <= MAX_LATITUDE:
        raise InvalidDataset(f"{context}: coordinate out of range {point!r}")

    return x, y


def validate_geometry(geometry: Any, context: str = "Feature") -> Tuple[str, List[List[Tuple[float, float]]]]:
    """
    Validate a LineString or MultiLineString geometry.

    Args:
        geometry: GeoJSON geometry object
        context: Context description for error messages

    Returns:
        Tuple of (geometry type, list of line parts as (x, y) tuples)

    Raises:
        InvalidDataset: If the geometry is missing or malformed
    """
    if not geometry or not isinstance(geometry, Mapping):
        raise InvalidDataset(f"{context}: missing geometry")

    geometry_type = geometry.get('type')
    if geometry_type not in SUPPORTED_GEOMETRY_TYPES:
        raise InvalidDataset(f"{context}: unsupported geometry type {geometry_type!r}")

    coordinates = geometry.get('coordinates')
    if not isinstance(coordinates, list):
        raise InvalidDataset(f"{context}: geometry coordinates must be a list")

    # A LineString is a single part
    raw_parts = coordinates if geometry_type == MULTI_LINE_STRING else [coordinates]

    parts = []
    for raw_part in raw_parts:
        if not isinstance(raw_part, list):
            raise InvalidDataset(f"{context}: line part must be a list of points")
        parts.append([_validate_point(point, context) for point in raw_part])

    return geometry_type, parts


def validate_length(value: Any, context: str = "Feature") -> Optional[float]:
    """
    Validate the KM property of a feature.

    Returns:
        The length in kilometers, or None when the property is absent

    Raises:
        InvalidDataset: If the value is negative or not a number
    """
    if value is None:
        return None

    if isinstance(value, bool):
        raise InvalidDataset(f"{context}: {LENGTH_PROPERTY} must be a number, got {value!r}")

    try:
        length = float(value)
    except (ValueError, TypeError) as e:
        raise InvalidDataset(f"{context}: {LENGTH_PROPERTY} must be a number, got {value!r}") from e

    if math.isnan(length) or math.isinf(length):
        raise InvalidDataset(f"{context}: invalid {LENGTH_PROPERTY} value {value!r}")

    if length < 0:
        raise InvalidDataset(f"{context}: negative {LENGTH_PROPERTY} value {length}")

    return length


def validate_dataset_file(dataset_file: Any) -> None:
    """
    Validate a dataset file before parsing.

    Args:
        dataset_file: File-like object, optionally with name and size

    Raises:
        InvalidDataset: If file validation fails
    """
    if dataset_file is None:
        raise InvalidDataset("No dataset file provided")

    size = getattr(dataset_file, 'size', None)
    if size is not None and size > MAX_DATASET_SIZE_BYTES:
        raise InvalidDataset(
            f"File too large: {size / 1024 / 1024:.1f}MB (max {MAX_DATASET_SIZE_BYTES // 1024 // 1024}MB)"
        )

    name = getattr(dataset_file, 'name', None)
    if isinstance(name, str):
        suffix = Path(name).suffix.lower()
        if suffix not in DATASET_EXTENSIONS:
            raise InvalidDataset(f"Invalid file type: {suffix} (expected one of {', '.join(DATASET_EXTENSIONS)})")

    logger.debug(f"File validation passed: {name or 'unknown'}")


def describe_feature(feature: Mapping[str, Any], position: int) -> str:
    """Build a short label for error messages about a feature."""
    properties: Dict[str, Any] = feature.get('properties') or {}
    name = properties.get(NAME_PROPERTY)
    return f"Feature #{position}" + (f" ({name})" if name else "")
