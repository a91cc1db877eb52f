"""
Constants for the Railway Path Builder application.

This module contains the dataset keys, limits and domain-specific constants
used throughout the codebase. Constants are grouped by their purpose and
documented with their units where applicable.
"""

# =============================================================================
# CONVERSION FACTORS
# =============================================================================

# Distance conversions
METERS_PER_KILOMETER = 1000

# =============================================================================
# SELECTION LIMITS
# =============================================================================

MAX_SEGMENTS = 20  # Maximum number of segments in one selected path

# Empty-selection candidate policies
EMPTY_CANDIDATES_NONE = "none"  # No candidates until the first pick
EMPTY_CANDIDATES_ALL = "all"  # Every segment with geometry is a candidate
EMPTY_CANDIDATE_POLICIES = (EMPTY_CANDIDATES_NONE, EMPTY_CANDIDATES_ALL)

# =============================================================================
# DATASET KEYS (GeoJSON feature properties)
# =============================================================================

NAME_PROPERTY = "YARDNAME"
LENGTH_PROPERTY = "KM"
ID_PROPERTY = "OBJECTID"
FALLBACK_ID_PROPERTY = "OBJECTID_1"  # Older exports of the rail lines layer

FEATURE_COLLECTION_TYPE = "FeatureCollection"
LINE_STRING = "LineString"
MULTI_LINE_STRING = "MultiLineString"
SUPPORTED_GEOMETRY_TYPES = (LINE_STRING, MULTI_LINE_STRING)

# =============================================================================
# GEOGRAPHIC BOUNDS (degrees)
# =============================================================================

MIN_LATITUDE = -90
MAX_LATITUDE = 90
MIN_LONGITUDE = -180
MAX_LONGITUDE = 180

# =============================================================================
# FILE LIMITS
# =============================================================================

MAX_DATASET_SIZE_BYTES = 50 * 1024 * 1024  # 50MB
DATASET_EXTENSIONS = (".geojson", ".json")
