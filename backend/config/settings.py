"""
Application settings and configuration.

This module contains application-specific configuration, UI settings, and defaults.
For dataset keys and limits, see core.constants module.
"""

import os
import logging
from typing import Dict, Any

# Import constants from core module
from core.constants import MAX_SEGMENTS, EMPTY_CANDIDATES_NONE

# App information
APP_NAME = "Railway Path Builder"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Build contiguous paths through a railway line network"

# File paths
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.path.join(BASE_DIR, "data")
LOGS_DIR = os.path.join(BASE_DIR, "logs")

# Dataset loaded at startup (override with RAIL_DATASET_PATH)
DEFAULT_DATASET_FILENAME = "MA_rail_lines.geojson"
DATASET_PATH = os.environ.get("RAIL_DATASET_PATH", os.path.join(DATA_DIR, DEFAULT_DATASET_FILENAME))

# Selection defaults
DEFAULT_MAX_SEGMENTS = MAX_SEGMENTS
DEFAULT_EMPTY_CANDIDATES = os.environ.get("RAIL_EMPTY_CANDIDATES", EMPTY_CANDIDATES_NONE)

# Map display parameters (Massachusetts rail network)
DEFAULT_MAP_CENTER = (42.35, -71.8)  # (lat, lon)
DEFAULT_MAP_ZOOM = 10
DEFAULT_TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"

# UI configuration
UI_DEFAULT_LINE_COLOR = "#3388FF"  # Unselected segments
UI_DEFAULT_SELECTED_COLOR = "#FF5757"  # Segments in the path
UI_DEFAULT_CANDIDATE_COLOR = "#2ECC71"  # Valid next segments
UI_DEFAULT_BROKEN_COLOR = "#AAAAAA"  # Path with a gap
UI_DEFAULT_HOVER_COLOR = "#FFC107"
DEFAULT_LINE_WIDTH = 3  # Width of segment lines in pixels
DEFAULT_SELECTED_LINE_WIDTH = 5

# Distance display
DISTANCE_DECIMALS = 2  # Total distance is shown with 2 decimals

# Logging configuration
LOGGING_CONFIG = {
    "level": logging.INFO,
    "format": '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
}

# CORS origins for the frontend dev servers
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
]


# =============== Configuration Classes ===============
# These classes provide typed access to configuration sections

class SelectionConfig:
    """Configuration parameters for path selection."""
    MAX_SEGMENTS = DEFAULT_MAX_SEGMENTS
    EMPTY_SELECTION_CANDIDATES = DEFAULT_EMPTY_CANDIDATES

    @classmethod
    def as_dict(cls) -> Dict[str, Any]:
        """Get selection configuration as a dictionary."""
        return {
            'max_segments': cls.MAX_SEGMENTS,
            'empty_selection_candidates': cls.EMPTY_SELECTION_CANDIDATES,
        }


class MapConfig:
    """Configuration parameters for the map view."""
    CENTER = DEFAULT_MAP_CENTER
    ZOOM = DEFAULT_MAP_ZOOM
    TILE_URL = DEFAULT_TILE_URL

    @classmethod
    def as_dict(cls) -> Dict[str, Any]:
        """Get map configuration as a dictionary."""
        return {
            'center': list(cls.CENTER),
            'zoom': cls.ZOOM,
            'tile_url': cls.TILE_URL,
        }


class UIConfig:
    """Configuration parameters for UI components."""
    LINE_COLOR = UI_DEFAULT_LINE_COLOR
    SELECTED_COLOR = UI_DEFAULT_SELECTED_COLOR
    CANDIDATE_COLOR = UI_DEFAULT_CANDIDATE_COLOR
    BROKEN_COLOR = UI_DEFAULT_BROKEN_COLOR
    HOVER_COLOR = UI_DEFAULT_HOVER_COLOR
    LINE_WIDTH = DEFAULT_LINE_WIDTH
    SELECTED_LINE_WIDTH = DEFAULT_SELECTED_LINE_WIDTH
    DISTANCE_DECIMALS = DISTANCE_DECIMALS

    @classmethod
    def as_dict(cls) -> Dict[str, Any]:
        """Get UI configuration as a dictionary."""
        return {
            'line_color': cls.LINE_COLOR,
            'selected_color': cls.SELECTED_COLOR,
            'candidate_color': cls.CANDIDATE_COLOR,
            'broken_color': cls.BROKEN_COLOR,
            'hover_color': cls.HOVER_COLOR,
            'line_width': cls.LINE_WIDTH,
            'selected_line_width': cls.SELECTED_LINE_WIDTH,
            'distance_decimals': cls.DISTANCE_DECIMALS,
        }
