"""
Path package.

This package contains the connectivity checks and the path selection
engine used to build a contiguous route through the segment catalog.
"""

# Connectivity checks
from .connectivity import (
    start_point,
    end_point,
    points_equal,
    connected,
    path_connected,
    first_break,
    find_extensions,
)

# Engine and its errors
from .engine import PathSelectionEngine
from .errors import (
    PathSelectionError,
    NotConnected,
    SegmentLimitReached,
    PathBroken,
    IndexOutOfRange,
    UnknownSegment,
)

# Models
from core.models.path import PathSnapshot, PathState

__all__ = [
    # Connectivity
    'start_point',
    'end_point',
    'points_equal',
    'connected',
    'path_connected',
    'first_break',
    'find_extensions',

    # Engine
    'PathSelectionEngine',

    # Errors
    'PathSelectionError',
    'NotConnected',
    'SegmentLimitReached',
    'PathBroken',
    'IndexOutOfRange',
    'UnknownSegment',

    # Models
    'PathSnapshot',
    'PathState',
]
