"""
Path selection errors.

Rejected operations raise one of these and leave the engine state exactly
as it was before the call.
"""

from typing import Hashable, Optional

from core.validation import ValidationError


class PathSelectionError(ValidationError):
    """Base class for rejected path selection operations."""

    # Signals are reported to the user; other errors are caller mistakes
    user_facing = False

    @property
    def signal(self) -> str:
        return type(self).__name__


class NotConnected(PathSelectionError):
    """The clicked segment does not start where the path currently ends."""
    user_facing = True

    def __init__(self, last_id: Hashable, segment_id: Hashable, last_name: Optional[str] = None,
                 segment_name: Optional[str] = None):
        self.last_id = last_id
        self.segment_id = segment_id
        last_label = last_name or last_id
        segment_label = segment_name or segment_id
        super().__init__(f"{segment_label} does not connect to the end of {last_label}")


class SegmentLimitReached(PathSelectionError):
    """The path already holds the maximum number of segments."""
    user_facing = True

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"A path can contain at most {limit} segments")


class PathBroken(PathSelectionError):
    """The path has a gap and cannot be extended until it is repaired."""
    user_facing = True

    def __init__(self, break_index: Optional[int]):
        self.break_index = break_index
        position = f" after position {break_index}" if break_index is not None else ""
        super().__init__(f"The path is broken{position}; remove or clear segments before extending it")


class IndexOutOfRange(PathSelectionError, IndexError):
    """A removal index does not address a selected segment."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"Index {index} out of range for selection of length {length}")


class UnknownSegment(PathSelectionError, KeyError):
    """The segment identifier is not in the catalog."""

    def __init__(self, segment_id: Hashable):
        self.segment_id = segment_id
        super().__init__(f"Unknown segment {segment_id!r}")

    def __str__(self) -> str:
        return self.args[0]
