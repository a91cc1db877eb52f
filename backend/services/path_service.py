"""
Path selection service.

This module provides the business logic between the API and the path
selection engine: it owns the loaded catalog, serialises engine operations,
and turns user-facing rejections into notices instead of errors.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Optional, Tuple

from core.catalog import SegmentCatalog
from core.filtering import filter_segments_by_bounds
from core.geojson import load_geojson_from_path
from core.models.path import PathSnapshot
from core.models.segment import RailSegment
from core.path import PathSelectionEngine, PathSelectionError, UnknownSegment
from core.validation import InvalidDataset, ValidationError
from config.settings import SelectionConfig, DATASET_PATH

logger = logging.getLogger(__name__)


class DatasetNotLoaded(ValidationError):
    """Raised when an operation needs a catalog and none is loaded."""
    pass


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of a select or remove request."""
    accepted: bool
    snapshot: PathSnapshot
    notice: Optional[str] = None  # Message to show the user
    signal: Optional[str] = None  # NotConnected, SegmentLimitReached, PathBroken

    def to_dict(self) -> Dict[str, Any]:
        return {
            'accepted': self.accepted,
            'notice': self.notice,
            'signal': self.signal,
            'snapshot': self.snapshot.to_dict(),
        }


class PathService:
    """
    Service for building a path through the loaded railway catalog.

    The engine itself is single-threaded; every call here holds a lock so
    the service can be shared across the API's worker threads.
    """

    def __init__(
        self,
        catalog: Optional[SegmentCatalog] = None,
        max_segments: Optional[int] = None,
        empty_candidates: Optional[str] = None
    ):
        self.max_segments = max_segments if max_segments is not None else SelectionConfig.MAX_SEGMENTS
        self.empty_candidates = empty_candidates or SelectionConfig.EMPTY_SELECTION_CANDIDATES
        self.metadata: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._engine: Optional[PathSelectionEngine] = None

        if catalog is not None:
            self.load_catalog(catalog)

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> PathSelectionEngine:
        if self._engine is None:
            raise DatasetNotLoaded("No railway dataset is loaded")
        return self._engine

    @property
    def catalog(self) -> SegmentCatalog:
        return self.engine.catalog

    def load_catalog(self, catalog: SegmentCatalog, metadata: Optional[Dict[str, Any]] = None) -> PathSnapshot:
        """Install a catalog. Any existing selection is discarded."""
        with self._lock:
            self._engine = PathSelectionEngine(
                catalog,
                max_segments=self.max_segments,
                empty_candidates=self.empty_candidates,
            )
            self.metadata = dict(metadata or {})
            logger.info(f"Path service using catalog with {len(catalog)} segments")
            return self._engine.snapshot()

    def load_from_path(self, file_path: str) -> PathSnapshot:
        """Load a GeoJSON dataset from disk and install it."""
        catalog, metadata = load_geojson_from_path(file_path)
        metadata['path'] = file_path
        return self.load_catalog(catalog, metadata)

    def reload(self) -> PathSnapshot:
        """Reload the dataset from its original path, resetting the selection."""
        file_path = self.metadata.get('path')
        if not file_path:
            raise DatasetNotLoaded("No dataset path to reload from")
        return self.load_from_path(file_path)

    def resolve_id(self, raw_id: Any) -> Hashable:
        """
        Map an identifier from a URL or request body onto a catalog key.

        Path parameters arrive as strings while GeoJSON ids are usually
        integers, so "42" resolves to 42 when only the integer exists and
        "1.5" resolves to 1.5 when only the float exists.
        """
        catalog = self.catalog
        if raw_id in catalog:
            return raw_id
        if isinstance(raw_id, str):
            for convert in (int, float):
                try:
                    converted = convert(raw_id)
                except ValueError:
                    continue
                if converted in catalog:
                    return converted
        return raw_id

    def segment(self, raw_id: Any) -> RailSegment:
        """Return a segment by identifier or raise UnknownSegment."""
        segment_id = self.resolve_id(raw_id)
        segment = self.catalog.by_id(segment_id)
        if segment is None:
            raise UnknownSegment(segment_id)
        return segment

    def segments(
        self,
        lat_bounds: Optional[Tuple[float, float]] = None,
        lon_bounds: Optional[Tuple[float, float]] = None
    ) -> List[RailSegment]:
        """Return catalog segments, optionally limited to a bounding box."""
        catalog = self.catalog
        if lat_bounds is None and lon_bounds is None:
            return list(catalog.all())

        df = filter_segments_by_bounds(catalog.to_dataframe(), lat_bounds, lon_bounds)
        # DataFrame rows keep catalog positions as their index
        segments = catalog.all()
        return [segments[position] for position in df.index]

    def summary(self) -> Dict[str, Any]:
        summary = self.catalog.summary()
        summary['dataset'] = self.metadata.get('name')
        return summary

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, raw_id: Any) -> SelectionResult:
        """
        Forward a click on a segment to the engine.

        NotConnected, SegmentLimitReached and PathBroken come back as a
        rejected result with a notice. UnknownSegment propagates.
        """
        with self._lock:
            engine = self.engine
            segment_id = self.resolve_id(raw_id)
            try:
                changed = engine.select(segment_id)
            except PathSelectionError as e:
                if not e.user_facing:
                    raise
                return SelectionResult(
                    accepted=False,
                    snapshot=engine.snapshot(),
                    notice=str(e),
                    signal=e.signal,
                )
            notice = None if changed else "Segment is already part of the path"
            return SelectionResult(accepted=True, snapshot=engine.snapshot(), notice=notice)

    def remove(self, index: int) -> SelectionResult:
        """Remove the segment at `index`. IndexOutOfRange propagates."""
        with self._lock:
            engine = self.engine
            removed = engine.remove(index)
            snapshot = engine.snapshot()
            notice = None
            if not snapshot.connected:
                notice = f"Removing {removed.name} left a gap in the path"
            return SelectionResult(accepted=True, snapshot=snapshot, notice=notice)

    def clear(self) -> PathSnapshot:
        with self._lock:
            self.engine.clear()
            return self.engine.snapshot()

    def hover(self, raw_id: Any) -> PathSnapshot:
        """Set the hovered segment (None clears it)."""
        with self._lock:
            engine = self.engine
            if raw_id is None:
                engine.unhover()
            else:
                engine.hover(self.resolve_id(raw_id))
            return engine.snapshot()

    def snapshot(self) -> PathSnapshot:
        with self._lock:
            return self.engine.snapshot()


_path_service: Optional[PathService] = None
_service_lock = threading.Lock()


def get_path_service() -> PathService:
    """
    Get the process-wide path service.

    The dataset at DATASET_PATH is loaded on first use; if it is missing or invalid the
    service starts empty and reports DatasetNotLoaded until one is loaded.
    """
    global _path_service
    with _service_lock:
        if _path_service is None:
            service = PathService()
            try:
                service.load_from_path(DATASET_PATH)
            except FileNotFoundError:
                logger.warning(f"Dataset not found at {DATASET_PATH}; starting without a catalog")
            except InvalidDataset as e:
                logger.warning(f"Dataset at {DATASET_PATH} is invalid ({e}); starting without a catalog")
            _path_service = service
        return _path_service
