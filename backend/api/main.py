"""
FastAPI backend for the Railway Path Builder.

This provides REST API endpoints for browsing the railway segment catalog
and building a path one segment at a time, so any map frontend can drive
the path selection engine.
"""

from fastapi import FastAPI, Depends, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Dict, List, Optional, Any, Union
import logging
import sys
import os

# Add parent directory to path to import our modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import (
    APP_NAME, APP_VERSION, APP_DESCRIPTION, LOGGING_CONFIG, CORS_ORIGINS,
    SelectionConfig, MapConfig, UIConfig
)
from core.path import IndexOutOfRange, UnknownSegment
from core.filtering import validate_bounds
from services.path_service import PathService, SelectionResult, DatasetNotLoaded, get_path_service
from core.models.path import PathSnapshot

# Initialize logging
logging.basicConfig(level=LOGGING_CONFIG["level"], format=LOGGING_CONFIG["format"])
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=f"{APP_NAME} API",
    description=APP_DESCRIPTION,
    version=APP_VERSION
)

# Add CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

SegmentId = Union[int, float, str]


# Pydantic models for API requests/responses
class SelectRequest(BaseModel):
    segment_id: SegmentId


class HoverRequest(BaseModel):
    segment_id: Optional[SegmentId] = None


class SegmentResponse(BaseModel):
    id: SegmentId
    name: str
    length_km: float
    geometry_type: str
    part_count: int
    point_count: int
    start: Optional[List[float]]
    end: Optional[List[float]]


class SnapshotResponse(BaseModel):
    selection: List[SegmentResponse]
    segment_ids: List[SegmentId]
    connected: bool
    total_km: float
    candidates: List[SegmentId]
    state: str
    break_index: Optional[int]
    hovered: Optional[SegmentResponse]
    remaining: int
    max_segments: int


class SelectionResponse(BaseModel):
    accepted: bool
    notice: Optional[str]
    signal: Optional[str]
    snapshot: SnapshotResponse


def _snapshot_response(snapshot: PathSnapshot) -> SnapshotResponse:
    return SnapshotResponse(**snapshot.to_dict())


def _selection_response(result: SelectionResult) -> SelectionResponse:
    return SelectionResponse(**result.to_dict())


def require_service(service: PathService = Depends(get_path_service)) -> PathService:
    """Return the path service, or 503 when no dataset is loaded."""
    if not service.is_loaded:
        raise HTTPException(status_code=503, detail="Railway dataset is not loaded")
    return service


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": f"{APP_NAME} API",
        "version": APP_VERSION,
        "endpoints": {
            "GET /api/segments": "List catalog segments (optional bounding box)",
            "GET /api/segments/{segment_id}": "Details of one segment",
            "GET /api/catalog/summary": "Catalog totals per yard",
            "GET /api/selection": "Current path snapshot",
            "POST /api/selection/select": "Extend the path with a segment",
            "DELETE /api/selection/{index}": "Remove a segment from the path",
            "POST /api/selection/clear": "Clear the path",
            "POST /api/hover": "Set or clear the hovered segment",
            "GET /api/health": "Health check endpoint"
        }
    }


@app.get("/api/health")
async def health_check(service: PathService = Depends(get_path_service)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "railway-path-api",
        "dataset_loaded": service.is_loaded,
    }


@app.get("/api/config")
async def get_config():
    """Get default configuration values."""
    return {
        "selection": SelectionConfig.as_dict(),
        "map": MapConfig.as_dict(),
        "ui": UIConfig.as_dict(),
    }


@app.get("/api/segments", response_model=List[SegmentResponse])
def list_segments(
    min_lat: Optional[float] = Query(None),
    max_lat: Optional[float] = Query(None),
    min_lon: Optional[float] = Query(None),
    max_lon: Optional[float] = Query(None),
    service: PathService = Depends(require_service)
):
    """
    List catalog segments.

    Args:
        min_lat, max_lat: Optional latitude bounds (both or neither)
        min_lon, max_lon: Optional longitude bounds (both or neither)

    Returns:
        Segments whose line crosses the bounds, or all segments
    """
    if (min_lat is None) != (max_lat is None) or (min_lon is None) != (max_lon is None):
        raise HTTPException(status_code=400, detail="Bounds must be given as min and max pairs")

    lat_bounds = (min_lat, max_lat) if min_lat is not None else None
    lon_bounds = (min_lon, max_lon) if min_lon is not None else None

    is_valid, message = validate_bounds(lat_bounds, lon_bounds)
    if not is_valid:
        raise HTTPException(status_code=400, detail=message)

    return [SegmentResponse(**segment.to_dict()) for segment in service.segments(lat_bounds, lon_bounds)]


@app.get("/api/segments/{segment_id}", response_model=SegmentResponse)
def get_segment(segment_id: str, service: PathService = Depends(require_service)):
    """Get one segment (used for the hovered line info panel)."""
    try:
        return SegmentResponse(**service.segment(segment_id).to_dict())
    except UnknownSegment as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/api/catalog/summary")
def catalog_summary(service: PathService = Depends(require_service)) -> Dict[str, Any]:
    """Get catalog totals per yard."""
    return service.summary()


@app.get("/api/selection", response_model=SnapshotResponse)
def get_selection(service: PathService = Depends(require_service)):
    """Get the current path snapshot."""
    return _snapshot_response(service.snapshot())


@app.post("/api/selection/select", response_model=SelectionResponse)
def select_segment(request: SelectRequest, service: PathService = Depends(require_service)):
    """
    Extend the path with a clicked segment.

    A rejected click (not connected, limit reached, broken path) is still a
    200 response: `accepted` is false and `notice` explains why.
    """
    try:
        result = service.select(request.segment_id)
    except UnknownSegment as e:
        raise HTTPException(status_code=404, detail=str(e))

    if not result.accepted:
        logger.info(f"Selection rejected ({result.signal}): {result.notice}")
    return _selection_response(result)


@app.delete("/api/selection/{index}", response_model=SelectionResponse)
def remove_segment(index: int, service: PathService = Depends(require_service)):
    """Remove the segment at a position in the path."""
    try:
        result = service.remove(index)
    except IndexOutOfRange as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _selection_response(result)


@app.post("/api/selection/clear", response_model=SnapshotResponse)
def clear_selection(service: PathService = Depends(require_service)):
    """Clear the path."""
    return _snapshot_response(service.clear())


@app.post("/api/hover", response_model=SnapshotResponse)
def hover_segment(request: HoverRequest, service: PathService = Depends(require_service)):
    """Set the hovered segment, or clear it with a null segment_id."""
    try:
        return _snapshot_response(service.hover(request.segment_id))
    except UnknownSegment as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.exception_handler(DatasetNotLoaded)
async def dataset_not_loaded_handler(request, exc: DatasetNotLoaded):
    """Report a missing dataset as 503."""
    return JSONResponse(status_code=503, content={"detail": str(exc)})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
