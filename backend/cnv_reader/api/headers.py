"""
API routes for CNV headers.
"""

import io
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from cnv_reader.api.schemas import (
    CoordinateResponse,
    ErrorResponse,
    FolderInfoResponse,
    HeaderResponse,
    HeaderSummaryResponse,
    MetricCatalogEntry,
    MetricResponse,
    ParseHeaderRequest,
    SetFolderRequest,
)
from cnv_reader.exceptions import CnvHeaderError
from cnv_reader.models.header import HeaderSummary
from cnv_reader.models.values import Coordinate
from cnv_reader.services.header_reader import HeaderReader
from cnv_reader.services.metric_info import MetricInfoReader
from cnv_reader.services.repository import get_repository


router = APIRouter(prefix="/headers", tags=["headers"])


def _coordinate_response(coordinate: Optional[Coordinate]) -> Optional[CoordinateResponse]:
    if coordinate is None:
        return None
    return CoordinateResponse(lat=coordinate.lat, lng=coordinate.lng)


def _metric_response(column: int, metric: MetricInfoReader) -> MetricResponse:
    return MetricResponse(
        column=column,
        name=metric.name,
        type=metric.type,
        unit=metric.unit,
        other=metric.other,
    )


def _build_summary_response(summary: HeaderSummary) -> HeaderSummaryResponse:
    coordinate = None
    if summary.lat is not None and summary.lng is not None:
        coordinate = CoordinateResponse(lat=summary.lat, lng=summary.lng)
    return HeaderSummaryResponse(
        id=summary.id,
        name=summary.name,
        source_file=summary.source_file,
        recorded_at=summary.recorded_at,
        coordinate=coordinate,
        metric_count=summary.metric_count,
        indexed_count=summary.indexed_count,
        plain_count=summary.plain_count,
        distance_m=summary.distance_m,
    )


def _build_header_response(
    reader: HeaderReader,
    header_id: Optional[str] = None,
    filepath: Optional[Path] = None,
) -> HeaderResponse:
    """Build full header response from a HeaderReader."""
    timestamp = reader.get_date_time()
    return HeaderResponse(
        id=header_id,
        name=filepath.stem if filepath else None,
        source_file=str(filepath) if filepath else None,
        recorded_at=timestamp.format() if timestamp else None,
        coordinate=_coordinate_response(reader.get_coordinate()),
        data=reader.get_data(),
        indexed_data=reader.get_indexed_data(),
        metrics=[
            _metric_response(column, metric)
            for column, metric in sorted(reader.get_metrics().items())
        ],
        line_count=reader.line_count,
        terminated=reader.terminated,
    )


def _load_header(header_id: str) -> HeaderReader:
    repo = get_repository()
    if not repo.has_header(header_id):
        raise HTTPException(status_code=404, detail=f"Header not found: {header_id}")

    reader = repo.get_header(header_id)
    if reader is None:
        raise HTTPException(
            status_code=422,
            detail=repo.get_error(header_id) or f"Header could not be read: {header_id}",
        )
    return reader


@router.get("", response_model=list[HeaderSummaryResponse])
async def list_headers(
    near_lat: Optional[float] = Query(None, ge=-90.0, le=90.0, description="Sort by distance to this latitude"),
    near_lng: Optional[float] = Query(None, ge=-180.0, le=180.0, description="Sort by distance to this longitude"),
):
    """
    List all readable CNV headers.

    Sorted by recording date (newest first), or by distance when
    near_lat/near_lng are given.
    """
    if (near_lat is None) != (near_lng is None):
        raise HTTPException(status_code=400, detail="near_lat and near_lng must be given together")

    near = None
    if near_lat is not None:
        near = Coordinate(lat=near_lat, lng=near_lng)

    repo = get_repository()
    return [_build_summary_response(s) for s in repo.list_headers(near=near)]


@router.post(
    "/parse",
    response_model=HeaderResponse,
    responses={422: {"model": ErrorResponse}},
)
async def parse_header(request: ParseHeaderRequest):
    """
    Parse a header block sent as text.

    Lines after the terminator are ignored.
    """
    try:
        reader = HeaderReader(io.StringIO(request.text))
    except CnvHeaderError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return _build_header_response(reader)


@router.get(
    "/{header_id}",
    response_model=HeaderResponse,
    responses={422: {"model": ErrorResponse}},
)
async def get_header(header_id: str):
    """
    Get the parsed header block of a file.
    """
    reader = _load_header(header_id)
    filepath = get_repository().get_filepath(header_id)
    return _build_header_response(reader, header_id, filepath)


@router.get("/{header_id}/metrics/{column}", response_model=MetricResponse)
async def get_header_metric(header_id: str, column: int):
    """
    Get the descriptor of one data column.
    """
    reader = _load_header(header_id)
    metric = reader.get_metric_by_column(column)
    if metric is None:
        raise HTTPException(status_code=404, detail=f"No metric for column {column}")
    return _metric_response(column, metric)


# ============================================================================
# Metric Catalog Routes
# ============================================================================

metrics_router = APIRouter(prefix="/metrics", tags=["metrics"])


@metrics_router.get("", response_model=list[MetricCatalogEntry])
async def get_metric_catalog():
    """
    List metric descriptors declared across all CNV files in the folder.
    """
    catalog = get_repository().metric_catalog()
    return [
        MetricCatalogEntry(
            name=row["name"],
            type=row["type"],
            unit=row["unit"],
            file_count=int(row["file_count"]),
        )
        for row in catalog.to_dict(orient="records")
    ]


# ============================================================================
# Folder Management Routes
# ============================================================================

folder_router = APIRouter(prefix="/folder", tags=["folder"])


@folder_router.get("", response_model=FolderInfoResponse)
async def get_folder_info():
    """Get information about the current data folder."""
    repo = get_repository()

    return FolderInfoResponse(
        path=str(repo.data_folder) if repo.data_folder else None,
        header_count=repo.header_count,
    )


@folder_router.post("", response_model=FolderInfoResponse)
async def set_folder(request: SetFolderRequest):
    """
    Set the data folder to scan for CNV files.

    This will clear the current cache and re-scan.
    """
    repo = get_repository()

    path = Path(request.path)
    if not path.exists():
        raise HTTPException(status_code=400, detail=f"Folder does not exist: {request.path}")
    if not path.is_dir():
        raise HTTPException(status_code=400, detail=f"Path is not a directory: {request.path}")

    count = repo.set_data_folder(path)

    return FolderInfoResponse(
        path=str(path),
        header_count=count,
    )


@folder_router.post("/rescan", response_model=FolderInfoResponse)
async def rescan_folder():
    """
    Rescan the current data folder for new CNV files.
    """
    repo = get_repository()

    if repo.data_folder is None:
        raise HTTPException(status_code=400, detail="No data folder set")

    # Edited files get a new id, so the index is rebuilt rather than extended
    count = repo.set_data_folder(repo.data_folder)

    return FolderInfoResponse(
        path=str(repo.data_folder),
        header_count=count,
    )
