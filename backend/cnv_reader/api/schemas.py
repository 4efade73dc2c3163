"""
API schemas (Pydantic models) for request/response validation.
"""

from typing import Optional
from pydantic import BaseModel, Field


# ============================================================================
# Header Schemas
# ============================================================================

class CoordinateResponse(BaseModel):
    """Cast position in decimal degrees."""
    lat: float
    lng: float


class MetricResponse(BaseModel):
    """Descriptor of one data column."""
    column: int
    name: str
    type: Optional[str] = None
    unit: Optional[str] = None
    other: list[str] = Field(default_factory=list)


class HeaderSummaryResponse(BaseModel):
    """Summary of a CNV header for listing."""
    id: str
    name: str
    source_file: str
    recorded_at: Optional[str] = None
    coordinate: Optional[CoordinateResponse] = None
    metric_count: int
    indexed_count: int
    plain_count: int
    distance_m: Optional[float] = None


class HeaderResponse(BaseModel):
    """Full content of a parsed header block."""
    id: Optional[str] = None
    name: Optional[str] = None
    source_file: Optional[str] = None
    recorded_at: Optional[str] = None
    coordinate: Optional[CoordinateResponse] = None
    data: list[str]
    indexed_data: dict[str, str]
    metrics: list[MetricResponse]
    line_count: int
    terminated: bool


class ParseHeaderRequest(BaseModel):
    """Raw header text to parse."""
    text: str


class MetricCatalogEntry(BaseModel):
    """A metric descriptor and how many files declare it."""
    name: str
    type: Optional[str] = None
    unit: Optional[str] = None
    file_count: int


# ============================================================================
# Folder Management Schemas
# ============================================================================

class SetFolderRequest(BaseModel):
    """Request to set the data folder."""
    path: str


class FolderInfoResponse(BaseModel):
    """Information about the current data folder."""
    path: Optional[str]
    header_count: int


# ============================================================================
# Error Schemas
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
    code: Optional[str] = None
