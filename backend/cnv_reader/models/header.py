"""
Listing model for parsed CNV headers.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from cnv_reader.services.header_reader import HeaderReader


@dataclass
class HeaderSummary:
    """Lightweight summary of a CNV header for listing."""

    id: str
    name: str
    source_file: str
    recorded_at: Optional[str]
    lat: Optional[float]
    lng: Optional[float]
    metric_count: int
    indexed_count: int
    plain_count: int
    distance_m: Optional[float] = None

    @classmethod
    def from_reader(cls, header_id: str, filepath: Path, reader: HeaderReader) -> "HeaderSummary":
        timestamp = reader.get_date_time()
        coordinate = reader.get_coordinate()
        return cls(
            id=header_id,
            name=filepath.stem,
            source_file=str(filepath),
            recorded_at=timestamp.format() if timestamp else None,
            lat=coordinate.lat if coordinate else None,
            lng=coordinate.lng if coordinate else None,
            metric_count=len(reader.get_metrics()),
            indexed_count=len(reader.get_indexed_data()),
            plain_count=len(reader.get_data()),
        )
