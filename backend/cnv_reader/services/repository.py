"""
Header Repository - manages loading and caching of CNV headers.

Scans a folder of .cnv files, reads each header block on demand and keeps
the parsed readers in memory.
"""

import hashlib
import logging
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

from cnv_reader.exceptions import CnvHeaderError
from cnv_reader.models.header import HeaderSummary
from cnv_reader.models.values import Coordinate
from cnv_reader.services.header_reader import HeaderReader, read_cnv_header
from cnv_reader.services.line_classifier import HeaderReaderConfig
from cnv_reader.utils.coordinates import distances_from


logger = logging.getLogger(__name__)

CNV_SUFFIX = ".cnv"
CATALOG_COLUMNS = ["name", "type", "unit", "file_count"]


class HeaderRepository:
    """
    Repository for CNV headers.

    Reads from .cnv files in a folder.
    Caches parsed headers in memory; load failures are remembered per id.
    """

    def __init__(self, data_folder: Optional[Path] = None, config: Optional[HeaderReaderConfig] = None):
        """
        Initialize the repository.

        Args:
            data_folder: Folder containing CNV files. If None, must be set later.
            config: Reader settings passed to every header read
        """
        self._data_folder: Optional[Path] = data_folder
        self._config = config
        self._cache: dict[str, HeaderReader] = {}
        self._errors: dict[str, str] = {}
        self._index: dict[str, Path] = {}  # id -> filepath mapping

        if data_folder is not None:
            self.scan_folder(data_folder)

    @property
    def data_folder(self) -> Optional[Path]:
        return self._data_folder

    @property
    def header_count(self) -> int:
        return len(self._index)

    def has_header(self, header_id: str) -> bool:
        return header_id in self._index

    def set_data_folder(self, folder: Path) -> int:
        """
        Set the data folder and scan for CNV files.

        Returns:
            Number of CNV files found
        """
        self._data_folder = folder
        self._index.clear()
        self.clear_cache()
        return self.scan_folder(folder)

    def scan_folder(self, folder: Path) -> int:
        """
        Scan a folder for CNV files and add them to the index.

        Returns:
            Number of CNV files found
        """
        if not folder.is_dir():
            logger.warning(f"Data folder is not a directory: {folder}")
            return 0

        count = 0
        for cnv_file in sorted(folder.iterdir()):
            if cnv_file.is_file() and cnv_file.suffix.lower() == CNV_SUFFIX:
                header_id = self._filepath_to_id(cnv_file)
                self._index[header_id] = cnv_file
                count += 1
                logger.debug(f"Indexed header: {header_id} -> {cnv_file.name}")

        logger.info(f"Scanned {count} CNV files in {folder}")
        return count

    def list_headers(self, near: Optional[Coordinate] = None) -> list[HeaderSummary]:
        """
        List all readable headers.

        Sorted newest first, or by distance to ``near`` when given
        (headers without a position last).
        """
        summaries = []
        for header_id, filepath in self._index.items():
            reader = self.get_header(header_id)
            if reader is not None:
                summaries.append(HeaderSummary.from_reader(header_id, filepath, reader))

        if near is None:
            summaries.sort(key=lambda s: (s.recorded_at or "", s.name), reverse=True)
            return summaries

        lats = [np.nan if s.lat is None else s.lat for s in summaries]
        lngs = [np.nan if s.lng is None else s.lng for s in summaries]
        distances = distances_from(near.lat, near.lng, lats, lngs)
        for summary, distance in zip(summaries, distances):
            summary.distance_m = None if np.isnan(distance) else float(distance)

        summaries.sort(key=lambda s: (s.distance_m is None, s.distance_m or 0.0, s.name))
        return summaries

    def get_header(self, header_id: str) -> Optional[HeaderReader]:
        """
        Get a parsed header by ID.

        Returns:
            HeaderReader if found and readable, None otherwise
        """
        if header_id in self._cache:
            return self._cache[header_id]

        if header_id not in self._index:
            return None

        filepath = self._index[header_id]
        try:
            reader = read_cnv_header(filepath, self._config)
        except CnvHeaderError as e:
            logger.error(f"Failed to read header {filepath.name}: {e}")
            self._errors[header_id] = str(e)
            return None

        self._errors.pop(header_id, None)
        self._cache[header_id] = reader
        logger.debug(f"Loaded and cached header: {header_id}")
        return reader

    def get_error(self, header_id: str) -> Optional[str]:
        """Message of the last failed read for this header, if any."""
        return self._errors.get(header_id)

    def get_filepath(self, header_id: str) -> Optional[Path]:
        return self._index.get(header_id)

    def metric_catalog(self) -> pd.DataFrame:
        """
        Metric descriptors found across all readable headers.

        One row per distinct (name, type, unit) with the number of files
        declaring it, most common first.
        """
        frames = []
        for header_id in self._index:
            reader = self.get_header(header_id)
            if reader is None:
                continue
            df = reader.metrics_frame()
            if df.empty:
                continue
            frames.append(df.assign(header_id=header_id))

        if not frames:
            return pd.DataFrame(columns=CATALOG_COLUMNS)

        metrics = pd.concat(frames, ignore_index=True)
        catalog = (
            metrics.groupby(["name", "type", "unit"], dropna=False)["header_id"]
            .nunique()
            .reset_index(name="file_count")
        )
        catalog = catalog.sort_values(["file_count", "name"], ascending=[False, True])
        catalog = catalog.astype(object).where(catalog.notna(), None)
        return catalog.reset_index(drop=True)[CATALOG_COLUMNS]

    def clear_cache(self) -> None:
        """Clear the in-memory cache."""
        self._cache.clear()
        self._errors.clear()
        logger.info("Header cache cleared")

    def _filepath_to_id(self, filepath: Path) -> str:
        """Generate a consistent ID from filepath."""
        # Use filename + size + mtime hash for consistency
        stat = filepath.stat()
        id_string = f"{filepath.name}_{stat.st_size}_{stat.st_mtime}"
        return hashlib.sha256(id_string.encode()).hexdigest()[:16]


# Global repository instance (set up by app initialization)
_repository: Optional[HeaderRepository] = None


def get_repository() -> HeaderRepository:
    """Get the global repository instance."""
    global _repository
    if _repository is None:
        _repository = HeaderRepository()
    return _repository


def init_repository(data_folder: Path) -> HeaderRepository:
    """Initialize the global repository with a data folder."""
    global _repository
    _repository = HeaderRepository(data_folder)
    return _repository
