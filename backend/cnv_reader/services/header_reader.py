"""
CNV header reader.

Consumes the marker-prefixed header block of a CNV file in one forward pass
and exposes what it found:

    * Sea-Bird SBE 9 Data File:              -> plain data
    * FileName = C:\\data\\cast01.hex         -> indexed data
    * NMEA Latitude = -33.02                 -> coordinate
    * NMEA UTC (Time) = Nov 27 2015 17:55:23 -> timestamp
    # name 0 = prDM: Pressure, Digiquartz [db] -> metric column 0
    *END*

The line source belongs to the caller: it is read up to and including the
terminator line, never closed, and left positioned on the first data row.
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from cnv_reader.exceptions import FieldParseError, StreamError
from cnv_reader.models.values import Coordinate, Timestamp, parse_decimal_degrees
from cnv_reader.services.line_classifier import (
    DEFAULT_CONFIG,
    HeaderLine,
    HeaderReaderConfig,
    LineKind,
    classify_line,
)
from cnv_reader.services.metric_info import MetricInfoReader


logger = logging.getLogger(__name__)

METRIC_COLUMNS = ["name", "type", "unit", "other"]

# Written ahead of the first marker by some Windows editors
BYTE_ORDER_MARK = "\ufeff"


class HeaderReader:
    """
    Parsed header block of a CNV file.

    All state is built in the constructor; the query methods return copies
    and never touch the source again.
    """

    def __init__(self, source: Any, config: Optional[HeaderReaderConfig] = None):
        """
        Read the header block from a line source.

        Args:
            source: Open text or binary file, or any iterable of lines
            config: Marker, vocabulary and format settings

        Raises:
            StreamError: source is missing or unreadable
            StructuralLineError: a header line lacks the marker prefix
        """
        self.config = config or DEFAULT_CONFIG

        self._data: list[str] = []
        self._indexed_data: dict[str, str] = {}
        self._metrics: dict[int, MetricInfoReader] = {}
        self._longitude: Optional[float] = None
        self._latitude: Optional[float] = None
        self._timestamp: Optional[Timestamp] = None

        self._line_count = 0
        self._terminated = False

        self._read(self._iter_lines(source))

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def _iter_lines(self, source: Any) -> Iterator[str]:
        if source is None:
            raise StreamError("No header source given")
        if isinstance(source, (str, bytes)):
            raise StreamError("Expected a readable line source, got a string; use read_cnv_header() for paths")
        if getattr(source, "closed", False):
            raise StreamError("Header source is closed")

        readline = getattr(source, "readline", None)
        if callable(readline):
            return self._readline_iter(readline)
        if isinstance(source, Iterable):
            return self._decoded(iter(source))
        raise StreamError(f"Header source is not readable: {type(source).__name__}")

    def _readline_iter(self, readline) -> Iterator[str]:
        while True:
            try:
                line = readline()
            except (OSError, ValueError) as e:
                raise StreamError(f"Failed to read header source: {e}") from e
            if not line:
                return
            yield self._decode(line)

    def _decoded(self, lines: Iterator) -> Iterator[str]:
        while True:
            try:
                line = next(lines)
            except StopIteration:
                return
            except (OSError, ValueError) as e:
                raise StreamError(f"Failed to read header source: {e}") from e
            yield self._decode(line)

    def _decode(self, line: Any) -> str:
        if isinstance(line, bytes):
            try:
                return line.decode(self.config.encoding)
            except UnicodeDecodeError as e:
                raise StreamError(f"Header line is not valid {self.config.encoding}: {e}") from e
        if not isinstance(line, str):
            raise StreamError(f"Header source yielded {type(line).__name__}, expected str")
        return line

    def _read(self, lines: Iterator[str]) -> None:
        for raw in lines:
            self._line_count += 1
            if self._line_count == 1 and raw.startswith(BYTE_ORDER_MARK):
                raw = raw[len(BYTE_ORDER_MARK):]
            header_line = classify_line(raw, self.config, self._line_count)
            if header_line.kind is LineKind.TERMINATOR:
                self._terminated = True
                break
            self._accumulate(header_line)

        if not self._terminated:
            logger.warning(
                f"Header source ended after {self._line_count} lines without '{self.config.terminator}' line"
            )

    def _accumulate(self, line: HeaderLine) -> None:
        kind = line.kind

        if kind is LineKind.EMPTY:
            return

        if kind is LineKind.METRIC:
            if line.column in self._metrics:
                logger.debug(f"Metric column {line.column} redefined on line {self._line_count}")
            self._metrics[line.column] = MetricInfoReader(line.value)

        elif kind is LineKind.LONGITUDE:
            self._longitude = self._parse_field(line, parse_decimal_degrees)

        elif kind is LineKind.LATITUDE:
            self._latitude = self._parse_field(line, parse_decimal_degrees)

        elif kind is LineKind.TIMESTAMP:
            self._timestamp = self._parse_field(
                line, lambda key, value: Timestamp.parse(value, self.config.time_format)
            )

        elif kind is LineKind.INDEXED:
            if line.key in self._indexed_data:
                logger.debug(f"Header key '{line.key}' redefined on line {self._line_count}")
            self._indexed_data[line.key] = line.value

        else:
            self._data.append(line.content)

    def _parse_field(self, line: HeaderLine, parser):
        try:
            return parser(line.key, line.value)
        except FieldParseError as e:
            logger.warning(f"Line {self._line_count}: {e}; field left empty")
            return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def line_count(self) -> int:
        """Physical lines consumed, terminator included."""
        return self._line_count

    @property
    def terminated(self) -> bool:
        return self._terminated

    def get_data(self) -> list[str]:
        """Plain lines, in header order."""
        return list(self._data)

    def get_indexed_data(self) -> dict[str, str]:
        return dict(self._indexed_data)

    def get_metrics(self) -> dict[int, MetricInfoReader]:
        return dict(self._metrics)

    def get_metric_by_column(self, column: int) -> Optional[MetricInfoReader]:
        return self._metrics.get(column)

    def get_coordinate(self) -> Optional[Coordinate]:
        """Cast position, only when both latitude and longitude parsed."""
        if self._latitude is None or self._longitude is None:
            return None
        return Coordinate(lat=self._latitude, lng=self._longitude)

    def get_date_time(self) -> Optional[Timestamp]:
        return self._timestamp

    def metrics_frame(self) -> pd.DataFrame:
        """Metric descriptors as a DataFrame indexed by column number."""
        columns = sorted(self._metrics)
        return pd.DataFrame(
            [self._metrics[c].to_dict() for c in columns],
            index=pd.Index(columns, name="column", dtype="int64"),
            columns=METRIC_COLUMNS,
        )


def read_cnv_header(filepath: Path, config: Optional[HeaderReaderConfig] = None) -> HeaderReader:
    """
    Open a CNV file and read its header block.

    Raises:
        StreamError: the file cannot be opened or read
        StructuralLineError: a header line lacks the marker prefix
    """
    config = config or DEFAULT_CONFIG
    try:
        f = open(filepath, "r", encoding=config.encoding, errors="replace")
    except OSError as e:
        raise StreamError(f"Cannot open {filepath}: {e}") from e

    with f:
        return HeaderReader(f, config)
