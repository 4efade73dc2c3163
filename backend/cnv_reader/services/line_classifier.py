"""
Header line classification.

Turns one raw header line into a tagged HeaderLine without touching any
accumulated state, so each rule can be checked in isolation. Rules are tried
in a fixed priority order:

1. metric column      name 3 = t090C: Temperature [ITS-90, deg C]
2. coordinate part    NMEA Latitude = 20.06
3. timestamp          NMEA UTC (Time) = Nov 27 2015 17:55:23
4. generic key/value  Ship: RV Cabo de Hornos
5. plain text         Sea-Bird SBE 9 Data File
"""

import os
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional

from cnv_reader.exceptions import StructuralLineError


HEADER_MARKERS = os.getenv("CNV_HEADER_MARKERS", "*#")
HEADER_ENCODING = os.getenv("CNV_HEADER_ENCODING", "utf-8")

KEY_VALUE_DELIMITERS = (":", "=")


@dataclass(frozen=True)
class HeaderReaderConfig:
    """Vocabulary and format settings for the header reader."""

    markers: str = HEADER_MARKERS
    terminator: str = "END"
    metric_keyword: str = "name"
    longitude_key: str = "NMEA Longitude"
    latitude_key: str = "NMEA Latitude"
    time_key: str = "NMEA UTC (Time)"
    time_format: str = "%b %d %Y %H:%M:%S"
    encoding: str = HEADER_ENCODING


DEFAULT_CONFIG = HeaderReaderConfig()


class LineKind(Enum):
    """Shape of a header line."""

    EMPTY = "empty"
    TERMINATOR = "terminator"
    METRIC = "metric"
    LONGITUDE = "longitude"
    LATITUDE = "latitude"
    TIMESTAMP = "timestamp"
    INDEXED = "indexed"
    PLAIN = "plain"


@dataclass(frozen=True)
class HeaderLine:
    """
    A classified header line.

    key/value are set for metric, coordinate, timestamp and indexed lines
    (for metric lines value is the descriptor); column only for metric lines.
    """

    kind: LineKind
    content: str
    key: Optional[str] = None
    value: Optional[str] = None
    column: Optional[int] = None


@lru_cache(maxsize=None)
def _metric_pattern(keyword: str) -> re.Pattern:
    return re.compile(rf"^{re.escape(keyword)}\s+(\d+)\s*([:=])\s*(.*)$")


def strip_marker(
    raw: str,
    config: HeaderReaderConfig = DEFAULT_CONFIG,
    line_number: Optional[int] = None,
) -> str:
    """
    Remove the line ending, the leading marker run and surrounding whitespace.

    Raises StructuralLineError when the line does not start with a marker.
    """
    line = raw.rstrip("\r\n")
    if not line or line[0] not in config.markers:
        raise StructuralLineError(
            f"header line does not start with a marker ({config.markers!r}): {line!r}",
            line_number=line_number,
            line=line,
        )
    return line.lstrip(config.markers).strip()


def is_terminator(content: str, config: HeaderReaderConfig = DEFAULT_CONFIG) -> bool:
    # *END* leaves "END*" after the leading marker is stripped
    return content.rstrip(config.markers).strip().upper() == config.terminator.upper()


def split_key_value(content: str) -> Optional[tuple[str, str, str]]:
    """Split on the first ':' or '=', returning (key, delimiter, value)."""
    positions = [content.find(d) for d in KEY_VALUE_DELIMITERS]
    positions = [p for p in positions if p >= 0]
    if not positions:
        return None
    idx = min(positions)
    return content[:idx].strip(), content[idx], content[idx + 1:].strip()


def classify_content(content: str, config: HeaderReaderConfig = DEFAULT_CONFIG) -> HeaderLine:
    """Classify marker-stripped, trimmed line content."""
    if not content:
        return HeaderLine(LineKind.EMPTY, content)

    if is_terminator(content, config):
        return HeaderLine(LineKind.TERMINATOR, content)

    match = _metric_pattern(config.metric_keyword).match(content)
    if match:
        return HeaderLine(
            LineKind.METRIC,
            content,
            key=config.metric_keyword,
            value=match.group(3).strip(),
            column=int(match.group(1)),
        )

    parts = split_key_value(content)
    if parts is None:
        return HeaderLine(LineKind.PLAIN, content)

    key, delimiter, value = parts
    if delimiter == "=":
        special = {
            config.longitude_key: LineKind.LONGITUDE,
            config.latitude_key: LineKind.LATITUDE,
            config.time_key: LineKind.TIMESTAMP,
        }
        if key in special:
            return HeaderLine(special[key], content, key=key, value=value)

    return HeaderLine(LineKind.INDEXED, content, key=key, value=value)


def classify_line(
    raw: str,
    config: HeaderReaderConfig = DEFAULT_CONFIG,
    line_number: Optional[int] = None,
) -> HeaderLine:
    """Classify a raw header line, marker included."""
    return classify_content(strip_marker(raw, config, line_number), config)
