"""
Value objects derived from special header lines.

Both are immutable and built only by the header reader (or tests).
"""

import re
from dataclasses import dataclass
from datetime import datetime

from cnv_reader.exceptions import FieldParseError
from cnv_reader.utils.coordinates import haversine_distance


CANONICAL_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Signed decimal degrees: 70.10, -20, +5.5, .25
DECIMAL_DEGREES = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")

# NMEA month names are English regardless of LC_TIME
MONTH_ABBREVIATIONS = {
    name: number
    for number, name in enumerate(
        ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"], start=1
    )
}
MONTH_WORD = re.compile(r"\b[A-Za-z]{3}\b")


def parse_decimal_degrees(key: str, value: str) -> float:
    """Parse a signed decimal degree value, raising FieldParseError otherwise."""
    text = value.strip()
    if not DECIMAL_DEGREES.match(text):
        raise FieldParseError(key, value, "expected signed decimal degrees")
    return float(text)


def numeric_months(text: str, fmt: str) -> tuple[str, str]:
    """
    Rewrite English month abbreviations as numbers so that %b parses the
    same under any locale.
    """
    if "%b" not in fmt:
        return text, fmt

    def replace(match: re.Match) -> str:
        number = MONTH_ABBREVIATIONS.get(match.group(0).title())
        return f"{number:02d}" if number else match.group(0)

    return MONTH_WORD.sub(replace, text), fmt.replace("%b", "%m")


@dataclass(frozen=True)
class Coordinate:
    """Cast position in signed decimal degrees."""

    lat: float
    lng: float

    def distance_to(self, other: "Coordinate") -> float:
        """Great-circle distance to another coordinate, in meters."""
        return haversine_distance(self.lat, self.lng, other.lat, other.lng)


@dataclass(frozen=True)
class Timestamp:
    """Calendar instant with second precision."""

    value: datetime

    @classmethod
    def parse(cls, text: str, fmt: str) -> "Timestamp":
        try:
            parsed = datetime.strptime(*numeric_months(text.strip(), fmt))
        except ValueError as e:
            raise FieldParseError("timestamp", text, str(e)) from e
        return cls(parsed.replace(microsecond=0))

    def format(self) -> str:
        return self.value.strftime(CANONICAL_TIME_FORMAT)

    def isoformat(self) -> str:
        return self.value.isoformat()

    def __str__(self) -> str:
        return self.format()
