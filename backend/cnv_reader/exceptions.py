"""
Error types raised while reading a CNV header block.

StreamError and StructuralLineError are fatal and reach the caller.
FieldParseError is raised by value parsers and absorbed by HeaderReader.
"""

from typing import Optional


class CnvHeaderError(Exception):
    """Base class for header reading errors."""


class StreamError(CnvHeaderError):
    """The line source is missing or cannot be read."""


class StructuralLineError(CnvHeaderError):
    """A line inside the header block does not carry the header marker."""

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class FieldParseError(CnvHeaderError):
    """A recognized special field has a value that could not be parsed."""

    def __init__(self, key: str, value: str, reason: str = ""):
        self.key = key
        self.value = value
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Could not parse '{key}' value {value!r}{detail}")
