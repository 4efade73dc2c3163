"""
Metric descriptor parser.

A metric-column line such as

    # name 0 = prDM: Pressure, Digiquartz [db]

carries a descriptor (the text after the first delimiter) of the form
``<name>[: <type>, <other>, ... [<unit>]]``. The unit may appear anywhere in
the tail, enclosed in square brackets.
"""

import re
from typing import Optional


# Units are enclosed in square brackets
UNIT_PATTERN = re.compile(r"\[([^\[\]]*)\]")


class MetricInfoReader:
    """
    Parses one metric descriptor into name, type, unit and other tags.

    Never raises: malformed descriptors leave the optional fields empty.
    """

    def __init__(self, descriptor: str):
        self._descriptor = descriptor
        self._unit: Optional[str] = None
        self._type: Optional[str] = None
        self._other: tuple[str, ...] = ()

        name, sep, info = descriptor.partition(":")
        self._name = name.strip()

        if sep:
            self._parse_info(info)

    def _parse_info(self, info: str) -> None:
        match = UNIT_PATTERN.search(info)
        if match:
            self._unit = match.group(1).strip()

        info = UNIT_PATTERN.sub("", info)
        tokens = [token.strip() for token in info.split(",")]
        tokens = [token for token in tokens if token]

        if tokens:
            self._type = tokens[0]
            self._other = tuple(tokens[1:])

    @property
    def descriptor(self) -> str:
        return self._descriptor

    @property
    def name(self) -> str:
        return self._name

    @property
    def unit(self) -> Optional[str]:
        """Measurement unit, e.g. ``db`` or ``ITS-90, deg C``."""
        return self._unit

    @property
    def type(self) -> Optional[str]:
        return self._type

    @property
    def other(self) -> list[str]:
        """Secondary tags found after the type, like vendor info or correlatives."""
        return list(self._other)

    def to_dict(self) -> dict:
        return {
            "name": self._name,
            "type": self._type,
            "unit": self._unit,
            "other": list(self._other),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MetricInfoReader):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((self._name, self._type, self._unit, self._other))

    def __repr__(self) -> str:
        return f"MetricInfoReader({self.descriptor!r})"
