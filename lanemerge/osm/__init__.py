"""
Typed OpenStreetMap tag values

- Scalars: OsmBoolean, OsmUnsignedInteger, OsmString
- Arrays: OsmArray, OsmDoubleArray
- OsmMaybe: present / absent wrapper
"""

from .values import (
    OsmValue,
    OsmBoolean,
    OsmUnsignedInteger,
    OsmString,
    OsmArray,
    OsmDoubleArray,
    OsmMaybe,
)

__all__ = [
    "OsmValue",
    "OsmBoolean",
    "OsmUnsignedInteger",
    "OsmString",
    "OsmArray",
    "OsmDoubleArray",
    "OsmMaybe",
]
