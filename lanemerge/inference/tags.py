"""
Tag identifiers and tag records

TagId is the closed set of tags the inference engine understands. Each has
a fixed OSM key and a fixed value type. MergeWayTagsIn is the partial record
worked on during inference; MergeWayTags is the resolved record where every
tag has a value.
"""

from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional

from loguru import logger

from ..errors import InvalidTagValueError, MissingTagError
from ..osm.values import (
    OsmBoolean,
    OsmDoubleArray,
    OsmMaybe,
    OsmString,
    OsmUnsignedInteger,
    OsmValue,
)


class TagId(str, Enum):
    """Every tag known to the inference engine"""

    ONEWAY = "oneway"
    JUNCTION = "junction"
    SURFACE = "surface"
    LANES = "lanes"
    LANES_FORWARD = "lanesForward"
    LANES_BACKWARD = "lanesBackward"
    TURN_LANES = "turnLanes"
    TURN_LANES_FORWARD = "turnLanesForward"
    TURN_LANES_BACKWARD = "turnLanesBackward"

    @property
    def osm_key(self) -> str:
        return _OSM_KEYS[self]

    @property
    def value_type(self) -> type:
        return _VALUE_TYPES[self]

    def parse(self, raw: str) -> OsmValue:
        """
        Import a raw OSM string as this tag's value type

        Lane counts above MAX_LANES are rejected.

        Raises:
            InvalidTagValueError: If `raw` is not valid for the tag's type
        """
        value = self.value_type.parse(raw)
        if self in LANE_COUNT_TAGS and value.get() > MAX_LANES:
            raise InvalidTagValueError(self.value, raw)
        return value

    @classmethod
    def from_osm_key(cls, key: str) -> "TagId":
        for tag, osm_key in _OSM_KEYS.items():
            if osm_key == key:
                return tag
        raise KeyError(key)

    def __str__(self) -> str:
        return self.value


_OSM_KEYS: Dict[TagId, str] = {
    TagId.ONEWAY: "oneway",
    TagId.JUNCTION: "junction",
    TagId.SURFACE: "surface",
    TagId.LANES: "lanes",
    TagId.LANES_FORWARD: "lanes:forward",
    TagId.LANES_BACKWARD: "lanes:backward",
    TagId.TURN_LANES: "turn:lanes",
    TagId.TURN_LANES_FORWARD: "turn:lanes:forward",
    TagId.TURN_LANES_BACKWARD: "turn:lanes:backward",
}

_VALUE_TYPES: Dict[TagId, type] = {
    TagId.ONEWAY: OsmBoolean,
    TagId.JUNCTION: OsmString,
    TagId.SURFACE: OsmString,
    TagId.LANES: OsmUnsignedInteger,
    TagId.LANES_FORWARD: OsmUnsignedInteger,
    TagId.LANES_BACKWARD: OsmUnsignedInteger,
    TagId.TURN_LANES: OsmDoubleArray,
    TagId.TURN_LANES_FORWARD: OsmDoubleArray,
    TagId.TURN_LANES_BACKWARD: OsmDoubleArray,
}

# widest real roadways (toll plazas) stay well below this
MAX_LANES = 64

LANE_COUNT_TAGS = frozenset({TagId.LANES, TagId.LANES_FORWARD, TagId.LANES_BACKWARD})


class MergeWayTagsIn:
    """
    Partial tag record: every TagId maps to an OsmMaybe

    Mutated in place by the inference engine.
    """

    def __init__(self, values: Optional[Mapping[TagId, OsmValue]] = None):
        self._values: Dict[TagId, OsmMaybe] = {tag: OsmMaybe.unset() for tag in TagId}
        for tag, value in (values or {}).items():
            self.set(TagId(tag), value)

    @classmethod
    def from_osm_tags(cls, tags: Optional[Mapping[str, str]], way_id: Optional[int] = None) -> "MergeWayTagsIn":
        """
        Build a partial record from raw OSM tags

        A tag whose value cannot be parsed is treated as absent.

        Args:
            tags: Raw OSM key -> value mapping (may be None)
            way_id: Way ID, used only for logging
        """
        record = cls()
        for tag in TagId:
            raw = (tags or {}).get(tag.osm_key)
            if raw is None:
                continue
            try:
                record.set(tag, tag.parse(raw))
            except InvalidTagValueError as e:
                logger.warning(f"Way {way_id}: ignoring '{tag.osm_key}': {e}")
        return record

    def maybe(self, tag: TagId) -> OsmMaybe:
        return self._values[tag]

    def is_set(self, tag: TagId) -> bool:
        return self._values[tag].is_set()

    def get(self, tag: TagId) -> OsmValue:
        """Unwrap a tag's value; raises UnsetValueError when unset"""
        return self._values[tag].get()

    def is_eq(self, tag: TagId, other) -> bool:
        """Whether the tag is set and equal to `other`"""
        maybe = self._values[tag]
        return maybe.is_set() and maybe.get().eq(other)

    def set(self, tag: TagId, value: OsmValue) -> None:
        self._values[tag] = OsmMaybe.of(value)

    def unset(self, tag: TagId) -> None:
        self._values[tag] = OsmMaybe.unset()

    def set_tags(self) -> List[TagId]:
        return [tag for tag in TagId if self.is_set(tag)]

    def unset_tags(self) -> List[TagId]:
        return [tag for tag in TagId if not self.is_set(tag)]

    def is_complete(self) -> bool:
        return not self.unset_tags()

    def copy(self) -> "MergeWayTagsIn":
        clone = MergeWayTagsIn()
        clone._values = dict(self._values)
        return clone

    def __iter__(self) -> Iterator[TagId]:
        return iter(TagId)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MergeWayTagsIn):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        shown = ", ".join(f"{tag.value}={self.get(tag)}" for tag in self.set_tags())
        return f"MergeWayTagsIn({shown})"


class MergeWayTags:
    """Resolved tag record: every TagId has a value"""

    def __init__(self, values: Mapping[TagId, OsmValue]):
        missing = [tag for tag in TagId if tag not in values]
        if missing:
            raise MissingTagError(missing[0])
        self._values: Dict[TagId, OsmValue] = {tag: values[tag] for tag in TagId}

    @classmethod
    def compile(cls, tags: MergeWayTagsIn) -> "MergeWayTags":
        """
        Convert a fully inferred partial record

        Raises:
            MissingTagError: For the first tag that is still unset
        """
        for tag in TagId:
            if not tags.is_set(tag):
                raise MissingTagError(tag)
        return cls({tag: tags.get(tag) for tag in TagId})

    def __getitem__(self, tag: TagId) -> OsmValue:
        return self._values[tag]

    def replace(self, values: Mapping[TagId, OsmValue]) -> "MergeWayTags":
        """New record with `values` swapped in; this record is left untouched"""
        return MergeWayTags({**self._values, **values})

    def __iter__(self) -> Iterator[TagId]:
        return iter(TagId)

    @property
    def oneway(self) -> OsmBoolean:
        return self._values[TagId.ONEWAY]

    @property
    def junction(self) -> OsmString:
        return self._values[TagId.JUNCTION]

    @property
    def surface(self) -> OsmString:
        return self._values[TagId.SURFACE]

    @property
    def lanes(self) -> OsmUnsignedInteger:
        return self._values[TagId.LANES]

    @property
    def lanes_forward(self) -> OsmUnsignedInteger:
        return self._values[TagId.LANES_FORWARD]

    @property
    def lanes_backward(self) -> OsmUnsignedInteger:
        return self._values[TagId.LANES_BACKWARD]

    @property
    def turn_lanes(self) -> OsmDoubleArray:
        return self._values[TagId.TURN_LANES]

    @property
    def turn_lanes_forward(self) -> OsmDoubleArray:
        return self._values[TagId.TURN_LANES_FORWARD]

    @property
    def turn_lanes_backward(self) -> OsmDoubleArray:
        return self._values[TagId.TURN_LANES_BACKWARD]

    def to_osm_tags(self) -> Dict[str, str]:
        """Canonical OSM key -> string mapping"""
        return {tag.osm_key: self._values[tag].to_string() for tag in TagId}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MergeWayTags):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        shown = ", ".join(f"{tag.value}={value}" for tag, value in self._values.items())
        return f"MergeWayTags({shown})"
