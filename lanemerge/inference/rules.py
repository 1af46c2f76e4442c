"""
Inference rules

One InferenceRule per TagId. A rule describes five stages, run by the
InferenceEngine in this order across all tags:

1. calculations: exact values derived from tags that are already set. A
   calculation returns None unless the value is certain.
2. fallbacks: best guesses from related tags, in order of preference.
3. default: constant used when nothing else produced a value.
4. format: return the canonical form of the resolved value (or None).
5. validate: add TagWarnings for inconsistencies with the other tags.

Calculations and fallbacks only run for tags that are still unset. Format
and validate only run once every tag has a value.
"""

from typing import Callable, Dict, Optional, Sequence, Set

from ..osm.values import (
    OsmArray,
    OsmBoolean,
    OsmDoubleArray,
    OsmString,
    OsmUnsignedInteger,
    OsmValue,
)
from .tags import MergeWayTags, MergeWayTagsIn, TagId
from .warnings import TagWarning

InferenceFn = Callable[[MergeWayTagsIn], Optional[OsmValue]]
FormatFn = Callable[[TagId, OsmValue, MergeWayTags], Optional[OsmValue]]
ValidateFn = Callable[[OsmValue, MergeWayTags, Set[TagWarning]], None]


def no_format(tag: TagId, value: OsmValue, tags: MergeWayTags) -> None:
    return None


def no_validation(value: OsmValue, tags: MergeWayTags, warnings: Set[TagWarning]) -> None:
    return None


class InferenceRule:
    """How a single tag is inferred, formatted and validated"""

    def __init__(
        self,
        tag: TagId,
        default: Callable[[], OsmValue],
        calculations: Sequence[InferenceFn] = (),
        fallbacks: Sequence[InferenceFn] = (),
        format: FormatFn = no_format,
        validate: ValidateFn = no_validation
    ):
        self.tag = tag
        self.default = default
        self.calculations = tuple(calculations)
        self.fallbacks = tuple(fallbacks)
        self.format = format
        self.validate = validate

    def calculate(self, tags: MergeWayTagsIn) -> Optional[OsmValue]:
        """First calculation result for an unset tag, else None"""
        return self._first(self.calculations, tags)

    def fallback(self, tags: MergeWayTagsIn) -> Optional[OsmValue]:
        """First fallback result for an unset tag, else None"""
        return self._first(self.fallbacks, tags)

    def _first(self, fns: Sequence[InferenceFn], tags: MergeWayTagsIn) -> Optional[OsmValue]:
        if tags.is_set(self.tag):
            return None
        for fn in fns:
            value = fn(tags)
            if value is not None:
                return value
        return None

    def format_value(self, tags: MergeWayTags) -> Optional[OsmValue]:
        """Canonical form of this rule's tag, or None when already canonical"""
        return self.format(self.tag, tags[self.tag], tags)

    def validate_value(self, tags: MergeWayTags, warnings: Set[TagWarning]) -> None:
        self.validate(tags[self.tag], tags, warnings)

    def __repr__(self) -> str:
        return f"InferenceRule({self.tag.value})"


# ============================================================
# Helpers
# ============================================================

def _uint(tags: MergeWayTagsIn, tag: TagId) -> int:
    return tags.get(tag).get()


def _is_even(tags: MergeWayTagsIn, tag: TagId) -> bool:
    return tags.is_set(tag) and tags.get(tag).mod(2).eq(0)


def _empty_turn_lanes() -> OsmDoubleArray:
    return OsmDoubleArray.empty(OsmString)


# ============================================================
# oneway
# ============================================================

def _oneway_from_no_backward_lanes(tags: MergeWayTagsIn) -> Optional[OsmValue]:
    if tags.is_eq(TagId.LANES_BACKWARD, 0):
        return OsmBoolean.TRUE
    return None


def _validate_oneway_against_backward_lanes(
    value: OsmValue,
    tags: MergeWayTags,
    warnings: Set[TagWarning]
) -> None:
    if tags.oneway.eq(True) and not tags.lanes_backward.eq(0):
        warnings.add(TagWarning.oneway_with_backward_lanes(tags.lanes_backward))
    if tags.oneway.eq(False) and tags.lanes_backward.eq(0):
        warnings.add(TagWarning.not_oneway_with_no_backward_lanes())


# ============================================================
# lanes
# ============================================================

def _lanes_from_oneway_forward(tags: MergeWayTagsIn) -> Optional[OsmValue]:
    # oneway == true && lanes:forward set
    if tags.is_eq(TagId.ONEWAY, True) and tags.is_set(TagId.LANES_FORWARD):
        return tags.get(TagId.LANES_FORWARD)
    return None


def _lanes_from_forward_backward(tags: MergeWayTagsIn) -> Optional[OsmValue]:
    # oneway == false && lanes:forward set && lanes:backward set
    if (
        tags.is_eq(TagId.ONEWAY, False)
        and tags.is_set(TagId.LANES_FORWARD)
        and tags.is_set(TagId.LANES_BACKWARD)
    ):
        return tags.get(TagId.LANES_FORWARD).add(tags.get(TagId.LANES_BACKWARD))
    return None


def _lanes_from_oneway(tags: MergeWayTagsIn) -> Optional[OsmValue]:
    if tags.is_set(TagId.ONEWAY):
        return OsmUnsignedInteger(1 if tags.get(TagId.ONEWAY).get() else 2)
    return None


def _validate_lanes(value: OsmValue, tags: MergeWayTags, warnings: Set[TagWarning]) -> None:
    if value.eq(0):
        warnings.add(TagWarning.lanes_equal_zero(TagId.LANES))
    if not value.eq(tags.lanes_forward.add(tags.lanes_backward)):
        warnings.add(TagWarning.lanes_unequal_to_forward_backward(
            value, tags.lanes_forward, tags.lanes_backward
        ))


# ============================================================
# lanes:forward / lanes:backward
# ============================================================

def _remaining_lanes(other: TagId) -> InferenceFn:
    """lanes - other, when oneway == false and both are set"""

    def calculation(tags: MergeWayTagsIn) -> Optional[OsmValue]:
        if not (tags.is_eq(TagId.ONEWAY, False) and tags.is_set(TagId.LANES) and tags.is_set(other)):
            return None
        # a larger `other` is contradictory data; leave it to later stages
        if _uint(tags, TagId.LANES) < _uint(tags, other):
            return None
        return tags.get(TagId.LANES).subtract(tags.get(other))

    return calculation


def _half_of_even_lanes(tags: MergeWayTagsIn) -> Optional[OsmValue]:
    # oneway == false && lanes % 2 == 0
    if tags.is_eq(TagId.ONEWAY, False) and _is_even(tags, TagId.LANES):
        return tags.get(TagId.LANES).divide(2)
    return None


def _lanes_forward_from_oneway_lanes(tags: MergeWayTagsIn) -> Optional[OsmValue]:
    if tags.is_eq(TagId.ONEWAY, True) and tags.is_set(TagId.LANES):
        return tags.get(TagId.LANES)
    return None


def _lanes_backward_from_oneway(tags: MergeWayTagsIn) -> Optional[OsmValue]:
    if tags.is_eq(TagId.ONEWAY, True):
        return OsmUnsignedInteger(0)
    return None


def _validate_lanes_forward(value: OsmValue, tags: MergeWayTags, warnings: Set[TagWarning]) -> None:
    if value.eq(0):
        warnings.add(TagWarning.lanes_equal_zero(TagId.LANES_FORWARD))


# ============================================================
# turn:lanes:forward / turn:lanes:backward
# ============================================================

def _turn_lanes_forward_from_oneway(tags: MergeWayTagsIn) -> Optional[OsmValue]:
    # oneway == true && turn:lanes set
    if tags.is_eq(TagId.ONEWAY, True) and tags.is_set(TagId.TURN_LANES):
        return tags.get(TagId.TURN_LANES)
    return None


def _turn_lanes_backward_from_oneway(tags: MergeWayTagsIn) -> Optional[OsmValue]:
    if tags.is_eq(TagId.ONEWAY, True):
        return _empty_turn_lanes()
    return None


def _blank_turn_lanes_for(lanes_tag: TagId) -> InferenceFn:
    """One empty row per lane counted by `lanes_tag`"""

    def fallback(tags: MergeWayTagsIn) -> Optional[OsmValue]:
        if tags.is_set(lanes_tag):
            return OsmDoubleArray.of_length(_uint(tags, lanes_tag), "", OsmString)
        return None

    return fallback


_TURN_LANES_COUNT = {
    TagId.TURN_LANES_FORWARD: TagId.LANES_FORWARD,
    TagId.TURN_LANES_BACKWARD: TagId.LANES_BACKWARD,
}


def format_turn_lanes(tag: TagId, value: OsmValue, tags: MergeWayTags) -> Optional[OsmValue]:
    """
    Make every lane and every empty marking explicit

    Pads the rows up to the lane count, gives every empty row a single
    empty marking, then replaces each empty marking with "none". The input
    value is not modified.

    Args:
        tag: turnLanesForward or turnLanesBackward
        value: The resolved turn lanes
        tags: All resolved tags

    Returns:
        The formatted turn lanes, or None for any other tag
    """
    lanes_tag = _TURN_LANES_COUNT.get(tag)
    if lanes_tag is None:
        return None

    rows = [OsmArray(list(row), OsmString, row.delimiter) for row in value]
    while len(rows) < tags[lanes_tag].get():
        rows.append(OsmArray([], OsmString, value.inner_delimiter))
    for row in rows:
        if len(row) == 0:
            row.push(OsmString(""))

    padded = OsmDoubleArray(rows, OsmString, value.inner_delimiter, value.outer_delimiter)
    return padded.map(
        lambda row: row.map(lambda v: OsmString("none") if v.eq("") else v, OsmString),
        OsmString
    )


def _turn_lanes_count_check(turn_tag: TagId) -> ValidateFn:
    """Warn when the number of turn lane rows differs from the lane count"""
    lanes_tag = _TURN_LANES_COUNT[turn_tag]

    def validate(value: OsmValue, tags: MergeWayTags, warnings: Set[TagWarning]) -> None:
        if not tags[lanes_tag].eq(len(value)):
            warnings.add(TagWarning.turn_lanes_unequal_to_lanes(
                turn_tag, len(value), lanes_tag, tags[lanes_tag]
            ))

    return validate


# ============================================================
# Rule set
# ============================================================

RULES: Dict[TagId, InferenceRule] = {
    TagId.ONEWAY: InferenceRule(
        TagId.ONEWAY,
        default=lambda: OsmBoolean.FALSE,
        calculations=[_oneway_from_no_backward_lanes],
        validate=_validate_oneway_against_backward_lanes,
    ),
    TagId.JUNCTION: InferenceRule(
        TagId.JUNCTION,
        default=lambda: OsmString("no"),
    ),
    TagId.SURFACE: InferenceRule(
        TagId.SURFACE,
        default=lambda: OsmString("unknown"),
    ),
    TagId.LANES: InferenceRule(
        TagId.LANES,
        default=lambda: OsmUnsignedInteger(2),
        calculations=[_lanes_from_oneway_forward, _lanes_from_forward_backward],
        fallbacks=[_lanes_from_oneway],
        validate=_validate_lanes,
    ),
    TagId.LANES_FORWARD: InferenceRule(
        TagId.LANES_FORWARD,
        default=lambda: OsmUnsignedInteger(1),
        calculations=[_lanes_forward_from_oneway_lanes, _remaining_lanes(TagId.LANES_BACKWARD)],
        fallbacks=[_half_of_even_lanes],
        validate=_validate_lanes_forward,
    ),
    TagId.LANES_BACKWARD: InferenceRule(
        TagId.LANES_BACKWARD,
        default=lambda: OsmUnsignedInteger(1),
        calculations=[_lanes_backward_from_oneway, _remaining_lanes(TagId.LANES_FORWARD)],
        fallbacks=[_half_of_even_lanes],
        validate=_validate_oneway_against_backward_lanes,
    ),
    TagId.TURN_LANES: InferenceRule(
        TagId.TURN_LANES,
        default=_empty_turn_lanes,
    ),
    TagId.TURN_LANES_FORWARD: InferenceRule(
        TagId.TURN_LANES_FORWARD,
        default=_empty_turn_lanes,
        calculations=[_turn_lanes_forward_from_oneway],
        fallbacks=[_blank_turn_lanes_for(TagId.LANES_FORWARD)],
        format=format_turn_lanes,
        validate=_turn_lanes_count_check(TagId.TURN_LANES_FORWARD),
    ),
    TagId.TURN_LANES_BACKWARD: InferenceRule(
        TagId.TURN_LANES_BACKWARD,
        default=_empty_turn_lanes,
        calculations=[_turn_lanes_backward_from_oneway],
        fallbacks=[_blank_turn_lanes_for(TagId.LANES_BACKWARD)],
        format=format_turn_lanes,
        validate=_turn_lanes_count_check(TagId.TURN_LANES_BACKWARD),
    ),
}
