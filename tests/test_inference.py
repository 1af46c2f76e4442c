"""Tests for tag records, inference rules and the inference engine."""
from itertools import combinations

import pytest

from lanemerge.errors import InvalidTagValueError, MissingTagError
from lanemerge.inference.engine import InferenceEngine
from lanemerge.inference.rules import RULES, format_turn_lanes
from lanemerge.inference.tags import MAX_LANES, MergeWayTags, MergeWayTagsIn, TagId
from lanemerge.inference.warnings import TagWarning
from lanemerge.osm.values import OsmDoubleArray, OsmString, OsmUnsignedInteger


def resolve(engine, raw):
    return engine.resolve(MergeWayTagsIn.from_osm_tags(raw))


class TestTagId:
    """Tests for TagId."""

    def test_osm_keys(self):
        assert TagId.LANES_FORWARD.osm_key == "lanes:forward"
        assert TagId.TURN_LANES_BACKWARD.osm_key == "turn:lanes:backward"
        assert TagId.from_osm_key("turn:lanes") is TagId.TURN_LANES

    def test_unknown_osm_key(self):
        with pytest.raises(KeyError):
            TagId.from_osm_key("maxspeed")

    def test_every_tag_has_a_rule(self):
        assert set(RULES) == set(TagId)

    def test_parse_rejects_oversized_lane_count(self):
        assert TagId.LANES.parse(str(MAX_LANES)).eq(MAX_LANES)
        for tag in (TagId.LANES, TagId.LANES_FORWARD, TagId.LANES_BACKWARD):
            with pytest.raises(InvalidTagValueError):
                tag.parse(str(MAX_LANES + 1))


class TestMergeWayTagsIn:
    """Tests for the partial tag record."""

    def test_from_osm_tags(self):
        tags = MergeWayTagsIn.from_osm_tags({"oneway": "yes", "lanes": "2", "name": "Main Street"})
        assert tags.is_eq(TagId.ONEWAY, True)
        assert tags.is_eq(TagId.LANES, 2)
        assert not tags.is_set(TagId.SURFACE)

    def test_invalid_value_is_absent(self):
        tags = MergeWayTagsIn.from_osm_tags({"lanes": "abc", "oneway": "maybe"})
        assert tags.set_tags() == []

    def test_oversized_lane_count_is_absent(self):
        tags = MergeWayTagsIn.from_osm_tags({"lanes:forward": "100000000", "lanes": "4"})
        assert not tags.is_set(TagId.LANES_FORWARD)
        assert tags.is_eq(TagId.LANES, 4)

    def test_none_tags(self):
        assert MergeWayTagsIn.from_osm_tags(None).unset_tags() == list(TagId)

    def test_copy_is_independent(self):
        tags = MergeWayTagsIn.from_osm_tags({"lanes": "2"})
        clone = tags.copy()
        clone.set(TagId.SURFACE, OsmString("asphalt"))
        assert not tags.is_set(TagId.SURFACE)
        assert clone != tags

    def test_compile_requires_every_tag(self):
        with pytest.raises(MissingTagError) as exc_info:
            MergeWayTags.compile(MergeWayTagsIn.from_osm_tags({"lanes": "2"}))
        assert exc_info.value.tag is TagId.ONEWAY


class TestScenarios:
    """Resolution of typical tag combinations."""

    def test_no_tags(self, engine):
        tags, inferred, warnings = resolve(engine, {})

        assert tags.oneway.eq(False)
        assert tags.junction.eq("no")
        assert tags.surface.eq("unknown")
        assert tags.lanes.eq(2)
        assert tags.lanes_forward.eq(1)
        assert tags.lanes_backward.eq(1)
        assert tags.turn_lanes_forward.eq([["none"]])
        assert tags.turn_lanes_backward.eq([["none"]])
        assert inferred == set(TagId)
        assert warnings == {}

    def test_oneway_with_forward_lanes(self, engine):
        tags, inferred, warnings = resolve(engine, {"oneway": "yes", "lanes:forward": "2"})

        assert tags.oneway.eq(True)
        assert tags.lanes.eq(2)
        assert tags.lanes_forward.eq(2)
        assert tags.lanes_backward.eq(0)
        assert tags.turn_lanes_forward.eq([["none"], ["none"]])
        assert tags.turn_lanes_backward.length == 0
        assert TagId.ONEWAY not in inferred
        assert TagId.LANES in inferred
        assert warnings == {}

    def test_odd_lanes(self, engine):
        tags, _, warnings = resolve(engine, {"lanes": "3"})

        assert tags.oneway.eq(False)
        assert tags.lanes.eq(3)
        assert tags.lanes_forward.eq(1)
        assert tags.lanes_backward.eq(1)
        assert set(warnings) == {TagId.LANES}
        assert warnings[TagId.LANES] == {
            TagWarning(
                "lanesUnequalToForwardBackward",
                "Way has '3' lanes specified, however forward and backward lanes total to '2'."
            )
        }

    def test_turn_lanes_matching_lane_count(self, engine):
        tags, _, warnings = resolve(
            engine, {"turn:lanes:forward": "left|through;right", "lanes:forward": "2"}
        )

        assert tags.turn_lanes_forward.eq([["left"], ["through", "right"]])
        assert tags.lanes_forward.eq(2)
        assert TagId.TURN_LANES_FORWARD not in warnings

    def test_malformed_lanes_behaves_as_absent(self, engine):
        malformed = resolve(engine, {"lanes": "abc"})
        empty = resolve(engine, {})

        assert malformed[0] == empty[0]
        assert malformed[1] == empty[1]

    def test_even_lanes_split(self, engine):
        tags, _, warnings = resolve(engine, {"oneway": "no", "lanes": "4"})

        assert tags.lanes_forward.eq(2)
        assert tags.lanes_backward.eq(2)
        assert tags.turn_lanes_forward.eq([["none"], ["none"]])
        assert warnings == {}

    def test_remaining_lanes(self, engine):
        tags, _, warnings = resolve(engine, {"oneway": "no", "lanes": "3", "lanes:forward": "2"})

        assert tags.lanes_backward.eq(1)
        assert warnings == {}

    def test_forward_larger_than_lanes_does_not_fail(self, engine):
        tags, _, warnings = resolve(engine, {"oneway": "no", "lanes": "1", "lanes:forward": "3"})

        assert tags.lanes_backward.eq(1)
        assert TagId.LANES in warnings

    def test_lanes_from_forward_and_backward(self, engine):
        tags, _, _ = resolve(
            engine, {"oneway": "no", "lanes:forward": "2", "lanes:backward": "1"}
        )
        assert tags.lanes.eq(3)

    def test_oneway_from_zero_backward_lanes(self, engine):
        tags, inferred, _ = resolve(engine, {"lanes:backward": "0"})

        assert tags.oneway.eq(True)
        assert TagId.ONEWAY in inferred

    def test_oneway_turn_lanes_become_forward(self, engine):
        tags, _, warnings = resolve(engine, {"oneway": "yes", "turn:lanes": "left|through;right"})

        assert tags.turn_lanes_forward.eq([["left"], ["through", "right"]])
        assert tags.turn_lanes.eq([["left"], ["through", "right"]])
        assert tags.lanes.eq(1)
        assert TagId.TURN_LANES_FORWARD in warnings

    def test_empty_turn_markings_become_none(self, engine):
        tags, _, _ = resolve(
            engine, {"oneway": "yes", "lanes": "3", "turn:lanes:forward": "left||right"}
        )
        assert tags.turn_lanes_forward.eq([["left"], ["none"], ["right"]])


class TestWarnings:
    """Tests for validation warnings."""

    def test_oneway_with_backward_lanes(self, engine):
        _, _, warnings = resolve(engine, {"oneway": "yes", "lanes:backward": "2"})

        expected = TagWarning.oneway_with_backward_lanes(OsmUnsignedInteger(2))
        assert expected.message == "Way is set as 'oneway' while also specifying '2' backward lanes."
        assert expected in warnings[TagId.ONEWAY]
        assert expected in warnings[TagId.LANES_BACKWARD]

    def test_not_oneway_with_no_backward_lanes(self, engine):
        _, _, warnings = resolve(engine, {"oneway": "no", "lanes:backward": "0"})
        assert TagWarning.not_oneway_with_no_backward_lanes() in warnings[TagId.ONEWAY]

    def test_zero_lanes(self, engine):
        _, _, warnings = resolve(engine, {"lanes": "0"})

        assert TagWarning("lanesEqualZero", "Way has 0 'lanes' specified.") in warnings[TagId.LANES]

    def test_zero_forward_lanes(self, engine):
        _, _, warnings = resolve(engine, {"oneway": "no", "lanes:forward": "0"})

        assert TagWarning.lanes_equal_zero(TagId.LANES_FORWARD) in warnings[TagId.LANES_FORWARD]

    def test_turn_lanes_count_mismatch(self, engine):
        _, _, warnings = resolve(
            engine,
            {"oneway": "yes", "lanes": "3", "turn:lanes:forward": "left|right"}
        )

        # formatting pads to the lane count, so only too many rows warn
        assert TagId.TURN_LANES_FORWARD not in warnings

        _, _, warnings = resolve(
            engine,
            {"oneway": "yes", "lanes": "1", "turn:lanes:forward": "left|right"}
        )
        assert warnings[TagId.TURN_LANES_FORWARD] == {
            TagWarning(
                "turnLanesUnequalToLanes",
                "'lanes:forward' specifies '1' lanes, however 'turn:lanes:forward' specifies '2' lanes."
            )
        }

    def test_only_tags_with_warnings_are_listed(self, engine):
        _, _, warnings = resolve(engine, {"lanes": "3"})
        assert all(warnings[tag] for tag in warnings)


SAMPLE_VALUES = {
    "oneway": "no",
    "junction": "roundabout",
    "surface": "asphalt",
    "lanes": "4",
    "lanes:forward": "3",
    "lanes:backward": "0",
    "turn:lanes": "left|through",
    "turn:lanes:forward": "left||right",
    "turn:lanes:backward": "",
}


def tag_subsets():
    keys = sorted(SAMPLE_VALUES)
    for size in range(len(keys) + 1):
        for subset in combinations(keys, size):
            yield {key: SAMPLE_VALUES[key] for key in subset}


class TestEngine:
    """Tests for engine-wide properties."""

    def test_every_subset_resolves(self, engine):
        for raw in tag_subsets():
            tags, inferred, _ = resolve(engine, raw)
            assert isinstance(tags, MergeWayTags)
            present = {TagId.from_osm_key(key) for key in raw}
            assert inferred == set(TagId) - present

    def test_rule_order_does_not_matter(self, engine):
        reversed_engine = InferenceEngine(order=list(reversed(list(TagId))))
        shuffled = list(TagId)
        shuffled = shuffled[3:] + shuffled[:3]
        shuffled_engine = InferenceEngine(order=shuffled)

        for raw in tag_subsets():
            expected = resolve(engine, raw)
            assert resolve(reversed_engine, raw) == expected
            assert resolve(shuffled_engine, raw) == expected

    def test_infer_on_complete_record_changes_nothing(self, engine):
        tags = MergeWayTagsIn.from_osm_tags({"oneway": "yes", "lanes": "2"})
        engine.infer(tags)
        assert tags.is_complete()
        before = tags.copy()

        assert engine.infer(tags) == set()
        assert tags == before

    def test_input_values_are_not_modified(self, engine):
        turn_lanes = OsmDoubleArray("left|", OsmString)
        tags = MergeWayTagsIn({TagId.TURN_LANES_FORWARD: turn_lanes, TagId.LANES_FORWARD: OsmUnsignedInteger(3)})

        resolved, _, _ = engine.resolve(tags)
        assert resolved.turn_lanes_forward.eq([["left"], ["none"], ["none"]])
        assert turn_lanes.to_string() == "left|"

    def test_resolved_record_has_no_item_setter(self, engine):
        tags, _, _ = resolve(engine, {"lanes": "2"})
        with pytest.raises(TypeError):
            tags[TagId.LANES] = OsmUnsignedInteger(5)
        assert tags.lanes.eq(2)

    def test_replace_returns_new_record(self, engine):
        tags, _, _ = resolve(engine, {"lanes": "2"})
        replaced = tags.replace({TagId.LANES: OsmUnsignedInteger(5)})

        assert replaced.lanes.eq(5)
        assert tags.lanes.eq(2)
        assert replaced.oneway is tags.oneway

    def test_transform_leaves_input_record_untouched(self, engine):
        tags_in = MergeWayTagsIn.from_osm_tags({"lanes:forward": "3", "turn:lanes:forward": "left|"})
        engine.infer(tags_in)
        resolved = engine.compile(tags_in)

        formatted, warnings = engine.transform(resolved)
        assert formatted is not resolved
        assert formatted.turn_lanes_forward.eq([["left"], ["none"], ["none"]])
        assert resolved.turn_lanes_forward.to_string() == "left|"
        assert TagId.TURN_LANES_FORWARD not in warnings

    def test_oversized_lane_count_resolves_as_absent(self, engine):
        tags, inferred, _ = resolve(engine, {"oneway": "yes", "lanes:forward": "100000000"})
        assert TagId.LANES_FORWARD in inferred
        assert tags.lanes_forward.get() <= MAX_LANES
        assert tags.turn_lanes_forward.length == tags.lanes_forward.get()

    def test_calculation_stage(self, engine):
        tags = MergeWayTagsIn.from_osm_tags({"oneway": "yes", "lanes:forward": "2"})
        newly = engine.calculate(tags)

        assert newly == {TagId.LANES, TagId.LANES_BACKWARD, TagId.TURN_LANES_BACKWARD}
        assert not tags.is_set(TagId.SURFACE)

    def test_missing_default_raises(self):
        rules = {tag: rule for tag, rule in RULES.items() if tag is not TagId.SURFACE}
        engine = InferenceEngine(rules=rules)
        tags = MergeWayTagsIn.from_osm_tags({})

        engine.infer(tags)
        with pytest.raises(MissingTagError):
            engine.compile(tags)

    def test_order_must_cover_rules(self):
        with pytest.raises(ValueError):
            InferenceEngine(order=[TagId.LANES])


class TestFormatTurnLanes:
    """Tests for format_turn_lanes."""

    def test_other_tags_are_not_formatted(self, engine):
        tags, _, _ = resolve(engine, {})
        assert format_turn_lanes(TagId.TURN_LANES, tags.turn_lanes, tags) is None

    def test_pads_to_lane_count(self, engine):
        tags, _, _ = resolve(engine, {"oneway": "yes", "lanes": "2"})
        formatted = format_turn_lanes(TagId.TURN_LANES_FORWARD, OsmDoubleArray.empty(), tags)
        assert formatted.eq([["none"], ["none"]])
