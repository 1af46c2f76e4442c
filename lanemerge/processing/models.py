"""
Processed way models

MergeWay is the resolved form of one OSM way: every lane tag has a value,
along with the warnings and inferences made while resolving it.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Mapping, Optional

from ..collectors.overpass.models import OverpassNode, OverpassWay
from ..inference.tags import MergeWayTags, TagId
from ..inference.warnings import TagWarning, WarningMap

FORWARD = "forward"
BACKWARD = "backward"


@dataclass(frozen=True)
class LaneSlot:
    """One lane across the roadway, counted from one edge"""
    index: int
    direction: str
    markings: List[str]


@dataclass(frozen=True)
class MergeWay:
    """Resolved way data"""
    tags: MergeWayTags
    original_way: OverpassWay
    ordered_nodes: List[int]
    nodes: Mapping[int, OverpassNode]
    warnings: WarningMap = field(default_factory=dict)
    inferences: FrozenSet[TagId] = frozenset()
    left_hand_traffic: bool = False

    @property
    def id(self) -> int:
        return self.original_way.id

    @property
    def name(self) -> Optional[str]:
        return self.original_way.tags.get("name")

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def was_inferred(self, tag: TagId) -> bool:
        return tag in self.inferences

    def all_warnings(self) -> List[TagWarning]:
        """Every warning, ordered by tag then message"""
        return [
            warning
            for tag in TagId if tag in self.warnings
            for warning in sorted(self.warnings[tag], key=lambda w: w.message)
        ]

    def lane_layout(self) -> List[LaneSlot]:
        """
        Lanes in cross-section order, as they are drawn

        With right-hand traffic the backward lanes come first, followed by
        the forward lanes with their turn markings read in reverse. With
        left-hand traffic the forward lanes come first and the backward
        markings are reversed instead.
        """
        lanes = self.tags.lanes.get()
        lanes_forward = self.tags.lanes_forward.get()
        lanes_backward = self.tags.lanes_backward.get()
        forward = self.tags.turn_lanes_forward.get_both(str)
        backward = self.tags.turn_lanes_backward.get_both(str)

        if self.left_hand_traffic:
            first, first_dir, first_count = forward, FORWARD, lanes_forward
            second, second_dir = backward, BACKWARD
        else:
            first, first_dir, first_count = backward, BACKWARD, lanes_backward
            second, second_dir = forward, FORWARD

        slots = []
        for i in range(lanes):
            if i < first_count:
                markings = first[i] if i < len(first) else []
                slots.append(LaneSlot(i, first_dir, list(markings)))
            else:
                j = len(second) + (first_count - i) - 1
                markings = second[j] if 0 <= j < len(second) else []
                slots.append(LaneSlot(i, second_dir, list(markings)))
        return slots


MergeData = Dict[int, MergeWay]
