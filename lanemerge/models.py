"""
Pydantic models for the exported relation report
"""

from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field

from .inference.tags import TagId
from .processing.models import MergeData, MergeWay


# ============================================================
# Way Models
# ============================================================

class ResolvedTags(BaseModel):
    oneway: bool
    junction: str
    surface: str
    lanes: int
    lanes_forward: int
    lanes_backward: int
    turn_lanes: List[List[str]]
    turn_lanes_forward: List[List[str]]
    turn_lanes_backward: List[List[str]]


class LaneSlotModel(BaseModel):
    index: int
    direction: Literal["forward", "backward"]
    markings: List[str]


class WarningModel(BaseModel):
    tag: str
    kind: str
    message: str


class WayReport(BaseModel):
    id: int
    name: Optional[str] = None
    highway: Optional[str] = None
    tags: ResolvedTags
    osm_tags: Dict[str, str]  # canonical OSM strings
    inferred: List[str] = Field(default_factory=list)
    warnings: List[WarningModel] = Field(default_factory=list)
    nodes: List[int]
    missing_nodes: int = 0
    lanes: List[LaneSlotModel] = Field(default_factory=list)

    @classmethod
    def from_merge_way(cls, way: MergeWay) -> "WayReport":
        tags = way.tags
        return cls(
            id=way.id,
            name=way.name,
            highway=way.original_way.tags.get("highway"),
            tags=ResolvedTags(
                oneway=tags.oneway.get(),
                junction=tags.junction.get(),
                surface=tags.surface.get(),
                lanes=tags.lanes.get(),
                lanes_forward=tags.lanes_forward.get(),
                lanes_backward=tags.lanes_backward.get(),
                turn_lanes=tags.turn_lanes.get_both(str),
                turn_lanes_forward=tags.turn_lanes_forward.get_both(str),
                turn_lanes_backward=tags.turn_lanes_backward.get_both(str),
            ),
            osm_tags=tags.to_osm_tags(),
            inferred=[tag.value for tag in TagId if way.was_inferred(tag)],
            warnings=[
                WarningModel(tag=tag.value, kind=warning.kind, message=warning.message)
                for tag in TagId if tag in way.warnings
                for warning in sorted(way.warnings[tag], key=lambda w: w.message)
            ],
            nodes=list(way.ordered_nodes),
            missing_nodes=len(set(way.ordered_nodes)) - len(way.nodes),
            lanes=[
                LaneSlotModel(index=slot.index, direction=slot.direction, markings=slot.markings)
                for slot in way.lane_layout()
            ],
        )


# ============================================================
# Relation Report
# ============================================================

class RelationReport(BaseModel):
    relation_id: int
    name: str
    left_hand_traffic: bool = False
    generated_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    ways: List[WayReport] = Field(default_factory=list)
    failed_ways: Dict[int, str] = Field(default_factory=dict)
    warning_count: int = 0

    @classmethod
    def build(
        cls,
        relation_id: int,
        name: str,
        data: MergeData,
        failures: Optional[Dict[int, str]] = None,
        left_hand_traffic: bool = False
    ) -> "RelationReport":
        ways = [WayReport.from_merge_way(data[way_id]) for way_id in sorted(data)]
        return cls(
            relation_id=relation_id,
            name=name,
            left_hand_traffic=left_hand_traffic,
            ways=ways,
            failed_ways=dict(failures or {}),
            warning_count=sum(len(way.warnings) for way in ways),
        )
