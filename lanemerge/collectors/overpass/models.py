"""
Overpass data models

Data classes for the raw nodes, ways and relations returned by Overpass.
They are read-only inputs to way processing.
"""

from typing import Any, Dict, List
from dataclasses import dataclass, field


@dataclass(frozen=True)
class OverpassNode:
    """Represents an OSM node (point)"""
    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_element(cls, element: Dict[str, Any]) -> "OverpassNode":
        return cls(
            id=element["id"],
            lat=element["lat"],
            lon=element["lon"],
            tags=dict(element.get("tags") or {})
        )


@dataclass(frozen=True)
class OverpassWay:
    """Represents an OSM way by its ordered node IDs"""
    id: int
    nodes: List[int]
    tags: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_element(cls, element: Dict[str, Any]) -> "OverpassWay":
        return cls(
            id=element["id"],
            nodes=list(element.get("nodes", [])),
            tags=dict(element.get("tags") or {})
        )

    @property
    def is_highway(self) -> bool:
        return "highway" in self.tags


@dataclass(frozen=True)
class RelationMember:
    """A single member of an OSM relation"""
    ref: int
    role: str
    type: str


@dataclass(frozen=True)
class OverpassRelation:
    """Represents an OSM relation (e.g. a road route)"""
    id: int
    members: List[RelationMember]
    tags: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_element(cls, element: Dict[str, Any]) -> "OverpassRelation":
        return cls(
            id=element["id"],
            members=[
                RelationMember(ref=m["ref"], role=m.get("role", ""), type=m.get("type", ""))
                for m in element.get("members", [])
            ],
            tags=dict(element.get("tags") or {})
        )

    @property
    def name(self) -> str:
        return self.tags.get("name", f"Relation {self.id}")

    def way_ids(self) -> List[int]:
        return [m.ref for m in self.members if m.type in ("way", "")]
