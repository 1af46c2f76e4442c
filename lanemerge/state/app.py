"""
Application state

Owned by whoever drives the application (the pipeline, a UI) and passed by
reference to the parts that read or write it.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from ..collectors.overpass.models import OverpassWay
from ..processing.models import MergeData, MergeWay
from .containers import Atomic, Computed
from .graph import DependencyGraph


@dataclass(frozen=True)
class Bounds:
    """Bounding box of all resolved nodes"""
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @property
    def centre(self):
        return ((self.min_lat + self.max_lat) / 2, (self.min_lon + self.max_lon) / 2)


class AppState:
    """Reactive state for one loaded relation"""

    def __init__(self, graph: Optional[DependencyGraph] = None):
        self.graph = graph if graph is not None else DependencyGraph("app")

        # atomics
        self.data: Atomic[Optional[MergeData]] = Atomic(None, name="data", graph=self.graph)
        self.current_relation_id: Atomic[Optional[int]] = Atomic(None, name="currentRelationId", graph=self.graph)
        self.selected_way: Atomic[int] = Atomic(-1, name="selectedWay", graph=self.graph)
        self.all_ways: Atomic[Dict[int, OverpassWay]] = Atomic({}, name="allWays", graph=self.graph)

        # computed
        self.bounds: Computed[Optional[Bounds]] = Computed(
            self._compute_bounds, [self.data], name="bounds", graph=self.graph
        )
        self.warning_count: Computed[int] = Computed(
            self._compute_warning_count, [self.data], name="warningCount", graph=self.graph
        )
        self.selected: Computed[Optional[MergeWay]] = Computed(
            self._compute_selected, [self.data, self.selected_way], name="selected", graph=self.graph
        )

    def _compute_bounds(self) -> Optional[Bounds]:
        data = self.data.get()
        if not data:
            return None
        lats = [node.lat for way in data.values() for node in way.nodes.values()]
        lons = [node.lon for way in data.values() for node in way.nodes.values()]
        if not lats:
            return None
        return Bounds(min(lats), max(lats), min(lons), max(lons))

    def _compute_warning_count(self) -> int:
        data = self.data.get() or {}
        return sum(len(warnings) for way in data.values() for warnings in way.warnings.values())

    def _compute_selected(self) -> Optional[MergeWay]:
        data = self.data.get() or {}
        return data.get(self.selected_way.get())

    def load(self, relation_id: int, data: MergeData, ways: Dict[int, OverpassWay]) -> None:
        """Replace the loaded relation and clear the selection"""
        self.current_relation_id.set(relation_id)
        self.all_ways.set(dict(ways))
        self.selected_way.set(-1)
        self.data.set(data)
