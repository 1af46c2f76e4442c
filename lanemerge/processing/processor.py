"""
Way processor

Turns raw Overpass ways into MergeWays by running the inference engine on
each way's tags. Ways are independent: one way's tags never affect another
way's result, and a way that fails to resolve does not stop the batch.
"""

from typing import Dict, Mapping, Optional

from loguru import logger

from ..collectors.overpass.models import OverpassNode, OverpassWay
from ..config import ProcessingConfig
from ..errors import LaneMergeError
from ..inference.engine import InferenceEngine
from ..inference.tags import MergeWayTagsIn
from .models import MergeData, MergeWay


class WayProcessor:
    """
    Resolve lane tags for every way of a relation

    Usage:
        processor = WayProcessor(config.processing)
        data = processor.process(nodes, ways)
        processor.failures  # way id -> error message for skipped ways
    """

    def __init__(self, config: Optional[ProcessingConfig] = None, engine: Optional[InferenceEngine] = None):
        self.config = config or ProcessingConfig()
        self.engine = engine or InferenceEngine()
        self.failures: Dict[int, str] = {}

    def process_way(self, way: OverpassWay, all_nodes: Mapping[int, OverpassNode]) -> MergeWay:
        """
        Resolve a single way

        Args:
            way: Raw way
            all_nodes: Node lookup; nodes missing from it are left out

        Returns:
            The resolved MergeWay

        Raises:
            MissingTagError: If the rule set left a tag unset
        """
        tags_in = MergeWayTagsIn.from_osm_tags(way.tags, way_id=way.id)
        inferred = self.engine.infer(tags_in)
        tags = self.engine.compile(tags_in)
        tags, warnings = self.engine.transform(tags)

        nodes = {node_id: all_nodes[node_id] for node_id in way.nodes if node_id in all_nodes}
        if len(nodes) < len(set(way.nodes)):
            logger.debug(f"Way {way.id}: {len(set(way.nodes)) - len(nodes)} nodes missing from response")

        if warnings:
            logger.debug(f"Way {way.id}: {sum(len(w) for w in warnings.values())} warnings")

        return MergeWay(
            tags=tags,
            original_way=way,
            ordered_nodes=list(way.nodes),
            nodes=nodes,
            warnings=warnings,
            inferences=frozenset(inferred),
            left_hand_traffic=self.config.left_hand_traffic
        )

    def process(
        self,
        nodes: Mapping[int, OverpassNode],
        ways: Mapping[int, OverpassWay]
    ) -> MergeData:
        """
        Resolve every way

        Args:
            nodes: Node ID -> node
            ways: Way ID -> way

        Returns:
            Way ID -> MergeWay, without the ways that failed (see `failures`)
        """
        self.failures = {}
        data: MergeData = {}
        for way_id, way in ways.items():
            try:
                data[way_id] = self.process_way(way, nodes)
            except LaneMergeError as e:
                logger.error(f"Could not process way {way_id}: {e}")
                self.failures[way_id] = str(e)

        logger.info(f"Processed {len(data)} ways ({len(self.failures)} failed)")
        return data


def process(
    nodes: Mapping[int, OverpassNode],
    ways: Mapping[int, OverpassWay],
    config: Optional[ProcessingConfig] = None
) -> MergeData:
    """Resolve every way with a fresh WayProcessor"""
    return WayProcessor(config).process(nodes, ways)
