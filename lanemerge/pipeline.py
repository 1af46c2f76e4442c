"""
Main pipeline orchestrator

  1. Input: relation name or ID
  2. Fetch the relation, its highway ways and their nodes (Overpass, cached)
  3. Resolve lane tags for every way (inference engine)
  4. Update application state
  5. Assemble the relation report
"""

import json
import os
from typing import Any, Dict, Optional
from loguru import logger

from .collectors.overpass import OverpassResponseParser, ParsedResponse, RelationCollector
from .config import LaneMergeConfig, load_config
from .models import RelationReport
from .processing import WayProcessor
from .state.app import AppState


class LaneMergePipeline:
    """
    Fetch a relation and resolve its lanes

    Usage:
        pipeline = LaneMergePipeline(load_config())
        report = pipeline.run("A1")
        pipeline.save(report, "output/a1.json")
    """

    def __init__(self, config: Optional[LaneMergeConfig] = None, state: Optional[AppState] = None):
        self.config = config or load_config()
        self.state = state or AppState()
        self.collector = RelationCollector(self.config)
        self.parser = OverpassResponseParser()
        self.processor = WayProcessor(self.config.processing)

    def run(self, search_term: str) -> RelationReport:
        """
        Run the complete pipeline for a search term

        Raises:
            OverpassError: If the search or request fails
        """
        logger.info(f"Searching for relation '{search_term}'")
        parsed = self.collector.fetch(search_term)
        return self._process(parsed)

    def process_response(self, response: Dict[str, Any]) -> RelationReport:
        """Run the pipeline on an Overpass response already in memory"""
        return self._process(self.parser.parse(response))

    def _process(self, parsed: ParsedResponse) -> RelationReport:
        relation = parsed.relation
        logger.info(f"Relation {relation.id} '{relation.name}': {len(parsed.ways)} ways")

        data = self.processor.process(parsed.nodes, parsed.ways)
        self.state.load(relation.id, data, parsed.ways)

        report = RelationReport.build(
            relation_id=relation.id,
            name=relation.name,
            data=data,
            failures=self.processor.failures,
            left_hand_traffic=self.config.processing.left_hand_traffic,
        )
        logger.info(f"{len(report.ways)} ways resolved, {report.warning_count} warnings")
        return report

    def save(self, report: RelationReport, output_path: str) -> str:
        """Save a relation report to JSON file"""
        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(report.model_dump(mode="json"), f, indent=2, ensure_ascii=False)

        logger.info(f"Saved relation report to {output_path}")
        return output_path
