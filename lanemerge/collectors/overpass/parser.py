"""
Overpass response parser

Sorts an Overpass JSON response into nodes, ways and the searched relation
"""

from dataclasses import dataclass
from typing import Any, Dict, List
from loguru import logger

from ...errors import OverpassError
from .models import OverpassNode, OverpassRelation, OverpassWay


@dataclass
class ParsedResponse:
    """Nodes and ways belonging to a single relation"""
    relation: OverpassRelation
    nodes: Dict[int, OverpassNode]
    ways: Dict[int, OverpassWay]


class OverpassResponseParser:
    """Parses Overpass API responses"""

    @staticmethod
    def parse_elements(data: Dict[str, Any]):
        """
        Split a response into nodes, ways and relations

        Args:
            data: JSON response from Overpass API

        Returns:
            Tuple of (nodes dict, ways dict, relations list)
        """
        nodes: Dict[int, OverpassNode] = {}
        ways: Dict[int, OverpassWay] = {}
        relations: List[OverpassRelation] = []

        for element in data.get("elements", []):
            element_type = element.get("type")
            if element_type == "node":
                nodes[element["id"]] = OverpassNode.from_element(element)
            elif element_type == "way":
                ways[element["id"]] = OverpassWay.from_element(element)
            elif element_type == "relation":
                relations.append(OverpassRelation.from_element(element))

        return nodes, ways, relations

    def parse(self, data: Dict[str, Any]) -> ParsedResponse:
        """
        Parse a response for a single relation search

        Ways are kept only when they are members of the relation and carry
        a `highway` tag.

        Raises:
            OverpassError: If there is not exactly one relation
        """
        nodes, ways, relations = self.parse_elements(data)

        if not relations:
            raise OverpassError(OverpassError.NO_RESULT)
        if len(relations) > 1:
            raise OverpassError(OverpassError.MULTIPLE_RELATIONS)

        relation = relations[0]
        member_ids = set(relation.way_ids())
        kept = {
            way_id: way for way_id, way in ways.items()
            if way_id in member_ids and way.is_highway
        }

        logger.debug(
            f"Relation {relation.id}: kept {len(kept)} of {len(ways)} ways, {len(nodes)} nodes"
        )
        return ParsedResponse(relation=relation, nodes=nodes, ways=kept)
