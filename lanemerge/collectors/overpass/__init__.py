"""
Overpass data collection module

Components:
- Query: Overpass query construction for a relation name or ID
- API client: Overpass API communication
- Models: Raw data structures (OverpassNode, OverpassWay, OverpassRelation)
- Parser: Response parsing and relation filtering
- Cache: Caching functionality
- Collector: Main orchestrator class
"""

from .models import OverpassNode, OverpassWay, OverpassRelation, RelationMember
from .parser import OverpassResponseParser, ParsedResponse
from .query import build_query
from .collector import RelationCollector

__all__ = [
    "OverpassNode",
    "OverpassWay",
    "OverpassRelation",
    "RelationMember",
    "OverpassResponseParser",
    "ParsedResponse",
    "build_query",
    "RelationCollector",
]
