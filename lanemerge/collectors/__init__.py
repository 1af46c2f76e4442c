"""
Data collectors for lanemerge

- RelationCollector: road relations, their ways and nodes from OpenStreetMap
"""

from .overpass import RelationCollector

__all__ = [
    "RelationCollector",
]
