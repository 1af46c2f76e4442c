"""
Way processing: raw Overpass ways to resolved MergeWays
"""

from .models import MergeWay, LaneSlot, MergeData
from .processor import WayProcessor, process

__all__ = [
    "MergeWay",
    "LaneSlot",
    "MergeData",
    "WayProcessor",
    "process",
]
