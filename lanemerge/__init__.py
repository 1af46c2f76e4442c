"""
lanemerge - road lane inference for OpenStreetMap relations

Fetches a road relation from Overpass, fills in missing lane tags
(lanes, lanes:forward, lanes:backward, turn:lanes:*, oneway, ...) and
reports inconsistencies between them.
"""

__version__ = "1.0.0"

from .config import LaneMergeConfig, load_config
from .errors import (
    LaneMergeError, InvalidTagValueError, MissingTagError, OverpassError, ConfigError
)
from .inference import InferenceEngine, MergeWayTags, MergeWayTagsIn, TagId, TagWarning
from .processing import MergeWay, WayProcessor, process

__all__ = [
    "__version__",
    "LaneMergeConfig",
    "load_config",
    "LaneMergeError",
    "InvalidTagValueError",
    "MissingTagError",
    "OverpassError",
    "ConfigError",
    "InferenceEngine",
    "MergeWayTags",
    "MergeWayTagsIn",
    "TagId",
    "TagWarning",
    "MergeWay",
    "WayProcessor",
    "process",
]
