"""
Tag inference

Fills in missing lane tags on a way from the tags that are present, then
formats and validates the result.
"""

from .tags import TagId, MergeWayTagsIn, MergeWayTags
from .warnings import TagWarning, WarningMap
from .rules import InferenceRule, RULES
from .engine import InferenceEngine

__all__ = [
    "TagId",
    "MergeWayTagsIn",
    "MergeWayTags",
    "TagWarning",
    "WarningMap",
    "InferenceRule",
    "RULES",
    "InferenceEngine",
]
