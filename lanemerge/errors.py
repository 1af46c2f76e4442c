"""
Exception types for lanemerge

Parse failures and rule-set defects are exceptions; tag warnings are not
(see lanemerge.inference.warnings).
"""


class LaneMergeError(Exception):
    """Base class for all lanemerge errors"""


class InvalidTagValueError(LaneMergeError, ValueError):
    """An OSM string could not be imported into a typed tag value"""

    def __init__(self, type_name: str, value: object):
        self.type_name = type_name
        self.value = value
        super().__init__(f"Value '{value}' is not valid for type '{type_name}'.")


class UnsetValueError(AssertionError):
    """An unset OsmMaybe was unwrapped without checking is_set() first"""


class MissingTagError(LaneMergeError):
    """A tag was still unset when compiling the resolved tag record"""

    def __init__(self, tag):
        self.tag = tag
        name = getattr(tag, "value", tag)
        super().__init__(f"Tag '{name}' has no value after inference.")


class ConfigError(LaneMergeError, ValueError):
    """Configuration validation failed"""


class OverpassError(LaneMergeError):
    """Searching or querying the Overpass API failed"""

    MALFORMED_SEARCH = "Invalid search term."
    ILLEGAL_CHARACTER = "Currently, double quotes in search terms are not supported."
    NO_RESULT = "Search returned no results."
    MULTIPLE_RELATIONS = "Multiple relations share that name. Use relation id."
    REQUEST_ERROR = "Overpass request failed."
