"""
Tag warnings

Data-quality findings produced while validating resolved tags. Warnings are
values returned with the data, never raised.
"""

from dataclasses import dataclass
from typing import Dict, Set

from .tags import TagId


@dataclass(frozen=True)
class TagWarning:
    """A single inconsistency between resolved tags"""
    kind: str
    message: str

    def __str__(self) -> str:
        return self.message

    @classmethod
    def oneway_with_backward_lanes(cls, num_lanes) -> "TagWarning":
        return cls(
            "onewayWithBackwardLanes",
            f"Way is set as 'oneway' while also specifying '{num_lanes}' backward lanes."
        )

    @classmethod
    def not_oneway_with_no_backward_lanes(cls) -> "TagWarning":
        return cls(
            "notOnewayWithNoBackwardLanes",
            "Way is not set as 'oneway' while having no backward lanes."
        )

    @classmethod
    def lanes_equal_zero(cls, tag: TagId) -> "TagWarning":
        return cls("lanesEqualZero", f"Way has 0 '{tag.osm_key}' specified.")

    @classmethod
    def lanes_unequal_to_forward_backward(cls, lanes, lanes_forward, lanes_backward) -> "TagWarning":
        total = lanes_forward.add(lanes_backward)
        return cls(
            "lanesUnequalToForwardBackward",
            f"Way has '{lanes}' lanes specified, however forward and backward lanes total to '{total}'."
        )

    @classmethod
    def turn_lanes_unequal_to_lanes(
        cls,
        turn_lanes_tag: TagId,
        turn_lanes_number: int,
        lanes_tag: TagId,
        lanes_number
    ) -> "TagWarning":
        return cls(
            "turnLanesUnequalToLanes",
            f"'{lanes_tag.osm_key}' specifies '{lanes_number}' lanes, however "
            f"'{turn_lanes_tag.osm_key}' specifies '{turn_lanes_number}' lanes."
        )


WarningMap = Dict[TagId, Set[TagWarning]]
