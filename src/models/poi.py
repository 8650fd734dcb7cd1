"""
Points of interest (POIs) tracked across frames.

The tracked object (the ball) and the body landmarks it can touch form a
closed set. Declaration order matters: it is the tie-break order when two
body parts are equally close to the ball.
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple


class POI(Enum):
    """A named point whose position is tracked each frame."""

    BALL = "Ball"
    HEAD = "Head"
    LEFT_KNEE = "Left_Knee"
    RIGHT_KNEE = "Right_Knee"
    LEFT_FOOT = "Left_Foot"
    RIGHT_FOOT = "Right_Foot"

    @property
    def label(self) -> str:
        """Wire label used in replay files and config."""
        return self.value

    @property
    def is_body_part(self) -> bool:
        return self is not POI.BALL

    @classmethod
    def from_label(cls, label: str) -> "POI":
        """
        Look up a POI by its wire label or enum name.

        Raises:
            ValueError: If the label does not name a POI.
        """
        for poi in cls:
            if label == poi.value or label == poi.name:
                return poi
        raise ValueError(f"Unknown POI label: {label!r}")


ALL_POIS: Tuple[POI, ...] = tuple(POI)

# Contact candidates, in tie-break order
BODY_POIS: Tuple[POI, ...] = tuple(p for p in POI if p.is_body_part)
