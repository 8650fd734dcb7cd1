"""
Detection models for per-frame POI positions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class NormalizedBox:
    """
    A position and size normalized to frame dimensions.

    Used both for raw detections and for smoothed predictions. Body
    landmarks have zero width and height.

    Attributes:
        x: Horizontal position (0 = left edge, 1 = right edge).
        y: Vertical position (0 = top, 1 = bottom; larger is lower on screen).
        w: Width as a fraction of frame width.
        h: Height as a fraction of frame height.
    """
    x: float
    y: float
    w: float = 0.0
    h: float = 0.0

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return as (x, y, w, h) tuple."""
        return (self.x, self.y, self.w, self.h)

    def distance_to(self, other: "NormalizedBox") -> float:
        """Euclidean distance between the two positions."""
        return math.hypot(self.x - other.x, self.y - other.y)

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "NormalizedBox":
        """
        Create from raw detector output: (x, y) or (x, y, w, h).

        Raises:
            ValueError: If the values are not a 2/4-element sequence of
                numbers, are not finite, or fall outside [0, 1].
        """
        if isinstance(values, (str, bytes)) or not hasattr(values, "__len__"):
            raise ValueError(f"Expected (x, y) or (x, y, w, h), got {values!r}")
        if len(values) not in (2, 4):
            raise ValueError(f"Expected (x, y) or (x, y, w, h), got {len(values)} values")

        try:
            coords = [float(v) for v in values]
        except (TypeError, ValueError) as e:
            raise ValueError(f"Detection values must be numbers, got {values!r}") from e
        for v in coords:
            if not math.isfinite(v):
                raise ValueError(f"Detection values must be finite, got {coords}")
            if v < 0.0 or v > 1.0:
                raise ValueError(f"Detection values must be normalized to [0, 1], got {coords}")

        if len(coords) == 2:
            return cls(x=coords[0], y=coords[1])
        return cls(x=coords[0], y=coords[1], w=coords[2], h=coords[3])


def parse_detection(raw) -> Optional[NormalizedBox]:
    """
    Adapter: convert a raw detection value into an optional box.

    Accepts None, an existing NormalizedBox, or a 2/4-element sequence.
    """
    if raw is None:
        return None
    if isinstance(raw, NormalizedBox):
        return raw
    return NormalizedBox.from_sequence(raw)
