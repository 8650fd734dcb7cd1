"""
ContactEvent model for resolved ball-to-body contacts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .poi import POI


@dataclass(frozen=True)
class ContactEvent:
    """
    A contact emitted when a ball trajectory peak is attributed to a body part.

    Attributes:
        poi: Body part credited with the contact.
        frame_index: Index of the frame whose processing resolved the contact.
        peak_index: Buffer slot of the trajectory peak.
        ball_position: Smoothed ball (x, y) at the peak.
        poi_position: Smoothed body-part (x, y) at the peak.
        distance: Euclidean distance between the two positions.
        count: The POI's cumulative count including this contact.
        timestamp: Unix timestamp of the event.
    """
    poi: POI
    frame_index: int
    peak_index: int
    ball_position: Tuple[float, float]
    poi_position: Tuple[float, float]
    distance: float
    count: int
    timestamp: float

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "poi": self.poi.label,
            "frame_index": self.frame_index,
            "peak_index": self.peak_index,
            "ball_position": list(self.ball_position),
            "poi_position": list(self.poi_position),
            "distance": self.distance,
            "count": self.count,
            "timestamp": self.timestamp,
        }
