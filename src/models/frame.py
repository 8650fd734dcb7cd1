"""
FrameDetections model for one frame of upstream detector output.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .detection import NormalizedBox, parse_detection
from .poi import POI


@dataclass
class FrameDetections:
    """
    Per-frame input to the tracking core.

    Attributes:
        frame_index: Sequential frame number since start.
        timestamp: Unix timestamp when the frame was captured.
        detections: Detected box per POI; missing keys mean "absent".
        source: Identifier for the upstream source.
    """
    frame_index: int
    timestamp: float = field(default_factory=time.time)
    detections: Dict[POI, Optional[NormalizedBox]] = field(default_factory=dict)
    source: Optional[str] = None

    def get(self, poi: POI) -> Optional[NormalizedBox]:
        """Detection for a POI, or None if absent this frame."""
        return self.detections.get(poi)

    @classmethod
    def from_mapping(
        cls,
        detections: Mapping[Any, Any],
        frame_index: int,
        timestamp: Optional[float] = None,
        source: Optional[str] = None,
    ) -> "FrameDetections":
        """
        Adapter: build from a mapping keyed by POI or wire label.

        Values may be None, a NormalizedBox, or an (x, y[, w, h]) sequence.
        """
        parsed: Dict[POI, Optional[NormalizedBox]] = {}
        for key, raw in detections.items():
            poi = key if isinstance(key, POI) else POI.from_label(str(key))
            parsed[poi] = parse_detection(raw)
        return cls(
            frame_index=frame_index,
            timestamp=time.time() if timestamp is None else float(timestamp),
            detections=parsed,
            source=source,
        )

    @classmethod
    def from_dict(cls, d: Dict[str, Any], default_index: int = 0) -> "FrameDetections":
        """
        Adapter: create from a replay record (decoded JSON object).

        Raises:
            ValueError: If the record or any of its fields is malformed.
        """
        if not isinstance(d, dict):
            raise ValueError(f"Frame record must be an object, got {type(d).__name__}")
        detections = d.get("detections", {}) or {}
        if not isinstance(detections, dict):
            raise ValueError("Frame record 'detections' must be an object")
        try:
            frame_index = int(d.get("frame_index", default_index))
            timestamp = d.get("timestamp")
            if timestamp is not None:
                timestamp = float(timestamp)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Frame record has invalid frame_index or timestamp: {e}") from e
        return cls.from_mapping(
            detections,
            frame_index=frame_index,
            timestamp=timestamp,
            source=d.get("source"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frame_index": self.frame_index,
            "timestamp": self.timestamp,
            "source": self.source,
            "detections": {
                poi.label: (box.as_tuple() if box is not None else None)
                for poi, box in self.detections.items()
            },
        }
