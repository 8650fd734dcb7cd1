"""
Typed models for the contact counter.

Use the adapter classmethods to convert from raw dicts/sequences.
"""

from .poi import POI, ALL_POIS, BODY_POIS
from .detection import NormalizedBox, parse_detection
from .frame import FrameDetections
from .count_event import ContactEvent
from .config import (
    Config,
    FilterConfig,
    BufferConfig,
    PeakConfig,
)

__all__ = [
    # POI
    "POI",
    "ALL_POIS",
    "BODY_POIS",
    # Detection
    "NormalizedBox",
    "parse_detection",
    # Frame
    "FrameDetections",
    # Counting
    "ContactEvent",
    # Config
    "Config",
    "FilterConfig",
    "BufferConfig",
    "PeakConfig",
]
