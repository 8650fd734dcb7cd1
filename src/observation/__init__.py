"""
Observation layer for pluggable detection input.

This layer abstracts where per-frame detections come from (recorded replay,
in-memory sequence, live detector adapter) from the processing pipeline.
Each source implements the DetectionSource interface and returns
FrameDetections objects.
"""

from .base import DetectionSource, SourceConfig
from .replay import JsonlReplaySource, JsonlReplaySourceConfig, SequenceSource, write_jsonl

__all__ = [
    "DetectionSource",
    "SourceConfig",
    "JsonlReplaySource",
    "JsonlReplaySourceConfig",
    "SequenceSource",
    "write_jsonl",
]
