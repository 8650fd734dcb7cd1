"""
Replay sources: recorded or in-memory detection streams.

The JSON lines format holds one frame per line:

    {"frame_index": 0, "timestamp": 0.0,
     "detections": {"Ball": [0.5, 0.4, 0.03, 0.03], "Head": [0.5, 0.1, 0, 0], "Left_Foot": null}}

POIs missing from "detections" are treated as absent for that frame.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, IO, List, Mapping, Optional, Sequence, Union

from models.frame import FrameDetections
from .base import DetectionSource, SourceConfig


@dataclass
class JsonlReplaySourceConfig(SourceConfig):
    """
    Configuration for JSON lines replay.

    Attributes:
        path: Path to the recording.
    """
    path: str = ""


class JsonlReplaySource(DetectionSource):
    """Reads FrameDetections from a JSON lines recording."""

    def __init__(self, config: JsonlReplaySourceConfig):
        super().__init__(config)
        self._path = config.path
        self._file: Optional[IO[str]] = None
        self._line_no = 0

    def open(self) -> None:
        if not self._path or not os.path.exists(self._path):
            raise RuntimeError(f"Replay file not found: {self._path!r}")
        self._file = open(self._path, "r", encoding="utf-8")
        self._is_open = True
        self._frame_index = 0
        self._line_no = 0
        logging.info(f"Replay source opened: {self._path}")

    def read(self) -> Optional[FrameDetections]:
        """
        Read the next frame.

        Raises:
            ValueError: If a line is not a valid frame record.
        """
        if not self._is_open or self._file is None:
            return None

        for line in self._file:
            self._line_no += 1
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
                frame = FrameDetections.from_dict(record, default_index=self._frame_index)
            except (TypeError, ValueError) as e:
                raise ValueError(f"{self._path}:{self._line_no}: invalid frame record: {e}") from e
            if frame.source is None:
                frame.source = self.source_id
            self._frame_index += 1
            return frame

        return None

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
        self._is_open = False


FrameInput = Union[FrameDetections, Mapping[Any, Any]]


class SequenceSource(DetectionSource):
    """
    Serves frames from an in-memory sequence.

    Items may be FrameDetections or plain mappings from POI (or wire label)
    to a detection; mappings get sequential frame indices.
    """

    def __init__(self, frames: Sequence[FrameInput], config: Optional[SourceConfig] = None):
        super().__init__(config or SourceConfig(source_id="sequence"))
        self._frames: List[FrameInput] = list(frames)
        self._pos = 0

    def open(self) -> None:
        self._is_open = True
        self._pos = 0
        self._frame_index = 0

    def read(self) -> Optional[FrameDetections]:
        if not self._is_open or self._pos >= len(self._frames):
            return None

        item = self._frames[self._pos]
        self._pos += 1
        if isinstance(item, FrameDetections):
            frame = item
        else:
            frame = FrameDetections.from_mapping(
                item, frame_index=self._frame_index, source=self.source_id
            )
        self._frame_index += 1
        return frame

    def close(self) -> None:
        self._is_open = False


def write_jsonl(path: str, frames: Sequence[FrameDetections]) -> None:
    """Write frames in the replay format (used to record sessions)."""
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)
    with open(path, "w", encoding="utf-8") as f:
        for frame in frames:
            f.write(json.dumps(frame.to_dict()) + "\n")
