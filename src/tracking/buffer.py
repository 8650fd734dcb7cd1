"""
Bounded, frame-aligned trajectory history for every POI.

Each frame appends exactly one measurement and one prediction per POI,
with None standing in for a missing value. Slot i therefore refers to the
same physical frame in every sequence, which is what lets the contact
resolver compare POIs at a single index.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Dict, List, Optional

from models.detection import NormalizedBox
from models.poi import ALL_POIS, POI


class BufferAlignmentError(RuntimeError):
    """Raised when per-POI sequences no longer share a frame-to-slot mapping."""


class TrajectoryBuffer:
    """
    Per-POI measurement and prediction history with FIFO eviction.

    Example:
        buffer = TrajectoryBuffer(capacity=100)
        buffer.append_measurement(POI.BALL, NormalizedBox(0.5, 0.4))
        buffer.append_prediction(POI.BALL, filter_bank.step(POI.BALL, det))
    """

    def __init__(self, capacity: int = 100):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._measurements: Dict[POI, Deque[Optional[NormalizedBox]]] = {
            poi: deque(maxlen=capacity) for poi in ALL_POIS
        }
        self._predictions: Dict[POI, Deque[Optional[NormalizedBox]]] = {
            poi: deque(maxlen=capacity) for poi in ALL_POIS
        }

    def append_measurement(self, poi: POI, detection: Optional[NormalizedBox]) -> None:
        """Record this frame's raw detection (None when absent)."""
        self._measurements[poi].append(detection)

    def append_prediction(self, poi: POI, prediction: Optional[NormalizedBox]) -> None:
        """Record this frame's smoothed position (None before the filter has data)."""
        self._predictions[poi].append(prediction)

    def measurements(self, poi: POI) -> List[Optional[NormalizedBox]]:
        return list(self._measurements[poi])

    def predictions(self, poi: POI) -> List[Optional[NormalizedBox]]:
        return list(self._predictions[poi])

    def latest_measurement(self, poi: POI) -> Optional[NormalizedBox]:
        seq = self._measurements[poi]
        return seq[-1] if seq else None

    def latest_prediction(self, poi: POI) -> Optional[NormalizedBox]:
        seq = self._predictions[poi]
        return seq[-1] if seq else None

    def prediction_at(self, poi: POI, index: int) -> Optional[NormalizedBox]:
        """
        Prediction stored at a slot.

        Raises:
            IndexError: If the slot is outside the buffered window.
        """
        return self._predictions[poi][index]

    def axis_series(self, poi: POI, axis: str) -> List[Optional[float]]:
        """One coordinate ("x" or "y") of a POI's predictions, None where missing."""
        if axis not in ("x", "y"):
            raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")
        return [
            (getattr(p, axis) if p is not None else None)
            for p in self._predictions[poi]
        ]

    def clear(self) -> None:
        """Empty every POI's measurements and predictions."""
        for poi in ALL_POIS:
            self._measurements[poi].clear()
            self._predictions[poi].clear()

    def check_alignment(self) -> None:
        """
        Verify all sequences have the same length.

        Raises:
            BufferAlignmentError: On any length mismatch.
        """
        expected = len(self._measurements[POI.BALL])
        for poi in ALL_POIS:
            m_len = len(self._measurements[poi])
            p_len = len(self._predictions[poi])
            if m_len != expected or p_len != expected:
                raise BufferAlignmentError(
                    f"{poi.label}: measurements={m_len}, predictions={p_len}, "
                    f"expected {expected}"
                )

    def __len__(self) -> int:
        """Number of buffered frames (checked for alignment first)."""
        self.check_alignment()
        return len(self._measurements[POI.BALL])
