"""
Prominence-based peak detection on a trajectory with gaps.

In image coordinates y grows downward, so a peak in the ball's y series is
the ball at its lowest point, i.e. the moment it meets a body part.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from models.config import PeakConfig


def _is_missing(value: Optional[float]) -> bool:
    return value is None or math.isnan(value)


def _window_min(values: Sequence[Optional[float]], start: int, stop: int) -> Optional[float]:
    """Minimum valid value in values[start:stop], None if all are missing."""
    valid = [v for v in values[start:stop] if not _is_missing(v)]
    return min(valid) if valid else None


def find_peaks(
    values: Sequence[Optional[float]],
    prominence: float = 0.02,
    window: int = 10,
) -> List[int]:
    """
    Find prominent local maxima.

    A sample is a candidate if it is strictly greater than both neighbours,
    where a missing neighbour counts as -inf. Its reference level is the
    higher of the minima over the valid samples among up to `window`
    neighbours on each side; a side with no valid sample does not
    constrain. The candidate is kept if no side constrains it or if it
    rises at least `prominence` above the reference.

    Args:
        values: Samples in frame order; None or NaN marks a missing sample.
        prominence: Minimum rise above the reference level.
        window: Samples inspected on each side.

    Returns:
        Indices of accepted peaks in ascending order.
    """
    peaks: List[int] = []
    n = len(values)

    for i in range(1, n - 1):
        current = values[i]
        if _is_missing(current):
            continue

        prev = -math.inf if _is_missing(values[i - 1]) else values[i - 1]
        nxt = -math.inf if _is_missing(values[i + 1]) else values[i + 1]
        if not (current > prev and current > nxt):
            continue

        left_min = _window_min(values, max(0, i - window), i)
        right_min = _window_min(values, i + 1, min(n, i + window + 1))

        constraints = [m for m in (left_min, right_min) if m is not None]
        if not constraints or current - max(constraints) >= prominence:
            peaks.append(i)

    return peaks


class PeakDetector:
    """
    Runs find_peaks once enough trajectory history is available.

    With fewer than `min_valid_samples` non-missing samples the detector
    reports nothing and the decision is deferred to a later frame.
    """

    def __init__(self, config: Optional[PeakConfig] = None):
        self.config = config or PeakConfig()

    def has_enough_data(self, values: Sequence[Optional[float]]) -> bool:
        valid = sum(1 for v in values if not _is_missing(v))
        return valid >= self.config.min_valid_samples

    def detect(self, values: Sequence[Optional[float]]) -> List[int]:
        if not self.has_enough_data(values):
            return []
        peaks = find_peaks(values, self.config.prominence, self.config.window)
        if peaks:
            logging.debug(f"[PEAKS] candidates={peaks} samples={len(values)}")
        return peaks
