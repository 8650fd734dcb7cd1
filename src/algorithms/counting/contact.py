"""
Contact resolution: credit a trajectory peak to the nearest body part.

After a contact is counted every buffer is cleared, so later frames cannot
re-detect the same peak in overlapping history.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Dict, Optional, Tuple

from models.count_event import ContactEvent
from models.poi import BODY_POIS, POI
from tracking.buffer import TrajectoryBuffer


class ContactResolver:
    """
    Owns the per-body-part contact counters for one session.

    Counters only ever grow; they are not touched by buffer resets.
    """

    def __init__(self):
        self._counts: Dict[POI, int] = {poi: 0 for poi in BODY_POIS}

    @property
    def counts(self) -> Dict[POI, int]:
        """Copy of the cumulative counters."""
        return dict(self._counts)

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    def nearest(
        self, buffer: TrajectoryBuffer, peak_index: int
    ) -> Optional[Tuple[POI, float]]:
        """
        Body part closest to the ball at a buffer slot.

        Ties go to the body part declared first in POI. Body parts without a
        position at that slot are skipped.

        Returns:
            (poi, distance), or None if the ball or every body part is missing.
        """
        ball = buffer.prediction_at(POI.BALL, peak_index)
        if ball is None:
            return None

        best: Optional[POI] = None
        best_dist = math.inf
        for poi in BODY_POIS:
            pos = buffer.prediction_at(poi, peak_index)
            if pos is None:
                continue
            dist = ball.distance_to(pos)
            if dist < best_dist:
                best = poi
                best_dist = dist

        if best is None:
            return None
        return best, best_dist

    def resolve(
        self, buffer: TrajectoryBuffer, peak_index: int, frame_index: int = 0
    ) -> Optional[ContactEvent]:
        """
        Count the contact at a peak and reset the history.

        If no body part has a position at the peak, nothing is counted and
        the buffers are kept so a later frame can retry.
        """
        match = self.nearest(buffer, peak_index)
        if match is None:
            logging.debug(
                f"[CONTACT] unresolved peak at slot {peak_index} (frame {frame_index}): "
                f"no body part position"
            )
            return None

        poi, dist = match
        ball = buffer.prediction_at(POI.BALL, peak_index)
        body = buffer.prediction_at(poi, peak_index)

        self._counts[poi] += 1
        buffer.clear()

        return ContactEvent(
            poi=poi,
            frame_index=frame_index,
            peak_index=peak_index,
            ball_position=ball.position,
            poi_position=body.position,
            distance=dist,
            count=self._counts[poi],
            timestamp=time.time(),
        )
