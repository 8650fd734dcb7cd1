"""
Measure stage for counting contacts.

This stage scans the ball's smoothed vertical trajectory for peaks and
hands the earliest one to the ContactResolver. Only one contact can be
counted per frame: resolving a peak clears the history the other peaks
lived in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from models.config import PeakConfig
from models.count_event import ContactEvent
from models.poi import POI
from algorithms.counting.contact import ContactResolver
from algorithms.counting.peaks import PeakDetector
from tracking.buffer import TrajectoryBuffer


@dataclass
class MeasureStageConfig:
    """
    Configuration for the measure stage.

    Attributes:
        peaks: Peak detection settings.
        axis: Ball coordinate scanned for peaks.
    """
    peaks: PeakConfig = field(default_factory=PeakConfig)
    axis: str = "y"


class MeasureStage:
    """
    Pipeline stage that turns ball trajectory peaks into ContactEvents.

    Example:
        stage = MeasureStage(MeasureStageConfig())

        # Each frame, after the buffer has been filled:
        events = stage.process(buffer, frame_idx)
    """

    def __init__(
        self,
        config: Optional[MeasureStageConfig] = None,
        on_event: Optional[Callable[[ContactEvent], None]] = None,
    ):
        """
        Initialize the measure stage.

        Args:
            config: Stage configuration.
            on_event: Optional callback for each contact event.
        """
        self._config = config or MeasureStageConfig()
        self._on_event = on_event
        self._detector = PeakDetector(self._config.peaks)
        self._resolver = ContactResolver()

    @property
    def detector(self) -> PeakDetector:
        return self._detector

    @property
    def resolver(self) -> ContactResolver:
        return self._resolver

    @property
    def counts(self) -> Dict[POI, int]:
        return self._resolver.counts

    def process(self, buffer: TrajectoryBuffer, frame_idx: int) -> List[ContactEvent]:
        """
        Detect and resolve at most one contact.

        Args:
            buffer: Aligned trajectory history, including this frame.
            frame_idx: Current frame index.

        Returns:
            A list with the contact counted this frame, or an empty list.
        """
        series = buffer.axis_series(POI.BALL, self._config.axis)
        peaks = self._detector.detect(series)
        if not peaks:
            return []

        event = self._resolver.resolve(buffer, peaks[0], frame_idx)
        if event is None:
            return []

        if self._on_event:
            try:
                self._on_event(event)
            except Exception as e:
                logging.warning(f"Event callback error: {e}")

        return [event]

    def reset(self) -> None:
        """Start a new session: counters back to zero."""
        self._resolver = ContactResolver()


def create_measure_stage(
    peaks_cfg: Optional[Dict] = None,
    on_event: Optional[Callable[[ContactEvent], None]] = None,
) -> MeasureStage:
    """
    Factory function to create a MeasureStage from config.

    Args:
        peaks_cfg: Peak detection configuration from YAML.
        on_event: Optional callback for each contact event.
    """
    config = MeasureStageConfig(peaks=PeakConfig.from_dict(peaks_cfg or {}))
    return MeasureStage(config, on_event=on_event)
