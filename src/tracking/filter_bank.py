"""
Filter bank: one Kalman filter per (POI, axis).

All filters are built up front from a factory, so the per-frame path never
creates state. Each frame every POI is stepped exactly once, which keeps the
prediction history aligned with the measurement history.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from models.config import FilterConfig
from models.detection import NormalizedBox
from models.poi import ALL_POIS, POI
from .kalman import Kalman1D


FilterFactory = Callable[[], Kalman1D]


@dataclass
class AxisFilters:
    """The x and y filters of a single POI."""
    x: Kalman1D
    y: Kalman1D

    @property
    def initialized(self) -> bool:
        return self.x.initialized and self.y.initialized


def default_filter_factory(config: FilterConfig) -> FilterFactory:
    """Factory producing filters with the configured noise levels."""
    def factory() -> Kalman1D:
        return Kalman1D(
            process_variance=config.process_variance,
            measurement_variance=config.measurement_variance,
            dt=config.dt,
        )
    return factory


class FilterBank:
    """
    Turns raw, possibly missing detections into smoothed positions.

    Sequencing per POI and frame: update with the measurement if present,
    then predict. Frames without a measurement still predict, so the output
    dead-reckons through gaps.
    """

    def __init__(
        self,
        config: Optional[FilterConfig] = None,
        factory: Optional[FilterFactory] = None,
    ):
        self.config = config or FilterConfig()
        self._factory = factory or default_filter_factory(self.config)
        self._filters: Dict[POI, AxisFilters] = {}
        self.reset()

    def reset(self) -> None:
        """Recreate every filter (full session reset)."""
        self._filters = {
            poi: AxisFilters(x=self._factory(), y=self._factory())
            for poi in ALL_POIS
        }
        logging.debug(f"Filter bank initialized for {len(self._filters)} POIs")

    def filters(self, poi: POI) -> AxisFilters:
        return self._filters[poi]

    def step(self, poi: POI, detection: Optional[NormalizedBox]) -> Optional[NormalizedBox]:
        """
        Advance a POI's filters by one frame.

        Args:
            poi: POI to advance.
            detection: This frame's detection, or None if absent.

        Returns:
            Smoothed (x, y) with w/h passed through from the detection
            (0 when absent), or None if the POI has never been measured.
        """
        axes = self._filters[poi]

        if detection is not None:
            axes.x.update(detection.x)
            axes.y.update(detection.y)

        predicted_x = axes.x.predict()
        predicted_y = axes.y.predict()

        if not axes.initialized:
            return None

        w = detection.w if detection is not None else 0.0
        h = detection.h if detection is not None else 0.0
        return NormalizedBox(x=predicted_x, y=predicted_y, w=w, h=h)
