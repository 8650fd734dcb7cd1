"""
Tracking layer: bounded trajectory history and per-POI Kalman smoothing.

Counting is NOT done here. See `algorithms.counting` for peak detection and
contact resolution.
"""

from .buffer import TrajectoryBuffer, BufferAlignmentError
from .kalman import Kalman1D
from .filter_bank import FilterBank, AxisFilters, default_filter_factory

__all__ = [
    "TrajectoryBuffer",
    "BufferAlignmentError",
    "Kalman1D",
    "FilterBank",
    "AxisFilters",
    "default_filter_factory",
]
