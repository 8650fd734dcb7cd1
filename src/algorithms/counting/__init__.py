"""
Counting algorithms for contact detection.

The tracking layer remains independent: these algorithms read smoothed
trajectories and only clear history once a contact has been counted.

Available pieces:
- find_peaks / PeakDetector: lowest-point instants of the ball trajectory
- ContactResolver: attributes a peak to the nearest body part
"""

from .peaks import find_peaks, PeakDetector
from .contact import ContactResolver

__all__ = [
    "find_peaks",
    "PeakDetector",
    "ContactResolver",
]
