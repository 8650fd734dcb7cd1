"""
Pipeline stages for the contact counter.

Each stage handles a specific part of the processing pipeline:
- measure: peak detection and contact counting
"""

from .measure import MeasureStage, MeasureStageConfig

__all__ = ["MeasureStage", "MeasureStageConfig"]
