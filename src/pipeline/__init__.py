"""
Pipeline module for the contact counter.

The pipeline orchestrates the full per-frame flow:
- Detection input from observation sources
- Trajectory buffering and Kalman smoothing
- Peak detection and contact counting (via MeasureStage)
"""

from .engine import PipelineEngine, PipelineConfig, PipelineStats, create_engine_from_config
from .stages.measure import MeasureStage, MeasureStageConfig, create_measure_stage

__all__ = [
    "PipelineEngine",
    "PipelineConfig",
    "PipelineStats",
    "create_engine_from_config",
    "MeasureStage",
    "MeasureStageConfig",
    "create_measure_stage",
]
