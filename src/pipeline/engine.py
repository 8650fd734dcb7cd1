"""
Pipeline engine for the contact counter.

This module runs one tracking session: every frame of detections goes
through the trajectory buffer, the filter bank and the measure stage before
the next frame is accepted.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from models.config import Config
from models.count_event import ContactEvent
from models.detection import NormalizedBox
from models.frame import FrameDetections
from models.poi import ALL_POIS, BODY_POIS, POI
from observation.base import DetectionSource
from pipeline.stages.measure import MeasureStage, MeasureStageConfig
from tracking.buffer import BufferAlignmentError, TrajectoryBuffer
from tracking.filter_bank import FilterBank, FilterFactory


@dataclass
class PipelineConfig:
    """
    Configuration for the pipeline engine.

    Attributes:
        stats_log_interval: Seconds between status log messages.
    """
    stats_log_interval: float = 60.0


@dataclass
class PipelineStats:
    """Runtime statistics for the pipeline."""
    frame_count: int = 0
    contact_count: int = 0
    count_by_poi: Dict[str, int] = field(default_factory=dict)
    start_time: float = field(default_factory=time.time)
    last_stats_log_time: float = field(default_factory=time.time)


class PipelineEngine:
    """
    Frame-synchronous tracking and counting session.

    Each process_frame() call:
    - Appends this frame's detection (or a missing placeholder) for every POI
    - Steps every POI's filters and appends the smoothed positions
    - Verifies the buffers are still frame-aligned
    - Runs the MeasureStage on the ball trajectory

    Example:
        engine = PipelineEngine(Config())
        for frame in frames:
            events = engine.process_frame(frame)
        print(engine.counts)
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        pipeline_config: Optional[PipelineConfig] = None,
        on_event: Optional[Callable[[ContactEvent], None]] = None,
        filter_factory: Optional[FilterFactory] = None,
    ):
        self.config = config or Config()
        self.pipeline_config = pipeline_config or PipelineConfig(
            stats_log_interval=self.config.stats_log_interval
        )
        self._on_event = on_event
        self._filter_factory = filter_factory
        self._callbacks: List[Callable[[FrameDetections, List[ContactEvent]], None]] = []
        self._running = False
        self._init_session()

    def _init_session(self) -> None:
        self.buffer = TrajectoryBuffer(capacity=self.config.buffer.capacity)
        self.filter_bank = FilterBank(self.config.filter, factory=self._filter_factory)
        self.measure_stage = MeasureStage(
            MeasureStageConfig(peaks=self.config.peaks),
            on_event=self._on_event,
        )
        self.stats = PipelineStats()

    def reset_session(self) -> None:
        """Discard all session state: history, filters and counters."""
        self._init_session()
        logging.info("Tracking session reset")

    @property
    def counts(self) -> Dict[POI, int]:
        """Cumulative contacts per body part."""
        return self.measure_stage.counts

    def current_positions(self) -> Dict[POI, Optional[NormalizedBox]]:
        """Latest smoothed position per POI (None if not yet available)."""
        return {poi: self.buffer.latest_prediction(poi) for poi in ALL_POIS}

    def add_callback(self, callback: Callable[[FrameDetections, List[ContactEvent]], None]) -> None:
        """
        Add a callback to be called after each frame is processed.

        Args:
            callback: Function taking (frame, events) as arguments.
        """
        self._callbacks.append(callback)

    def process_frame(self, frame: FrameDetections) -> List[ContactEvent]:
        """
        Run one full pass for a frame.

        Returns:
            Contact events counted in this frame.

        Raises:
            BufferAlignmentError: If the history lost frame alignment.
        """
        self.stats.frame_count += 1

        for poi in ALL_POIS:
            self.buffer.append_measurement(poi, frame.get(poi))

        for poi in ALL_POIS:
            prediction = self.filter_bank.step(poi, frame.get(poi))
            self.buffer.append_prediction(poi, prediction)

        self.buffer.check_alignment()

        events = self.measure_stage.process(self.buffer, frame.frame_index)

        for event in events:
            self.stats.contact_count += 1
            label = event.poi.label
            self.stats.count_by_poi[label] = self.stats.count_by_poi.get(label, 0) + 1
            logging.info(
                f"Contact on {label} at frame {event.frame_index}: "
                f"count={event.count}, total={self.stats.contact_count}"
            )

        return events

    def run(self, source: DetectionSource) -> None:
        """
        Process frames from a source until it is exhausted or stop() is called.

        Opens the source, processes frames, then closes it.
        """
        self._running = True

        try:
            source.open()
            logging.info(f"Pipeline started: source={source.source_id}")

            while self._running:
                frame = source.read()
                if frame is None:
                    logging.info("Source exhausted")
                    break

                events = self.process_frame(frame)

                for callback in self._callbacks:
                    try:
                        callback(frame, events)
                    except Exception as e:
                        logging.warning(f"Callback error: {e}")

                self._handle_periodic_tasks()

        except KeyboardInterrupt:
            logging.info("Pipeline interrupted by user")
        except BufferAlignmentError as e:
            logging.critical(f"Trajectory buffers out of alignment: {e}")
            raise
        finally:
            self._cleanup(source)

    def stop(self) -> None:
        """Signal the pipeline to stop after the current frame."""
        self._running = False

    def summary(self) -> Dict[str, int]:
        """Counts keyed by POI label, in declaration order."""
        counts = self.counts
        return {poi.label: counts[poi] for poi in BODY_POIS}

    def _handle_periodic_tasks(self) -> None:
        now = time.time()
        if now - self.stats.last_stats_log_time >= self.pipeline_config.stats_log_interval:
            logging.info(
                f"Pipeline stats: frames={self.stats.frame_count}, "
                f"contacts={self.stats.contact_count}, "
                f"by_poi={self.stats.count_by_poi}"
            )
            self.stats.last_stats_log_time = now

    def _cleanup(self, source: DetectionSource) -> None:
        self._running = False

        try:
            source.close()
        except Exception as e:
            logging.warning(f"Error closing source: {e}")

        elapsed = time.time() - self.stats.start_time
        logging.info(
            f"Pipeline stopped: frames={self.stats.frame_count}, "
            f"contacts={self.stats.contact_count}, elapsed={elapsed:.1f}s"
        )


def create_engine_from_config(
    config: Dict,
    on_event: Optional[Callable[[ContactEvent], None]] = None,
) -> PipelineEngine:
    """
    Factory function to create a PipelineEngine from a raw config dict.

    Args:
        config: Full application config dict (e.g. from load_config).
        on_event: Optional callback for each contact event.
    """
    return PipelineEngine(Config.from_dict(config), on_event=on_event)
