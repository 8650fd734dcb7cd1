"""
Tests for contact resolution and the measure stage.
"""

import pytest

from algorithms.counting.contact import ContactResolver
from models.poi import BODY_POIS, POI
from pipeline.stages.measure import MeasureStage, MeasureStageConfig, create_measure_stage
from models.config import PeakConfig
from tracking.buffer import TrajectoryBuffer

from conftest import fill_predictions


# Ball y rises then falls, peaking at frame 6
BALL_YS = [0.50, 0.52, 0.54, 0.56, 0.58, 0.60, 0.70, 0.60, 0.58, 0.56, 0.54, 0.52]


def _scenario(left_foot_missing_at_peak=False, all_body_missing=False):
    """12-frame series: LEFT_FOOT sits exactly on the ball at the peak."""
    ball = [(0.5, y) for y in BALL_YS]
    if all_body_missing:
        return {POI.BALL: ball}

    left_foot = [(0.5, 0.9)] * 12
    left_foot[6] = None if left_foot_missing_at_peak else ball[6]
    return {
        POI.BALL: ball,
        POI.HEAD: [(0.5, 0.05)] * 12,
        POI.LEFT_KNEE: [(0.3, 0.6)] * 12,
        POI.RIGHT_KNEE: [(0.7, 0.6)] * 12,
        POI.LEFT_FOOT: left_foot,
        POI.RIGHT_FOOT: [(0.7, 0.9)] * 12,
    }


def _single_frames(series):
    """Split a series into per-frame series of length 1."""
    length = len(series[POI.BALL])
    return [{poi: [values[i]] for poi, values in series.items()} for i in range(length)]


class TestContactResolver:
    def test_counts_start_at_zero(self):
        resolver = ContactResolver()

        assert resolver.counts == {poi: 0 for poi in BODY_POIS}
        assert POI.BALL not in resolver.counts
        assert resolver.total == 0

    def test_nearest_body_part_counted(self):
        buffer = TrajectoryBuffer()
        fill_predictions(buffer, _scenario())
        resolver = ContactResolver()

        event = resolver.resolve(buffer, peak_index=6, frame_index=11)

        assert event is not None
        assert event.poi is POI.LEFT_FOOT
        assert event.distance == pytest.approx(0.0)
        assert event.count == 1
        assert event.peak_index == 6
        assert event.frame_index == 11
        assert event.ball_position == (0.5, 0.70)
        assert resolver.counts[POI.LEFT_FOOT] == 1
        assert resolver.total == 1

    def test_buffers_cleared_after_contact(self):
        buffer = TrajectoryBuffer()
        fill_predictions(buffer, _scenario())

        ContactResolver().resolve(buffer, peak_index=6)

        assert len(buffer) == 0

    def test_missing_body_part_skipped(self):
        """LEFT_FOOT missing at the peak: the next closest part wins."""
        buffer = TrajectoryBuffer()
        fill_predictions(buffer, _scenario(left_foot_missing_at_peak=True))

        event = ContactResolver().resolve(buffer, peak_index=6)

        # (0.5, 0.7): knees at distance ~0.224, feet at ~0.283
        assert event.poi is POI.LEFT_KNEE

    def test_unresolved_when_all_missing(self):
        """No body part at the peak: no count, history kept."""
        buffer = TrajectoryBuffer()
        fill_predictions(buffer, _scenario(all_body_missing=True))
        resolver = ContactResolver()

        event = resolver.resolve(buffer, peak_index=6)

        assert event is None
        assert resolver.total == 0
        assert len(buffer) == 12

    def test_unresolved_when_ball_missing(self):
        buffer = TrajectoryBuffer()
        series = _scenario()
        series[POI.BALL] = list(series[POI.BALL])
        series[POI.BALL][6] = None
        fill_predictions(buffer, series)

        assert ContactResolver().resolve(buffer, peak_index=6) is None
        assert len(buffer) == 12

    def test_tie_goes_to_first_declared(self):
        """Equal distances: declaration order decides."""
        buffer = TrajectoryBuffer()
        fill_predictions(buffer, {
            POI.BALL: [(0.5, 0.5)],
            POI.LEFT_KNEE: [(0.25, 0.5)],
            POI.RIGHT_KNEE: [(0.75, 0.5)],
        })

        event = ContactResolver().resolve(buffer, peak_index=0)

        assert event.poi is POI.LEFT_KNEE

    def test_nearest_does_not_mutate(self):
        buffer = TrajectoryBuffer()
        fill_predictions(buffer, _scenario())
        resolver = ContactResolver()

        poi, dist = resolver.nearest(buffer, 6)

        assert poi is POI.LEFT_FOOT
        assert dist == pytest.approx(0.0)
        assert len(buffer) == 12
        assert resolver.total == 0


class TestMeasureStage:
    def test_scenario_counts_left_foot_once(self):
        buffer = TrajectoryBuffer()
        fill_predictions(buffer, _scenario())
        stage = MeasureStage()

        events = stage.process(buffer, frame_idx=11)

        assert [e.poi for e in events] == [POI.LEFT_FOOT]
        assert stage.counts[POI.LEFT_FOOT] == 1
        assert sum(stage.counts.values()) == 1
        assert len(buffer) == 0

    def test_frame_by_frame_scenario_twice(self):
        """Two consecutive runs of the scenario count exactly twice."""
        buffer = TrajectoryBuffer()
        stage = MeasureStage()
        all_events = []

        for _ in range(2):
            for frame in _single_frames(_scenario()):
                fill_predictions(buffer, frame)
                all_events.extend(stage.process(buffer, frame_idx=0))

        assert len(all_events) == 2
        assert stage.counts[POI.LEFT_FOOT] == 2
        assert sum(stage.counts.values()) == 2

    def test_defers_with_short_history(self):
        """The peak is only resolved once 10 valid samples exist."""
        buffer = TrajectoryBuffer()
        stage = MeasureStage()
        frames = _single_frames(_scenario())

        for frame in frames[:9]:
            fill_predictions(buffer, frame)
            assert stage.process(buffer, frame_idx=0) == []

        fill_predictions(buffer, frames[9])
        events = stage.process(buffer, frame_idx=9)

        assert len(events) == 1
        assert events[0].peak_index == 6

    def test_all_missing_leaves_state(self):
        buffer = TrajectoryBuffer()
        fill_predictions(buffer, _scenario(all_body_missing=True))
        stage = MeasureStage()

        assert stage.process(buffer, frame_idx=11) == []
        assert sum(stage.counts.values()) == 0
        assert len(buffer) == 12

    def test_on_event_callback(self):
        received = []
        stage = MeasureStage(on_event=received.append)
        buffer = TrajectoryBuffer()
        fill_predictions(buffer, _scenario())

        stage.process(buffer, frame_idx=11)

        assert len(received) == 1
        assert received[0].poi is POI.LEFT_FOOT

    def test_callback_error_does_not_propagate(self):
        def broken(event):
            raise RuntimeError("boom")

        stage = MeasureStage(on_event=broken)
        buffer = TrajectoryBuffer()
        fill_predictions(buffer, _scenario())

        events = stage.process(buffer, frame_idx=11)

        assert len(events) == 1
        assert stage.counts[POI.LEFT_FOOT] == 1

    def test_reset_zeroes_counts(self):
        stage = MeasureStage()
        buffer = TrajectoryBuffer()
        fill_predictions(buffer, _scenario())
        stage.process(buffer, frame_idx=11)

        stage.reset()

        assert sum(stage.counts.values()) == 0

    def test_factory(self):
        stage = create_measure_stage({"prominence": 0.5})

        assert stage.detector.config.prominence == 0.5
        assert stage.detector.config.window == 10

    def test_high_prominence_ignores_scenario(self):
        stage = MeasureStage(MeasureStageConfig(peaks=PeakConfig(prominence=0.5)))
        buffer = TrajectoryBuffer()
        fill_predictions(buffer, _scenario())

        assert stage.process(buffer, frame_idx=11) == []
        assert len(buffer) == 12
