"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models.detection import NormalizedBox
from models.poi import ALL_POIS, POI


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
filter:
  process_variance: 0.01
  measurement_variance: 0.1

buffer:
  capacity: 100

peaks:
  prominence: 0.02
  window: 10
  min_valid_samples: 10

log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "filter": {
            "process_variance": 0.01,
            "measurement_variance": 0.1,
            "dt": 1.0,
        },
        "buffer": {"capacity": 100},
        "peaks": {
            "prominence": 0.02,
            "window": 10,
            "min_valid_samples": 10,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }


# Body parts spread out so that LEFT_FOOT is the only one near the ball's
# lowest point at (0.5, ~0.8).
STATIC_BODY = {
    POI.HEAD: NormalizedBox(0.5, 0.05),
    POI.LEFT_KNEE: NormalizedBox(0.05, 0.6),
    POI.RIGHT_KNEE: NormalizedBox(0.95, 0.6),
    POI.LEFT_FOOT: NormalizedBox(0.5, 0.9),
    POI.RIGHT_FOOT: NormalizedBox(0.95, 0.95),
}


def bounce_ys(top: float = 0.3, bottom: float = 0.85, steps: int = 11):
    """Ball y going down to `bottom` and back up, `2 * steps + 1` samples."""
    step = (bottom - top) / steps
    down = [top + i * step for i in range(steps + 1)]
    up = [bottom - i * step for i in range(1, steps + 1)]
    return down + up


def bounce_frames(ys, body=None):
    """Frame mappings with the ball at x=0.5 following `ys`."""
    body = STATIC_BODY if body is None else body
    frames = []
    for y in ys:
        frame = dict(body)
        frame[POI.BALL] = NormalizedBox(0.5, y, 0.03, 0.03)
        frames.append(frame)
    return frames


def fill_predictions(buffer, series):
    """
    Append one frame per index directly to a TrajectoryBuffer.

    `series` maps POI -> list of (x, y) or None; POIs left out are missing.
    """
    length = max(len(v) for v in series.values())
    for i in range(length):
        for poi in ALL_POIS:
            values = series.get(poi)
            point = values[i] if values is not None else None
            box = NormalizedBox(point[0], point[1]) if point is not None else None
            buffer.append_measurement(poi, box)
            buffer.append_prediction(poi, box)
