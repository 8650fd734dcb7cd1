"""
Tests for the replay CLI.
"""

import json

import yaml

from main import main
from models.poi import POI

from conftest import STATIC_BODY, bounce_ys


def _write_session(path, ys):
    with open(path, "w") as f:
        for i, y in enumerate(ys):
            detections = {poi.label: list(box.as_tuple()) for poi, box in STATIC_BODY.items()}
            detections[POI.BALL.label] = [0.5, y, 0.03, 0.03]
            f.write(json.dumps({"frame_index": i, "timestamp": i / 30.0, "detections": detections}) + "\n")


class TestMain:
    def test_replay_prints_counts(self, temp_config_dir, tmp_path, capsys):
        session = tmp_path / "session.jsonl"
        events_path = tmp_path / "out" / "events.jsonl"
        _write_session(session, bounce_ys())
        (temp_config_dir / "config.yaml").write_text(f"log_path: \"{tmp_path / 'logs' / 'run.log'}\"\n")

        code = main([
            "--config", str(temp_config_dir / "config.yaml"),
            "--input", str(session),
            "--events", str(events_path),
        ])

        assert code == 0
        summary = yaml.safe_load(capsys.readouterr().out)
        assert summary["counts"]["Left_Foot"] == 1
        assert summary["frames"] == len(bounce_ys())

        lines = events_path.read_text().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["poi"] == "Left_Foot"

    def test_missing_input(self, temp_config_dir):
        code = main(["--config", str(temp_config_dir / "config.yaml")])

        assert code == 1

    def test_invalid_config(self, temp_config_dir, tmp_path):
        (temp_config_dir / "config.yaml").write_text("peaks:\n  window: 0\n")

        code = main([
            "--config", str(temp_config_dir / "config.yaml"),
            "--input", str(tmp_path / "session.jsonl"),
        ])

        assert code == 1

    def test_malformed_input_line(self, temp_config_dir, tmp_path):
        session = tmp_path / "session.jsonl"
        session.write_text('{"detections": {"Ball": [0.5, null, 0, 0]}}\n')
        (temp_config_dir / "config.yaml").write_text(f"log_path: \"{tmp_path / 'run.log'}\"\n")

        code = main([
            "--config", str(temp_config_dir / "config.yaml"),
            "--input", str(session),
        ])

        assert code == 1

    def test_unreadable_input(self, temp_config_dir, tmp_path):
        (temp_config_dir / "config.yaml").write_text(f"log_path: \"{tmp_path / 'run.log'}\"\n")

        code = main([
            "--config", str(temp_config_dir / "config.yaml"),
            "--input", str(tmp_path / "does_not_exist.jsonl"),
        ])

        assert code == 1
