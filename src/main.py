"""
Contact counter: replay recorded POI detections and count ball contacts.

Detections come from an external pose extractor and ball detector, recorded
as JSON lines (see observation/replay.py). Each frame is smoothed, the ball's
lowest points are found, and each one is credited to the nearest body part.

Usage:
    python src/main.py --config config/config.yaml --input data/session.jsonl

Arguments:
    --config: Path to configuration file
    --input: Replay file (overrides the config's `input`)
    --events: Write counted contacts as JSON lines to this path
"""

import os
import sys
import argparse
import json
import logging
import yaml
from typing import Dict, Any, Tuple, Optional

from observation.replay import JsonlReplaySource, JsonlReplaySourceConfig
from ops.logging import setup_logging
from pipeline.engine import create_engine_from_config


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        base_path = os.path.join(os.path.dirname(config_path), "default.yaml")
        base_cfg: Dict[str, Any] = {}
        if os.path.exists(base_path):
            with open(base_path, "r") as f:
                base_cfg = yaml.safe_load(f) or {}

        local_overrides_path = os.path.join(os.path.dirname(config_path), "config.yaml")
        local_cfg: Dict[str, Any] = {}
        if os.path.exists(local_overrides_path):
            with open(local_overrides_path, "r") as f:
                local_cfg = yaml.safe_load(f) or {}

        merged = _deep_merge(base_cfg, local_cfg)

        if os.path.exists(config_path) and os.path.abspath(config_path) != os.path.abspath(local_overrides_path):
            with open(config_path, "r") as f:
                explicit_cfg = yaml.safe_load(f) or {}
            merged = _deep_merge(merged, explicit_cfg)

        return merged
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration structure and values.

    All sections are optional; defaults apply to anything left out.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    filter_cfg = config.get('filter', {}) or {}
    if not isinstance(filter_cfg, dict):
        return False, "filter must be a mapping"
    for key in ('process_variance', 'measurement_variance'):
        if key in filter_cfg:
            value = filter_cfg[key]
            if not _is_number(value) or value < 0:
                return False, f"filter.{key} must be a non-negative number"
    if 'measurement_variance' in filter_cfg and filter_cfg['measurement_variance'] == 0:
        return False, "filter.measurement_variance must be positive"
    if 'dt' in filter_cfg:
        if not _is_number(filter_cfg['dt']) or filter_cfg['dt'] <= 0:
            return False, "filter.dt must be a positive number"

    buffer_cfg = config.get('buffer', {}) or {}
    if not isinstance(buffer_cfg, dict):
        return False, "buffer must be a mapping"
    if 'capacity' in buffer_cfg:
        cap = buffer_cfg['capacity']
        if not isinstance(cap, int) or isinstance(cap, bool) or cap < 3:
            return False, "buffer.capacity must be an integer of at least 3"

    peaks_cfg = config.get('peaks', {}) or {}
    if not isinstance(peaks_cfg, dict):
        return False, "peaks must be a mapping"
    if 'prominence' in peaks_cfg:
        if not _is_number(peaks_cfg['prominence']) or peaks_cfg['prominence'] < 0:
            return False, "peaks.prominence must be a non-negative number"
    for key in ('window', 'min_valid_samples'):
        if key in peaks_cfg:
            value = peaks_cfg[key]
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                return False, f"peaks.{key} must be a positive integer"

    if 'input' in config and config['input'] is not None and not isinstance(config['input'], str):
        return False, "input must be a file path"

    if 'stats_log_interval' in config:
        if not _is_number(config['stats_log_interval']) or config['stats_log_interval'] <= 0:
            return False, "stats_log_interval must be a positive number"

    if config.get('log_path') is not None and not isinstance(config['log_path'], str):
        return False, "log_path must be a string"

    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config.get('log_level', 'INFO') not in valid_log_levels:
        return False, f"log_level must be one of: {', '.join(valid_log_levels)}"

    return True, None


def main(argv=None) -> int:
    """Main application function."""
    parser = argparse.ArgumentParser(description='Contact Counter - replay POI detections')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--input', type=str, default=None,
                        help='Replay file of per-frame detections (JSON lines)')
    parser.add_argument('--events', type=str, default=None,
                        help='Write counted contacts to this JSON lines file')
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.input:
        config['input'] = args.input

    is_valid, error_msg = validate_config(config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        return 1

    setup_logging(config.get('log_path'), config.get('log_level', 'INFO'))

    input_path = config.get('input')
    if not input_path:
        logging.error("No input given: use --input or set `input` in the config")
        return 1

    events_file = None
    if args.events:
        events_dir = os.path.dirname(args.events)
        if events_dir and not os.path.exists(events_dir):
            os.makedirs(events_dir)
        events_file = open(args.events, "w", encoding="utf-8")

    def write_event(event) -> None:
        if events_file is not None:
            events_file.write(json.dumps(event.to_dict()) + "\n")

    logging.info("Starting Contact Counter")

    engine = create_engine_from_config(config, on_event=write_event)
    source = JsonlReplaySource(JsonlReplaySourceConfig(source_id="replay", path=input_path))

    try:
        engine.run(source)
    except (RuntimeError, ValueError) as e:
        logging.error(f"Replay failed: {e}")
        return 1
    finally:
        if events_file is not None:
            events_file.close()

    print(yaml.safe_dump({"counts": engine.summary(), "frames": engine.stats.frame_count},
                         sort_keys=False), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
