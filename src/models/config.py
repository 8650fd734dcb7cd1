"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class FilterConfig:
    """Constant-acceleration Kalman filter noise settings."""
    process_variance: float = 0.01
    measurement_variance: float = 0.1
    dt: float = 1.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FilterConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            process_variance=float(d.get("process_variance", 0.01)),
            measurement_variance=float(d.get("measurement_variance", 0.1)),
            dt=float(d.get("dt", 1.0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "process_variance": self.process_variance,
            "measurement_variance": self.measurement_variance,
            "dt": self.dt,
        }


@dataclass
class BufferConfig:
    """Trajectory history settings."""
    capacity: int = 100

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BufferConfig":
        return cls(capacity=int(d.get("capacity", 100)))

    def to_dict(self) -> Dict[str, Any]:
        return {"capacity": self.capacity}


@dataclass
class PeakConfig:
    """
    Peak detection settings.

    Attributes:
        prominence: Minimum height of a peak above the higher neighbouring minimum.
        window: Samples searched on each side for the neighbouring minima.
        min_valid_samples: Non-missing samples required before detection runs.
    """
    prominence: float = 0.02
    window: int = 10
    min_valid_samples: int = 10

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PeakConfig":
        return cls(
            prominence=float(d.get("prominence", 0.02)),
            window=int(d.get("window", 10)),
            min_valid_samples=int(d.get("min_valid_samples", 10)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prominence": self.prominence,
            "window": self.window,
            "min_valid_samples": self.min_valid_samples,
        }


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    filter: FilterConfig = field(default_factory=FilterConfig)
    buffer: BufferConfig = field(default_factory=BufferConfig)
    peaks: PeakConfig = field(default_factory=PeakConfig)
    input: Optional[str] = None
    stats_log_interval: float = 60.0
    log_path: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            filter=FilterConfig.from_dict(d.get("filter", {}) or {}),
            buffer=BufferConfig.from_dict(d.get("buffer", {}) or {}),
            peaks=PeakConfig.from_dict(d.get("peaks", {}) or {}),
            input=d.get("input"),
            stats_log_interval=float(d.get("stats_log_interval", 60.0)),
            log_path=d.get("log_path"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or logging)."""
        d: Dict[str, Any] = {
            "filter": self.filter.to_dict(),
            "buffer": self.buffer.to_dict(),
            "peaks": self.peaks.to_dict(),
            "stats_log_interval": self.stats_log_interval,
            "log_level": self.log_level,
        }
        if self.input is not None:
            d["input"] = self.input
        if self.log_path is not None:
            d["log_path"] = self.log_path
        return d
