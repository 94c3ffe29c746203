# vt/analysis/config.py

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping

from vt.utils.validate import ConfigFile

@dataclass(frozen=True)
class PipelineConfig:
    """
    Thresholds for the drift-filter / movement-state / trip pipeline.

    Every field must be supplied; use a preset such as :meth:`facility`
    or load a document with :meth:`from_file`.

    Attributes
    ----------
    max_speed_kmh
        Fastest plausible speed (km/h) between two kept fixes.
    max_acceleration
        Largest plausible change of speed (m/s²) between two kept legs.
    max_angle_change
        Largest plausible heading change (degrees) at speed.
    min_spacing_m
        Minimum distance (m) between consecutive simplified points.
    window_size
        Number of inter-sample distances averaged per classification.
    stationary_distance_m
        Window average (m) below which a sample reads as stationary.
    moving_distance_m
        Window average (m) above which a sample reads as moving.
    min_state_duration_s
        Dwell time (s) a state must hold before a change is accepted.
    trip_min_stationary_s
        Minimum parked run (s) that bounds a trip.
    trip_min_moving_s
        Minimum moving run (s) inside a trip.
    segment_min_stationary_s
        Minimum stationary run (s) reported as a dwell segment.
    """
    max_speed_kmh:            float
    max_acceleration:         float
    max_angle_change:         float
    min_spacing_m:            float
    window_size:              int
    stationary_distance_m:    float
    moving_distance_m:        float
    min_state_duration_s:     float
    trip_min_stationary_s:    float
    trip_min_moving_s:        float
    segment_min_stationary_s: float

    @classmethod
    def facility(cls) -> PipelineConfig:
        """Preset for slow electric carts inside a plant (30 s fixes)."""
        return cls(
            max_speed_kmh=40.0,
            max_acceleration=3.0,
            max_angle_change=120.0,
            min_spacing_m=5.0,
            window_size=3,
            stationary_distance_m=10.0,
            moving_distance_m=20.0,
            min_state_duration_s=90.0,
            trip_min_stationary_s=60.0,
            trip_min_moving_s=30.0,
            segment_min_stationary_s=60.0,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PipelineConfig:
        """
        Build a config from a sectioned document.

        Raises
        ------
        pydantic.ValidationError
            If a section or threshold is missing or not numeric.
        """
        doc = ConfigFile.model_validate(data)
        return cls(
            max_speed_kmh=doc.gpsFilter.maxSpeed,
            max_acceleration=doc.gpsFilter.maxAcceleration,
            max_angle_change=doc.gpsFilter.maxAngleChange,
            min_spacing_m=doc.trajectoryFilter.minDistance,
            window_size=doc.movementDetection.windowSize,
            stationary_distance_m=doc.movementDetection.stationaryDistanceThreshold,
            moving_distance_m=doc.movementDetection.movingDistanceThreshold,
            min_state_duration_s=doc.movementDetection.minStateDuration,
            trip_min_stationary_s=doc.tripDetection.minStationaryDuration,
            trip_min_moving_s=doc.tripDetection.minMovingDuration,
            segment_min_stationary_s=doc.stationaryLabel.minStationaryDuration,
        )

    @classmethod
    def from_file(cls, path: str | Path) -> PipelineConfig:
        """
        Load a JSON config document from disk.

        Raises
        ------
        ValueError
            If the file cannot be read or is not valid JSON.
        """
        p = Path(path)
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ValueError(f"cannot read config {p}: {exc}") from exc
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
