"""
Pydantic schemas to validate config documents, raw readings and API payloads.
"""

from typing import Optional, Union
from pydantic import BaseModel, Field


class GpsFilterSection(BaseModel):
    """
    Drift-filter limits.
    """
    maxSpeed: float
    maxAcceleration: float
    maxAngleChange: float

class TrajectoryFilterSection(BaseModel):
    """
    Simplification spacing.
    """
    minDistance: float

class MovementDetectionSection(BaseModel):
    """
    Sliding-window classifier settings.
    """
    windowSize: int = Field(gt=0)
    stationaryDistanceThreshold: float
    movingDistanceThreshold: float
    minStateDuration: float

class TripDetectionSection(BaseModel):
    minStationaryDuration: float
    minMovingDuration: float

class StationaryLabelSection(BaseModel):
    minStationaryDuration: float

class ConfigFile(BaseModel):
    """
    Full pipeline config document, one section per stage.
    """
    gpsFilter: GpsFilterSection
    trajectoryFilter: TrajectoryFilterSection
    movementDetection: MovementDetectionSection
    tripDetection: TripDetectionSection
    stationaryLabel: StationaryLabelSection


class RawReading(BaseModel):
    """
    One coordinate component as delivered by the telemetry feed.

    ``PN`` names the component ("lat" or "lon"); both components of a fix
    share the same ``time``.
    """
    time: Union[float, str]
    PN: str
    value: float

class SampleIn(BaseModel):
    """
    Already-paired position sample.
    """
    lat: float
    lon: float
    ts: float

class TrajectoryRequest(BaseModel):
    samples: list[SampleIn]

class SpanOut(BaseModel):
    start: int
    end: int

class TripOut(BaseModel):
    """
    One stationary -> moving -> stationary cycle, as index spans.
    """
    start: int
    end: int
    start_stationary: Optional[SpanOut]
    moving: SpanOut
    end_stationary: SpanOut

class SegmentOut(BaseModel):
    """
    One dwell segment with its duration in seconds.
    """
    start_index: int
    end_index: int
    duration: float
    anchor_lat: float
    anchor_lon: float

class TrajectoryOut(BaseModel):
    """
    Pipeline output returned by the API and written by ``vt analyze --out``.

    Trip spans index the submitted samples in time order; segment indices
    index ``trip_points``.
    """
    trajectory: list[SampleIn]
    trip_points: list[SampleIn]
    segments: list[SegmentOut]
    trips: list[TripOut]
    fallback: bool
    stationary_now: bool
    current_dwell: Optional[SegmentOut] = None
