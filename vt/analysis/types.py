# vt/analysis/types.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional

@dataclass(frozen=True)
class Sample:
    """
    Single raw position sample of a tracked asset.

    Parameters
    ----------
    lat : float
        Latitude in decimal degrees.
    lon : float
        Longitude in decimal degrees.
    ts : float
        Timestamp of the fix (seconds since epoch).
    """
    lat: float
    lon: float
    ts: float

    @property
    def coords(self) -> tuple[float, float]:
        return (self.lat, self.lon)


class MovementState(str, Enum):
    """
    Per-sample movement classification.
    """
    STATIONARY = "stationary"
    MOVING = "moving"


class Span(NamedTuple):
    """
    Inclusive index range into a sample sequence.
    """
    start: int
    end: int


@dataclass(frozen=True)
class StationarySegment:
    """
    Maximal run of stationary samples that lasted long enough to report.

    Parameters
    ----------
    start_index : int
        Index of the first sample of the run.
    end_index : int
        Index of the last sample of the run (inclusive).
    duration : float
        Seconds between the first and last sample of the run.
    anchor_lat : float
        Latitude of the first sample of the run.
    anchor_lon : float
        Longitude of the first sample of the run.
    """
    start_index: int
    end_index: int
    duration: float
    anchor_lat: float
    anchor_lon: float


@dataclass(frozen=True)
class Trip:
    """
    One stationary -> moving -> stationary cycle located in a sample sequence.

    Parameters
    ----------
    start : int
        First index covered by the trip.
    end : int
        Last index covered by the trip (inclusive).
    start_stationary : Span | None
        Leading stationary run; None when the trip start fell back to a
        fixed look-back before the moving run.
    moving : Span
        The qualifying moving run.
    end_stationary : Span
        The terminal stationary run.
    """
    start: int
    end: int
    start_stationary: Optional[Span]
    moving: Span
    end_stationary: Span


@dataclass
class TripSelection:
    """
    Result of the recent-trip search.

    Parameters
    ----------
    trips : List[Trip]
        Trips found, most recent first.
    indices : List[int]
        Deduplicated indices into the searched sequence, in time order.
    points : List[Sample]
        The samples at ``indices``.
    fallback : bool
        True when no trip was found and ``points`` is the recent window.
    """
    trips: List[Trip] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)
    points: List[Sample] = field(default_factory=list)
    fallback: bool = False


@dataclass
class TrajectoryResult:
    """
    Everything a display consumer needs from one pipeline run.

    ``trips`` index the samples handed to the pipeline; ``segments`` index
    ``trip_points``.
    """
    trajectory: List[Sample]
    trip_points: List[Sample]
    segments: List[StationarySegment]
    trips: List[Trip]
    fallback: bool
    stationary_now: bool
    current_dwell: Optional[StationarySegment] = None
