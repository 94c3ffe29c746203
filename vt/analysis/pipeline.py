"""
Turn a raw sample window into a display-ready trajectory.

Stages:
- drift filter on the raw samples
- recent-trip selection (up to two stationary -> moving -> stationary cycles)
- simplification of the selected points
- dwell segments on the selected points, plus the current-dwell check
"""

from __future__ import annotations

from typing import Sequence

from vt.analysis.config import PipelineConfig
from vt.analysis.drift import filter_drift
from vt.analysis.movement import MovementStateAnalyzer, is_last_point_stationary
from vt.analysis.simplify import simplify_trajectory
from vt.analysis.trips import identify_recent_trips
from vt.analysis.types import Sample, Span, TrajectoryResult, Trip
from vt.utils.log import get_logger

logger = get_logger(__name__)


def subsequence_indices(samples: Sequence[Sample], kept: Sequence[Sample]) -> list[int]:
    """
    Position in ``samples`` of every element of ``kept``, an in-order
    subsequence of it (as produced by the drift filter).
    """
    indices: list[int] = []
    j = 0
    for sample in kept:
        while samples[j] is not sample:
            j += 1
        indices.append(j)
        j += 1
    return indices


def _remap_span(span: Span | None, source: list[int]) -> Span | None:
    if span is None:
        return None
    return Span(source[span.start], source[span.end])


def _remap_trip(trip: Trip, source: list[int]) -> Trip:
    return Trip(
        start=source[trip.start],
        end=source[trip.end],
        start_stationary=_remap_span(trip.start_stationary, source),
        moving=_remap_span(trip.moving, source),
        end_stationary=_remap_span(trip.end_stationary, source),
    )


class TrajectoryPipeline:
    """
    Stateless pipeline; one instance may serve any number of tracks.
    """
    def __init__(self, cfg: PipelineConfig) -> None:
        self.cfg = cfg
        self.analyzer = MovementStateAnalyzer(cfg)

    def run(self, samples: Sequence[Sample]) -> TrajectoryResult:
        logger.info(f"Starting trajectory analysis on {len(samples)} samples")
        drift_free = filter_drift(samples, self.cfg)
        logger.info(f"Drift filter kept {len(drift_free)} of {len(samples)} samples")

        selection = identify_recent_trips(drift_free, self.cfg)
        logger.info(
            f"Selected {len(selection.points)} samples from {len(selection.trips)} trips"
            + (" (recent-window fallback)" if selection.fallback else "")
        )

        trajectory = simplify_trajectory(selection.points, self.cfg)
        logger.info(f"Simplified to {len(trajectory)} points")

        segments = self.analyzer.segments(selection.points)
        stationary_now = is_last_point_stationary(selection.points, self.cfg)
        current_dwell = segments[-1] if segments and stationary_now else None

        # trips are reported against the caller's samples, not the filtered copy
        source = subsequence_indices(samples, drift_free)
        trips = [_remap_trip(trip, source) for trip in selection.trips]

        logger.info("Trajectory analysis complete")
        return TrajectoryResult(
            trajectory=trajectory,
            trip_points=selection.points,
            segments=segments,
            trips=trips,
            fallback=selection.fallback,
            stationary_now=stationary_now,
            current_dwell=current_dwell,
        )
