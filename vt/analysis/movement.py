"""
Classify samples as stationary or moving with a sliding window and hysteresis.

One analyzer serves both consumers:

- ``label``    per-sample MovementState sequence, used by the trip search
- ``segments`` dwell segments long enough to report, used for duration labels

Boundary rule: sample ``i`` is judged by the distances of the legs leaving
it, ``d[i - w//2] .. d[i + w//2]`` clamped to the existing legs, where
``d[i]`` is the leg from sample ``i`` to ``i + 1``. The last sample has no
outgoing leg and inherits the running state. The very first sample seeds
the running state from its own window; a reading inside the hysteresis band
seeds MOVING.
"""

from __future__ import annotations

from typing import Sequence

from vt.analysis.config import PipelineConfig
from vt.analysis.types import MovementState, Sample, StationarySegment
from vt.utils.geo import haversine
from vt.utils.log import get_logger

logger = get_logger(__name__)

MIN_SAMPLES = 3


def leg_distances(samples: Sequence[Sample]) -> list[float]:
    """
    Distances (m) between consecutive samples; ``len(samples) - 1`` values.
    """
    return [haversine(a.coords, b.coords) for a, b in zip(samples, samples[1:])]


def window_average(distances: Sequence[float], center: int, window_size: int) -> float:
    """
    Mean of ``distances`` over a symmetric window around ``center``, clamped
    to the sequence bounds.
    """
    if not distances:
        return 0.0
    half = window_size // 2
    lo = max(0, center - half)
    hi = min(len(distances) - 1, center + half)
    if hi < lo:
        return 0.0
    return sum(distances[lo:hi + 1]) / (hi - lo + 1)


class MovementStateAnalyzer:
    """
    Sliding-window movement classifier with a minimum-dwell hysteresis rule.
    """
    def __init__(self, cfg: PipelineConfig) -> None:
        self.cfg = cfg

    def _classify(self, avg: float, current: MovementState | None) -> MovementState:
        if avg < self.cfg.stationary_distance_m:
            return MovementState.STATIONARY
        if avg > self.cfg.moving_distance_m:
            return MovementState.MOVING
        # in the band between both thresholds nothing changes
        return current or MovementState.MOVING

    def label(self, samples: Sequence[Sample]) -> list[MovementState]:
        """
        Label every sample with a smoothed MovementState.

        Parameters
        ----------
        samples
            Samples sorted by timestamp.

        Returns
        -------
        list[MovementState]
            One state per sample, or an empty list for fewer than three samples.
        """
        if len(samples) < MIN_SAMPLES:
            return []

        distances = leg_distances(samples)
        states: list[MovementState] = []
        current: MovementState | None = None
        state_start_ts = samples[0].ts

        for i in range(len(distances)):
            avg = window_average(distances, i, self.cfg.window_size)
            observed = self._classify(avg, current)
            if current is None:
                current = observed
                state_start_ts = samples[i].ts
            elif observed is not current:
                # short-lived changes are absorbed into the running state
                if samples[i].ts - state_start_ts >= self.cfg.min_state_duration_s:
                    current = observed
                    state_start_ts = samples[i].ts
            states.append(current)

        states.append(current)
        return states

    def segments(self, samples: Sequence[Sample]) -> list[StationarySegment]:
        """
        Collapse stationary labels into dwell segments.

        Runs shorter than ``cfg.segment_min_stationary_s`` are dropped.
        """
        states = self.label(samples)
        segments: list[StationarySegment] = []
        run_start: int | None = None

        for i, state in enumerate(states):
            if state is MovementState.STATIONARY:
                if run_start is None:
                    run_start = i
                continue
            if run_start is not None:
                self._close_segment(samples, run_start, i - 1, segments)
                run_start = None
        if run_start is not None:
            self._close_segment(samples, run_start, len(states) - 1, segments)

        logger.info(f"Found {len(segments)} stationary segments")
        return segments

    def _close_segment(
        self,
        samples: Sequence[Sample],
        start: int,
        end: int,
        segments: list[StationarySegment],
    ) -> None:
        duration = samples[end].ts - samples[start].ts
        if duration < self.cfg.segment_min_stationary_s:
            return
        segments.append(
            StationarySegment(
                start_index=start,
                end_index=end,
                duration=duration,
                anchor_lat=samples[start].lat,
                anchor_lon=samples[start].lon,
            )
        )


def is_last_point_stationary(samples: Sequence[Sample], cfg: PipelineConfig) -> bool:
    """
    Whether the asset reads as parked at its most recent fix.

    Averages the legs that end at the last sample (a trailing window, since
    there is nothing after it) and compares against the stationary threshold.
    """
    if len(samples) < 2:
        return False
    distances = leg_distances(samples)
    window = min(cfg.window_size, len(distances))
    return window_average(distances, len(distances) - 1, window) < cfg.stationary_distance_m
