"""
Reject GPS fixes that imply physically implausible motion.

A single left-to-right pass compares every candidate against the last
*kept* fix (never against the raw predecessor), so a rejected outlier does
not poison the checks for the samples after it. Guards, in order:

- non-advancing timestamp
- speed limit
- jitter: a sub-metre step followed by an impossible jump
- heading: a sharp turn taken at speed
- acceleration between the last kept leg and the candidate leg
"""

from __future__ import annotations

from typing import Sequence

from vt.analysis.config import PipelineConfig
from vt.analysis.types import Sample
from vt.utils.geo import bearing, haversine, heading_change
from vt.utils.log import get_logger

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
JITTER_DISTANCE_M   = 1.0   # steps shorter than this get the look-ahead check
HIGH_SPEED_KMH      = 60.0  # above this, a sharp turn is judged against this tier
LOW_SPEED_TIER_KMH  = 30.0  # otherwise a sharp turn above this speed is drift
MS_TO_KMH           = 3.6
# -----------------------------------------------------------------------------


def implied_speed_kmh(a: Sample, b: Sample) -> float | None:
    """
    Speed needed to travel from ``a`` to ``b``, or None if time does not advance.
    """
    dt = b.ts - a.ts
    if dt <= 0:
        return None
    return haversine(a.coords, b.coords) / dt * MS_TO_KMH


def _turn_speed_threshold(speed_kmh: float) -> float:
    return HIGH_SPEED_KMH if speed_kmh > HIGH_SPEED_KMH else LOW_SPEED_TIER_KMH


def filter_drift(samples: Sequence[Sample], cfg: PipelineConfig) -> list[Sample]:
    """
    Drop drift points from a chronologically ordered track.

    Parameters
    ----------
    samples
        Samples sorted by timestamp.
    cfg
        Pipeline thresholds (speed, acceleration and angle limits are used).

    Returns
    -------
    list[Sample]
        A subsequence of ``samples`` that starts with the first sample and
        ends at the timestamp of the last one.
    """
    if len(samples) <= 2:
        return list(samples)

    kept: list[Sample] = [samples[0]]
    n = len(samples)
    for i in range(1, n):
        prev = kept[-1]
        curr = samples[i]
        dt = curr.ts - prev.ts
        if dt <= 0:
            logger.debug("Drift: skip #%d, timestamp does not advance (dt=%.1fs)", i, dt)
            continue

        dist = haversine(prev.coords, curr.coords)
        speed = dist / dt * MS_TO_KMH
        if speed > cfg.max_speed_kmh:
            logger.debug("Drift: drop #%d, speed %.2f km/h > %.2f", i, speed, cfg.max_speed_kmh)
            continue

        # a point that barely moved but is followed by an impossible jump is drift
        if dist < JITTER_DISTANCE_M and i < n - 1:
            next_speed = implied_speed_kmh(curr, samples[i + 1])
            if next_speed is not None and next_speed > cfg.max_speed_kmh:
                logger.debug("Drift: drop #%d, next leg speed %.2f km/h", i, next_speed)
                continue

        if len(kept) >= 2:
            prev_prev = kept[-2]
            prev_dist = haversine(prev_prev.coords, prev.coords)

            # bearings of zero-length legs are undefined
            if prev_dist > 0 and dist > 0:
                turn = heading_change(
                    bearing(prev_prev.coords, prev.coords),
                    bearing(prev.coords, curr.coords),
                )
                if turn > cfg.max_angle_change and speed > _turn_speed_threshold(speed):
                    logger.debug(
                        "Drift: drop #%d, heading change %.2f deg at %.2f km/h", i, turn, speed
                    )
                    continue

            prev_speed = prev_dist / (prev.ts - prev_prev.ts) * MS_TO_KMH
            if prev_speed > 0:
                accel = abs(speed - prev_speed) / MS_TO_KMH / dt
                if accel > cfg.max_acceleration:
                    logger.debug(
                        "Drift: drop #%d, acceleration %.2f m/s^2 > %.2f",
                        i, accel, cfg.max_acceleration,
                    )
                    continue

        kept.append(curr)

    if kept[-1].ts != samples[-1].ts:
        kept.append(samples[-1])

    return kept
