"""
Locate the most recent complete trips (parked -> moving -> parked) in a track.

The search runs backward from a start index over a MovementState sequence:
terminal stationary run, then the moving run before it, then (best effort)
the leading stationary run. It is called once from the end of the track and
once more from just before the first trip found.
"""

from __future__ import annotations

from typing import Sequence

from vt.analysis.config import PipelineConfig
from vt.analysis.movement import MovementStateAnalyzer
from vt.analysis.types import MovementState, Sample, Span, Trip, TripSelection
from vt.utils.geo import haversine
from vt.utils.log import get_logger

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
MAX_TRIPS          = 2
START_LOOKBACK     = 5      # samples kept before a moving run with no parked lead-in
RECENT_WINDOW      = 120    # samples returned when no trip is found (~1h at 30s)
GAP_DISTANCE_M     = 200.0  # inter-trip jump worth reporting
GAP_MIN_SECONDS    = 120.0
# -----------------------------------------------------------------------------


def find_run(
    states: Sequence[MovementState],
    samples: Sequence[Sample],
    state: MovementState,
    from_index: int,
    min_duration: float,
) -> Span | None:
    """
    Scan backward from ``from_index`` for the latest maximal run of ``state``
    lasting at least ``min_duration`` seconds.

    Runs that are too short are skipped as a whole and the scan continues
    before them.
    """
    i = min(from_index, len(states) - 1)
    while i >= 0:
        if states[i] is not state:
            i -= 1
            continue
        end = i
        start = i
        while start - 1 >= 0 and states[start - 1] is state:
            start -= 1
        if samples[end].ts - samples[start].ts >= min_duration:
            return Span(start, end)
        i = start - 1
    return None


def find_complete_trip(
    states: Sequence[MovementState],
    samples: Sequence[Sample],
    from_index: int,
    cfg: PipelineConfig,
) -> Trip | None:
    """
    Find the latest trip ending at or before ``from_index``.

    Parameters
    ----------
    states
        Movement labels, one per sample.
    samples
        The labelled samples.
    from_index
        Index the backward search starts from.
    cfg
        Supplies the minimum stationary and moving durations.

    Returns
    -------
    Trip | None
        The trip, or None unless both a terminal stationary run and a moving
        run before it qualify.
    """
    if from_index < 0 or not states:
        return None

    end_stationary = find_run(
        states, samples, MovementState.STATIONARY, from_index, cfg.trip_min_stationary_s
    )
    if end_stationary is None:
        return None

    moving = find_run(
        states, samples, MovementState.MOVING, end_stationary.start - 1, cfg.trip_min_moving_s
    )
    if moving is None:
        return None

    start_stationary = find_run(
        states, samples, MovementState.STATIONARY, moving.start - 1, cfg.trip_min_stationary_s
    )
    if start_stationary is not None:
        start = start_stationary.start
    else:
        start = max(0, moving.start - START_LOOKBACK)

    return Trip(
        start=start,
        end=end_stationary.end,
        start_stationary=start_stationary,
        moving=moving,
        end_stationary=end_stationary,
    )


def identify_recent_trips(
    samples: Sequence[Sample],
    cfg: PipelineConfig,
    states: Sequence[MovementState] | None = None,
) -> TripSelection:
    """
    Select the points of the (up to) two most recent trips.

    Parameters
    ----------
    samples
        Samples sorted by timestamp, typically a multi-hour window.
    cfg
        Pipeline thresholds.
    states
        Precomputed labels for ``samples``; computed when omitted.

    Returns
    -------
    TripSelection
        Trips (most recent first) and their merged, time-ordered points. With
        no trip, the last RECENT_WINDOW samples and ``fallback=True``.
    """
    if len(samples) < 3:
        return TripSelection(
            indices=list(range(len(samples))), points=list(samples), fallback=True
        )

    if states is None:
        states = MovementStateAnalyzer(cfg).label(samples)

    trips: list[Trip] = []
    search_index = len(samples) - 1
    while len(trips) < MAX_TRIPS and search_index >= 0:
        trip = find_complete_trip(states, samples, search_index, cfg)
        if trip is None:
            break
        trips.append(trip)
        search_index = trip.start - 1

    if not trips:
        cutoff = max(0, len(samples) - RECENT_WINDOW)
        logger.warning(
            "No complete trip in %d samples, falling back to the last %d",
            len(samples), len(samples) - cutoff,
        )
        indices = list(range(cutoff, len(samples)))
        return TripSelection(indices=indices, points=[samples[i] for i in indices], fallback=True)

    used: set[int] = set()
    indices: list[int] = []
    for trip in trips:
        for i in range(trip.start, trip.end + 1):
            if i not in used:
                used.add(i)
                indices.append(i)
    indices.sort(key=lambda i: (samples[i].ts, i))
    points = [samples[i] for i in indices]

    logger.info(f"Identified {len(trips)} trips, {len(points)} points in total")
    if len(trips) > 1:
        _log_trip_gaps(points)

    return TripSelection(trips=trips, indices=indices, points=points)


def _log_trip_gaps(points: Sequence[Sample]) -> None:
    """
    Report jumps between merged trips; they are expected, not errors.
    """
    for i, (prev, curr) in enumerate(zip(points, points[1:]), start=1):
        dist = haversine(prev.coords, curr.coords)
        gap_s = curr.ts - prev.ts
        if dist > GAP_DISTANCE_M and gap_s > GAP_MIN_SECONDS:
            logger.info(
                "Gap between trips at %d->%d: %.2f m over %.2f min",
                i - 1, i, dist, gap_s / 60,
            )
