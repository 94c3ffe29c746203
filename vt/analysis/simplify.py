"""
Thin a trajectory for display.
"""

from __future__ import annotations

from typing import Sequence

from vt.analysis.config import PipelineConfig
from vt.analysis.drift import filter_drift
from vt.analysis.types import Sample
from vt.utils.geo import haversine


def simplify_trajectory(
    samples: Sequence[Sample],
    cfg: PipelineConfig,
    min_spacing_m: float | None = None,
) -> list[Sample]:
    """
    Drift-filter a track, then drop points too close to the last kept one.

    Parameters
    ----------
    samples
        Samples sorted by timestamp.
    cfg
        Pipeline thresholds; ``cfg.min_spacing_m`` is the default spacing.
    min_spacing_m
        Overrides the configured spacing (m).

    Returns
    -------
    list[Sample]
        First and last drift-filtered samples, plus every sample in between
        that lies at least the spacing away from its kept predecessor.
    """
    if len(samples) <= 2:
        return list(samples)

    spacing = cfg.min_spacing_m if min_spacing_m is None else min_spacing_m
    drift_free = filter_drift(samples, cfg)
    if len(drift_free) <= 2:
        return drift_free

    kept: list[Sample] = [drift_free[0]]
    for curr in drift_free[1:-1]:
        if haversine(kept[-1].coords, curr.coords) >= spacing:
            kept.append(curr)
    kept.append(drift_free[-1])
    return kept
