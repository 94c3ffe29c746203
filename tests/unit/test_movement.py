"""
Unit tests for the sliding-window movement-state analyzer.
"""

import dataclasses

import pytest

from vt.analysis.movement import (
    MovementStateAnalyzer,
    is_last_point_stationary,
    leg_distances,
    window_average,
)
from vt.analysis.types import MovementState
from tests.fixtures.tracks import BAND_ONLY, track_from_offsets

S = MovementState.STATIONARY
M = MovementState.MOVING


class TestWindowAverage:

    @pytest.mark.unit
    def test_centered_window(self):
        assert window_average([1, 2, 3, 4, 5], 2, 3) == pytest.approx(3.0)

    @pytest.mark.unit
    def test_clamped_at_both_ends(self):
        assert window_average([2, 4, 9], 0, 3) == pytest.approx(3.0)
        assert window_average([2, 4, 9], 2, 3) == pytest.approx(6.5)

    @pytest.mark.unit
    def test_empty(self):
        assert window_average([], 0, 3) == 0.0

    @pytest.mark.unit
    def test_leg_distances_count(self, park_drive_park):
        assert len(leg_distances(park_drive_park)) == len(park_drive_park) - 1


class TestLabels:

    @pytest.mark.unit
    def test_too_short_gives_nothing(self, cfg):
        track = track_from_offsets([(0, 0), (0, 50)])
        assert MovementStateAnalyzer(cfg).label(track) == []

    @pytest.mark.unit
    def test_one_label_per_sample(self, scenario_cfg, park_drive_park):
        states = MovementStateAnalyzer(scenario_cfg).label(park_drive_park)
        assert states == [S] * 6 + [M] * 10 + [S] * 4

    @pytest.mark.unit
    def test_last_sample_inherits_running_state(self, cfg):
        track = track_from_offsets([(0, 25 * k) for k in range(6)])
        states = MovementStateAnalyzer(cfg).label(track)
        assert states == [M] * 6

    @pytest.mark.unit
    def test_band_seeds_moving(self, cfg):
        """A track that never leaves the hysteresis band stays in its seed state."""
        states = MovementStateAnalyzer(cfg).label(track_from_offsets(BAND_ONLY))
        assert set(states) == {M}


class TestHysteresis:

    @pytest.mark.unit
    def test_isolated_outlier_does_not_flip_state(self, cfg):
        """One over-threshold reading inside the dwell time is absorbed."""
        single = dataclasses.replace(cfg, window_size=1)
        track = track_from_offsets([(0, 0), (0, 0), (0, 0)] + [(0, 30)] * 5)
        states = MovementStateAnalyzer(single).label(track)
        assert states == [S] * 8

    @pytest.mark.unit
    def test_change_after_dwell_is_accepted_and_held(self, cfg):
        """Once the dwell time has passed the new state sticks for its own dwell."""
        single = dataclasses.replace(cfg, window_size=1)
        track = track_from_offsets([(0, 0)] * 6 + [(0, 30)] * 6)
        states = MovementStateAnalyzer(single).label(track)
        assert states == [S] * 5 + [M] * 3 + [S] * 4


class TestSegments:

    @pytest.mark.unit
    def test_reference_scenario_has_two_stops(self, scenario_cfg, park_drive_park):
        segments = MovementStateAnalyzer(scenario_cfg).segments(park_drive_park)
        assert [(s.start_index, s.end_index) for s in segments] == [(0, 5), (16, 19)]
        assert segments[0].duration == pytest.approx(150.0)
        assert segments[1].duration == pytest.approx(90.0)
        assert segments[1].anchor_lat == park_drive_park[16].lat
        assert segments[1].anchor_lon == park_drive_park[16].lon

    @pytest.mark.unit
    def test_short_stops_are_dropped(self, scenario_cfg, park_drive_park):
        strict = dataclasses.replace(scenario_cfg, segment_min_stationary_s=120.0)
        segments = MovementStateAnalyzer(strict).segments(park_drive_park)
        assert [(s.start_index, s.end_index) for s in segments] == [(0, 5)]

    @pytest.mark.unit
    def test_no_segments_when_always_moving(self, cfg):
        track = track_from_offsets([(0, 25 * k) for k in range(10)])
        assert MovementStateAnalyzer(cfg).segments(track) == []


class TestLastPointStationary:

    @pytest.mark.unit
    def test_parked_at_the_end(self, cfg, park_drive_park):
        assert is_last_point_stationary(park_drive_park, cfg) is True

    @pytest.mark.unit
    def test_still_driving(self, cfg, park_drive_park):
        assert is_last_point_stationary(park_drive_park[:12], cfg) is False

    @pytest.mark.unit
    def test_single_sample(self, cfg, park_drive_park):
        assert is_last_point_stationary(park_drive_park[:1], cfg) is False
