"""
End-to-end tests of the trajectory pipeline.
"""

import pytest

from vt.analysis.pipeline import TrajectoryPipeline, subsequence_indices
from vt.analysis.types import Sample, Span
from tests.fixtures.tracks import BAND_ONLY, offset, track_from_offsets


class TestTrajectoryPipeline:

    @pytest.mark.unit
    def test_reference_scenario(self, scenario_cfg, park_drive_park):
        result = TrajectoryPipeline(scenario_cfg).run(park_drive_park)

        assert len(result.trips) == 1
        assert (result.trips[0].start, result.trips[0].end) == (0, 19)
        assert result.fallback is False
        assert result.trip_points == park_drive_park
        assert [(s.start_index, s.end_index) for s in result.segments] == [(0, 5), (16, 19)]
        assert result.stationary_now is True
        assert result.current_dwell == result.segments[-1]
        assert result.trajectory[0] == park_drive_park[0]
        assert result.trajectory[-1] == park_drive_park[-1]
        assert len(result.trajectory) == 13

    @pytest.mark.unit
    def test_drift_spike_does_not_reach_output(self, scenario_cfg, park_drive_park):
        track = list(park_drive_park)
        lat, lon = offset(1500.0, 100.0)
        track[10] = Sample(lat=lat, lon=lon, ts=track[10].ts)

        result = TrajectoryPipeline(scenario_cfg).run(track)
        assert track[10] not in result.trajectory
        assert track[10] not in result.trip_points
        assert result.trajectory[-1].ts == track[-1].ts
        assert [(t.start, t.end) for t in result.trips] == [(0, 19)]
        assert result.trips[0].moving == Span(6, 15)
        assert [(s.start_index, s.end_index) for s in result.segments] == [(0, 5), (15, 18)]

    @pytest.mark.unit
    def test_driving_at_the_end_has_no_current_dwell(self, cfg):
        track = track_from_offsets(BAND_ONLY)
        result = TrajectoryPipeline(cfg).run(track)
        assert result.fallback is True
        assert result.trips == []
        assert result.stationary_now is False
        assert result.current_dwell is None
        assert result.trajectory

    @pytest.mark.unit
    def test_empty_input(self, cfg):
        result = TrajectoryPipeline(cfg).run([])
        assert result.trajectory == []
        assert result.segments == []
        assert result.stationary_now is False

    @pytest.mark.unit
    def test_input_is_not_mutated(self, scenario_cfg, park_drive_park):
        before = list(park_drive_park)
        TrajectoryPipeline(scenario_cfg).run(park_drive_park)
        assert park_drive_park == before


class TestSubsequenceIndices:

    @pytest.mark.unit
    def test_positions_of_kept_samples(self, park_drive_park):
        kept = [park_drive_park[0], park_drive_park[3], park_drive_park[4], park_drive_park[19]]
        assert subsequence_indices(park_drive_park, kept) == [0, 3, 4, 19]

    @pytest.mark.unit
    def test_equal_but_distinct_samples_are_matched_by_identity(self):
        track = track_from_offsets([(0, 0), (0, 0), (0, 10)])
        twin = Sample(lat=track[1].lat, lon=track[1].lon, ts=track[1].ts)
        samples = [track[0], twin, track[1], track[2]]
        assert subsequence_indices(samples, [track[0], track[1], track[2]]) == [0, 2, 3]
