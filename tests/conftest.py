"""
Shared pytest fixtures for vt tests.
"""

import dataclasses

import pytest

from vt.analysis.config import PipelineConfig
from tests.fixtures.tracks import PARK_DRIVE_PARK, track_from_offsets


@pytest.fixture
def cfg():
    """Facility preset used by the production deployment."""
    return PipelineConfig.facility()


@pytest.fixture
def scenario_cfg(cfg):
    """Thresholds of the parked/driving/parked reference scenario."""
    return dataclasses.replace(
        cfg,
        stationary_distance_m=10.0,
        moving_distance_m=20.0,
        trip_min_stationary_s=60.0,
        trip_min_moving_s=30.0,
    )


@pytest.fixture
def park_drive_park():
    """20 fixes at 30 s: parked, driving east, parked."""
    return track_from_offsets(PARK_DRIVE_PARK)


@pytest.fixture
def config_document():
    """Config document in the sectioned JSON layout."""
    return {
        "gpsFilter": {"maxSpeed": 40, "maxAcceleration": 3, "maxAngleChange": 120},
        "trajectoryFilter": {"minDistance": 5},
        "movementDetection": {
            "windowSize": 3,
            "stationaryDistanceThreshold": 10,
            "movingDistanceThreshold": 20,
            "minStateDuration": 90,
        },
        "tripDetection": {"minStationaryDuration": 60, "minMovingDuration": 30},
        "stationaryLabel": {"minStationaryDuration": 60},
    }
