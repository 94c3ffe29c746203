"""
Tests for the FastAPI trajectory endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from vt.analysis.types import Sample
from vt.server import create_app
from tests.fixtures.tracks import offset


@pytest.fixture
def client(scenario_cfg):
    return TestClient(create_app(scenario_cfg))


class TestServer:

    @pytest.mark.unit
    def test_status(self, client):
        response = client.get("/api/status")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.unit
    def test_config(self, client):
        response = client.get("/api/config")
        assert response.status_code == 200
        assert response.json()["stationary_distance_m"] == 10.0

    @pytest.mark.unit
    def test_trajectory(self, client, park_drive_park):
        body = {"samples": [{"lat": s.lat, "lon": s.lon, "ts": s.ts} for s in park_drive_park]}
        response = client.post("/api/trajectory", json=body)
        assert response.status_code == 200

        data = response.json()
        assert data["fallback"] is False
        assert len(data["trip_points"]) == 20
        assert len(data["trajectory"]) == 13
        assert [(t["start"], t["end"]) for t in data["trips"]] == [(0, 19)]
        assert data["trips"][0]["moving"] == {"start": 6, "end": 15}
        assert [(s["start_index"], s["end_index"]) for s in data["segments"]] == [(0, 5), (16, 19)]
        assert data["stationary_now"] is True
        assert data["current_dwell"]["duration"] == pytest.approx(90.0)

    @pytest.mark.unit
    def test_unsorted_samples_are_ordered(self, client, park_drive_park):
        rows = [{"lat": s.lat, "lon": s.lon, "ts": s.ts} for s in reversed(park_drive_park)]
        response = client.post("/api/trajectory", json={"samples": rows})
        assert response.status_code == 200
        assert response.json()["trips"][0]["end"] == 19

    @pytest.mark.unit
    def test_invalid_payload(self, client):
        response = client.post("/api/trajectory", json={"samples": [{"lat": "x"}]})
        assert response.status_code == 422

    @pytest.mark.unit
    def test_indices_point_into_returned_sequences(self, client, park_drive_park):
        """Segments index trip_points; trips index the submitted samples."""
        track = list(park_drive_park)
        lat, lon = offset(1500.0, 100.0)
        track[10] = Sample(lat=lat, lon=lon, ts=track[10].ts)
        rows = [{"lat": s.lat, "lon": s.lon, "ts": s.ts} for s in track]

        data = client.post("/api/trajectory", json={"samples": rows}).json()

        assert len(data["trip_points"]) == 19
        for seg in data["segments"]:
            assert 0 <= seg["start_index"] <= seg["end_index"] < len(data["trip_points"])
            anchor = data["trip_points"][seg["start_index"]]
            assert (anchor["lat"], anchor["lon"]) == (seg["anchor_lat"], seg["anchor_lon"])
        for trip in data["trips"]:
            assert 0 <= trip["start"] <= trip["end"] < len(rows)
        assert [(t["start"], t["end"]) for t in data["trips"]] == [(0, 19)]
        assert data["trips"][0]["moving"] == {"start": 6, "end": 15}
        assert data["trips"][0]["end_stationary"] == {"start": 16, "end": 19}
