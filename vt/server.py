# vt/server.py
"""
FastAPI server for the vt CLI.
"""

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from vt.analysis.config import PipelineConfig
from vt.analysis.pipeline import TrajectoryPipeline
from vt.analysis.types import Sample, StationarySegment, TrajectoryResult, Trip
from vt.utils.log import get_logger
from vt.utils.validate import SampleIn, SegmentOut, SpanOut, TrajectoryOut, TrajectoryRequest, TripOut

logger = get_logger(__name__)


def _segment_out(seg: StationarySegment) -> SegmentOut:
    return SegmentOut(
        start_index=seg.start_index,
        end_index=seg.end_index,
        duration=seg.duration,
        anchor_lat=seg.anchor_lat,
        anchor_lon=seg.anchor_lon,
    )

def _trip_out(trip: Trip) -> TripOut:
    lead = trip.start_stationary
    return TripOut(
        start=trip.start,
        end=trip.end,
        start_stationary=SpanOut(start=lead.start, end=lead.end) if lead else None,
        moving=SpanOut(start=trip.moving.start, end=trip.moving.end),
        end_stationary=SpanOut(start=trip.end_stationary.start, end=trip.end_stationary.end),
    )

def result_to_out(result: TrajectoryResult) -> TrajectoryOut:
    """
    Convert a pipeline result into its serialisable schema.
    """
    return TrajectoryOut(
        trajectory=[SampleIn(lat=s.lat, lon=s.lon, ts=s.ts) for s in result.trajectory],
        trip_points=[SampleIn(lat=s.lat, lon=s.lon, ts=s.ts) for s in result.trip_points],
        segments=[_segment_out(seg) for seg in result.segments],
        trips=[_trip_out(trip) for trip in result.trips],
        fallback=result.fallback,
        stationary_now=result.stationary_now,
        current_dwell=_segment_out(result.current_dwell) if result.current_dwell else None,
    )


def create_app(cfg: PipelineConfig) -> FastAPI:
    """
    Build a FastAPI instance bound to one pipeline configuration.
    """
    app = FastAPI()
    app.state.cfg = cfg
    app.state.pipeline = TrajectoryPipeline(cfg)

    @app.get("/api/status", response_class=JSONResponse)
    async def status() -> JSONResponse:
        return JSONResponse(status_code=200, content={"status": "ok"})

    @app.get("/api/config", response_class=JSONResponse)
    async def get_config(request: Request) -> JSONResponse:
        return JSONResponse(status_code=200, content=request.app.state.cfg.to_dict())

    @app.post("/api/trajectory", response_model=TrajectoryOut)
    async def post_trajectory(request: Request, body: TrajectoryRequest):
        """
        Run the full pipeline over one track's samples.
        """
        samples = sorted(
            (Sample(lat=s.lat, lon=s.lon, ts=s.ts) for s in body.samples),
            key=lambda s: s.ts,
        )
        logger.info("Trajectory request with %d samples", len(samples))
        result = request.app.state.pipeline.run(samples)
        return result_to_out(result)

    return app
