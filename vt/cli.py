#!/usr/bin/env python3
"""
CLI entry point for the vt vehicle-trajectory toolkit.

Defines the following commands:
  vt analyze FILE [--config CFG.json] [--out OUT.json] [--verbose]
  vt serve [--port 8000] [--config CFG.json]
  vt version
"""

import sys
from argparse import ArgumentParser, Namespace
from importlib.metadata import PackageNotFoundError, version as _get_version
from pathlib import Path

import uvicorn
from pydantic import ValidationError

from vt.utils.log import get_logger, set_level
from vt.server import create_app, result_to_out
from vt.parsers.readings import load_readings
from vt.analysis.config import PipelineConfig
from vt.analysis.pipeline import TrajectoryPipeline

logger = get_logger(__name__)


def format_duration(seconds: float) -> str:
    """
    Human-readable dwell time, e.g. "45s", "2m 5s", "1h 2m".
    """
    if seconds < 60:
        return f"{round(seconds)}s"
    if seconds < 3600:
        minutes = int(seconds // 60)
        secs = round(seconds % 60)
        return f"{minutes}m {secs}s" if secs > 0 else f"{minutes}m"
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h"


def load_config(config_path: str | None) -> PipelineConfig:
    """
    Load thresholds from a JSON file, or use the facility preset.
    """
    if config_path is None:
        return PipelineConfig.facility()
    return PipelineConfig.from_file(config_path)


def analyze(src_file: str, config_path: str | None, out_path: str | None) -> None:
    """
    Run the trajectory pipeline over one readings file.

    Parameters
    ----------
    src_file
        JSON file of telemetry readings or paired samples.
    config_path
        Optional JSON config document; the facility preset otherwise.
    out_path
        Optional file the result is written to as JSON.
    """
    logger.info("Analyze: src=%s, config=%s, out=%s", src_file, config_path, out_path)
    cfg = load_config(config_path)
    samples = load_readings(src_file)
    result = TrajectoryPipeline(cfg).run(samples)

    logger.info(
        "Raw samples: %d, trip samples: %d, trajectory points: %d",
        len(samples), len(result.trip_points), len(result.trajectory),
    )
    for n, trip in enumerate(result.trips, start=1):
        logger.info(
            "Trip %d: samples %d..%d, moving %d..%d", n, trip.start, trip.end,
            trip.moving.start, trip.moving.end,
        )
    for seg in result.segments:
        logger.info(
            "Stop at (%.6f, %.6f) for %s", seg.anchor_lat, seg.anchor_lon,
            format_duration(seg.duration),
        )
    if result.current_dwell is not None:
        logger.info("Parked now for %s", format_duration(result.current_dwell.duration))

    if out_path:
        Path(out_path).write_text(result_to_out(result).model_dump_json(indent=2), encoding="utf-8")
        logger.info("Wrote %s", out_path)


def serve(port: int, config_path: str | None) -> None:
    """
    Spin up FastAPI+Uvicorn to serve the trajectory API.

    Parameters
    ----------
    port
        Port on which to serve HTTP.
    config_path
        Optional JSON config document; the facility preset otherwise.
    """
    logger.info("Serve: port=%d, config=%s", port, config_path)
    app = create_app(load_config(config_path))
    uvicorn.run(app, host="127.0.0.1", port=port)


def version() -> None:
    """
    Print the installed vt package version.
    """
    try:
        ver = _get_version("vt")
    except PackageNotFoundError:
        ver = "unknown"
    logger.info("vt version %s", ver)


def parse_args(argv: list[str] | None = None) -> Namespace:
    """
    Parse command-line arguments and return the populated namespace.
    """
    parser = ArgumentParser(prog="vt")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # vt analyze
    p = subparsers.add_parser("analyze", help="Analyze a readings file.")
    p.add_argument("src_file", type=str, help="JSON file of readings or samples.")
    p.add_argument("--config", dest="config_path", type=str, help="JSON config document.")
    p.add_argument("--out", dest="out_path", type=str, help="Write the result as JSON.")
    p.add_argument("--verbose", action="store_true", help="Log every dropped point.")

    # vt serve
    p = subparsers.add_parser("serve", help="Serve via FastAPI + Uvicorn.")
    p.add_argument(
        "--port", type=int, default=8000, help="Port number to serve on."
    )
    p.add_argument("--config", dest="config_path", type=str, help="JSON config document.")

    # vt version
    subparsers.add_parser("version", help="Show vt version and exit.")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """
    Entry point: dispatch to the selected subcommand.
    """
    args = parse_args(argv)
    try:
        match args.command:
            case "analyze":
                if args.verbose:
                    set_level("DEBUG")
                analyze(args.src_file, args.config_path, args.out_path)
            case "serve":
                serve(args.port, args.config_path)
            case "version":
                version()
            case _:
                sys.exit(1)
    except (ValueError, ValidationError, OSError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
