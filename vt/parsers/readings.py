"""
Readings parser: pair per-component telemetry readings into position samples.

The telemetry feed reports latitude and longitude as separate readings
(``PN`` = "lat" / "lon") that share a timestamp. Pairing happens here so the
analysis stages only ever see complete, time-sorted samples.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Union

from vt.analysis.types import Sample
from vt.utils.log import get_logger
from vt.utils.validate import RawReading, SampleIn

logger = get_logger(__name__)

LAT_KEY = "lat"
LON_KEY = "lon"
FEED_OK = 200


def parse_time(value: Union[float, str]) -> float:
    """
    Convert a reading timestamp to epoch seconds.

    Parameters
    ----------
    value : float | str
        Epoch seconds, or an ISO-8601 string such as "2025-06-01 08:30:00".
        Strings without an offset are taken as UTC.

    Returns
    -------
    float
        Seconds since epoch.
    """
    if isinstance(value, (int, float)):
        return float(value)
    text = value.strip()
    try:
        return float(text)
    except ValueError:
        pass
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text.replace("T", " "))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def pair_readings(readings: Iterable[Union[RawReading, dict[str, Any]]]) -> list[Sample]:
    """
    Group readings by timestamp and keep the timestamps that have both
    coordinates.

    Parameters
    ----------
    readings
        Raw readings (validated models or plain dicts).

    Returns
    -------
    list[Sample]
        Samples sorted by timestamp.
    """
    by_time: dict[float, dict[str, float]] = {}
    for item in readings:
        reading = item if isinstance(item, RawReading) else RawReading.model_validate(item)
        if reading.PN not in (LAT_KEY, LON_KEY):
            continue
        ts = parse_time(reading.time)
        by_time.setdefault(ts, {})[reading.PN] = reading.value

    samples = [
        Sample(lat=parts[LAT_KEY], lon=parts[LON_KEY], ts=ts)
        for ts, parts in by_time.items()
        if LAT_KEY in parts and LON_KEY in parts
    ]
    samples.sort(key=lambda s: s.ts)
    dropped = len(by_time) - len(samples)
    if dropped:
        logger.info("Dropped %d timestamps with an incomplete coordinate pair", dropped)
    return samples


def samples_from_payload(data: Any) -> list[Sample]:
    """
    Build samples from any supported JSON document.

    Accepted shapes:
      - ``{"c": 200, "d": [reading, ...]}`` (feed envelope; any other ``c``
        means the feed had no data)
      - ``[reading, ...]`` with ``time`` / ``PN`` / ``value`` keys
      - ``[{"lat": ..., "lon": ..., "ts": ...}, ...]`` (already paired)

    Raises
    ------
    ValueError
        If the document matches none of the shapes.
    """
    if isinstance(data, dict) and "d" in data:
        if data.get("c", FEED_OK) != FEED_OK:
            logger.warning("Feed returned status %s, treating as no data", data["c"])
            return []
        data = data["d"] or []
    if not isinstance(data, list):
        raise ValueError("expected a list of readings or a {'d': [...]} envelope")
    if not data:
        return []

    first = data[0]
    if isinstance(first, dict) and "PN" in first:
        return pair_readings(data)
    if isinstance(first, dict) and {"lat", "lon", "ts"} <= first.keys():
        samples = [SampleIn.model_validate(row) for row in data]
        return sorted((Sample(s.lat, s.lon, s.ts) for s in samples), key=lambda s: s.ts)
    raise ValueError("unrecognised reading format")


def load_readings(file_path: str) -> list[Sample]:
    """
    Read a JSON readings file and return paired, time-sorted samples.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    samples = samples_from_payload(data)
    logger.info("Loaded %d samples from %s", len(samples), Path(file_path).name)
    return samples
