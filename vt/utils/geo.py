# vt/utils/geo.py

"""
Geospatial utility functions.
"""

import math
from typing import Tuple

EARTH_RADIUS_M = 6371000.0


def haversine(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """
    Compute the great-circle distance between two points on the Earth.

    Parameters
    ----------
    a
        (latitude, longitude) of point A, in decimal degrees.
    b
        (latitude, longitude) of point B, in decimal degrees.

    Returns
    -------
    float
        Distance between A and B in metres.
    """
    lat1, lon1 = a
    lat2, lon2 = b
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lam = math.radians(lon2 - lon1)
    h = math.sin(d_phi/2)**2 + math.cos(phi1)*math.cos(phi2)*math.sin(d_lam/2)**2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(min(h, 1.0)))


def bearing(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """
    Initial heading from A to B, clockwise from north.

    Parameters
    ----------
    a
        (latitude, longitude) of the start point, in decimal degrees.
    b
        (latitude, longitude) of the end point, in decimal degrees.

    Returns
    -------
    float
        Bearing in degrees, in [0, 360). Meaningless when A == B; callers
        must check for coincident points themselves.
    """
    lat1, lon1 = a
    lat2, lon2 = b
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_lam = math.radians(lon2 - lon1)
    y = math.sin(d_lam) * math.cos(phi2)
    x = math.cos(phi1)*math.sin(phi2) - math.sin(phi1)*math.cos(phi2)*math.cos(d_lam)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def heading_change(first: float, second: float) -> float:
    """
    Absolute turn between two bearings, folded into [0, 180].
    """
    diff = abs(second - first) % 360.0
    return 360.0 - diff if diff > 180.0 else diff
