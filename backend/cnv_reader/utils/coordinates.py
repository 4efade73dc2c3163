"""
Coordinate utilities.

Great-circle distances between header positions (WGS84 lat/lng in degrees).
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray

EARTH_RADIUS_M = 6371000  # mean radius, meters


def distances_from(
    lat: float,
    lon: float,
    lats: ArrayLike,
    lons: ArrayLike,
) -> NDArray[np.float64]:
    """
    Haversine distance in meters from one point to many.

    NaN positions produce NaN distances.
    """
    lats_rad = np.radians(np.asarray(lats, dtype=np.float64))
    dlon = np.radians(np.asarray(lons, dtype=np.float64) - lon)
    lat0 = np.radians(lat)

    h = np.sin((lats_rad - lat0) / 2) ** 2 + np.cos(lat0) * np.cos(lats_rad) * np.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * np.arcsin(np.sqrt(np.clip(h, 0.0, 1.0)))


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in meters between two points given in degrees."""
    return float(distances_from(lat1, lon1, [lat2], [lon2])[0])
