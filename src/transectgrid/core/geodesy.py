"""
Spherical great-circle helpers.

Every transect vertex is produced by `destination`, the direct geodesic problem on a
sphere of mean radius EARTH_RADIUS_KM. Accuracy is adequate for sub-kilometre spacing.
Functions accept scalars or numpy arrays.
"""
from __future__ import annotations

from typing import Union

import numpy as np

from transectgrid.models import GeoPoint

EARTH_RADIUS_KM = 6371.0

ArrayLike = Union[float, np.ndarray]


def normalize_longitude(lon: ArrayLike) -> ArrayLike:
    """Wrap longitude(s) into [-180, 180]; +180 stays +180."""
    lon = np.asarray(lon, dtype=float)
    wrapped = (lon + 180.0) % 360.0 - 180.0
    wrapped = np.where((wrapped == -180.0) & (lon > 0), 180.0, wrapped)
    return wrapped if wrapped.ndim else float(wrapped)


def destination(
    lat: ArrayLike,
    lon: ArrayLike,
    bearing_deg: ArrayLike,
    distance_km: ArrayLike,
    radius_km: float = EARTH_RADIUS_KM,
) -> tuple:
    """
    Point reached from (lat, lon) after distance_km along an initial bearing.

    Returns (lat2, lon2) in decimal degrees, as floats or arrays matching the inputs.
    """
    delta = np.asarray(distance_km, dtype=float) / radius_km
    phi1 = np.radians(lat)
    theta = np.radians(np.mod(bearing_deg, 360.0))

    sin_phi1 = np.sin(phi1)
    cos_phi1 = np.cos(phi1)
    sin_delta = np.sin(delta)
    cos_delta = np.cos(delta)

    sin_phi2 = sin_phi1 * cos_delta + cos_phi1 * sin_delta * np.cos(theta)
    phi2 = np.arcsin(np.clip(sin_phi2, -1.0, 1.0))
    lam2 = np.radians(lon) + np.arctan2(
        np.sin(theta) * sin_delta * cos_phi1,
        cos_delta - sin_phi1 * np.sin(phi2),
    )

    lat2 = np.degrees(phi2)
    lon2 = normalize_longitude(np.degrees(lam2))
    if np.ndim(lat2) == 0:
        return float(lat2), float(lon2)
    return lat2, lon2


def destination_point(
    lat: float, lon: float, bearing_deg: float, distance_km: float, radius_km: float = EARTH_RADIUS_KM
) -> GeoPoint:
    lat2, lon2 = destination(lat, lon, bearing_deg, distance_km, radius_km)
    return GeoPoint(lat2, lon2)


def haversine_km(a: GeoPoint, b: GeoPoint, radius_km: float = EARTH_RADIUS_KM) -> float:
    """Great-circle distance in kilometres between two points."""
    lat1, lon1 = np.radians(a.lat), np.radians(a.lon)
    lat2, lon2 = np.radians(b.lat), np.radians(b.lon)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    return float(2 * radius_km * np.arctan2(np.sqrt(h), np.sqrt(1.0 - h)))


def initial_bearing(a: GeoPoint, b: GeoPoint) -> float:
    """Forward azimuth from a to b, degrees in [0, 360)."""
    lat1 = np.radians(a.lat)
    lat2 = np.radians(b.lat)
    dlon = np.radians(b.lon - a.lon)
    x = np.sin(dlon) * np.cos(lat2)
    y = np.cos(lat1) * np.sin(lat2) - np.sin(lat1) * np.cos(lat2) * np.cos(dlon)
    return float((np.degrees(np.arctan2(x, y)) + 360.0) % 360.0)
