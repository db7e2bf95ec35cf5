"""
Coordinate geometry for the Flat Earth Renderer.

This module holds the two value types used everywhere else (GeoPoint and
PlanarPoint) and the math connecting them:

- Great-circle (haversine) distance on a spherical Earth.
- Forward and inverse mapping between latitude/longitude and the normalized
  disk of the north-pole-centered azimuthal projection.

Conventions:
- Latitude in degrees, 90 at the north pole, -90 at the south pole.
- Longitude in degrees, 0 through Greenwich, positive WEST.
- Planar coordinates are normalized: the north pole is the origin and the
  south pole is the unit circle. lon=0 points along +y, and increasing
  longitude turns clockwise on screen (y down).

The radius is linear in latitude degrees, not colatitude times Earth radius,
so distances measured on the disk are not physically equidistant.

Scalar functions work on the value types; the *_grid functions accept numpy
arrays of any shape and are what the per-frame tile scan uses.
"""
from dataclasses import dataclass

import numpy as np

from flat_earth_renders import constants


def _check_finite(name, value):
    if not np.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")


@dataclass(frozen=True)
class PlanarPoint:
    """
    Point on the projection disk.

    Attributes:
        x: Horizontal coordinate, +x to the right (screen)
        y: Vertical coordinate, +y downward (screen)
    """
    x: float
    y: float

    def __post_init__(self):
        _check_finite("x", self.x)
        _check_finite("y", self.y)

    @property
    def radius(self) -> float:
        """Distance from the disk center (0 = north pole, 1 = south pole)."""
        return float(np.hypot(self.x, self.y))


@dataclass(frozen=True)
class GeoPoint:
    """
    Point on the sphere.

    Latitude is not range checked: the inverse projection returns lat < -90
    for planar points outside the unit disk, and callers branch on that
    through `is_on_map`. Very distant planar points overflow to lat = -inf,
    which is accepted as the same off-map value.

    Attributes:
        lat: Latitude in degrees
        lon: Longitude in degrees, positive west
    """
    lat: float
    lon: float

    def __post_init__(self):
        if self.lat != -np.inf:
            _check_finite("lat", self.lat)
        _check_finite("lon", self.lon)

    @property
    def is_on_map(self) -> bool:
        return self.lat >= constants.MIN_MAP_LAT_DEG

    def spherical_distance(self, other: "GeoPoint") -> float:
        """Great-circle distance to `other` in kilometers."""
        return spherical_distance(self, other)

    def to_planar(self) -> PlanarPoint:
        return to_planar(self)

    @classmethod
    def from_planar(cls, point: PlanarPoint) -> "GeoPoint":
        return from_planar(point)


def _haversine_km(lat1, lon1, lat2, lon2, earth_radius_km):
    lat1r = np.deg2rad(lat1)
    lat2r = np.deg2rad(lat2)
    u = np.sin((lat2r - lat1r) / 2.0)
    v = np.sin((np.deg2rad(lon2) - np.deg2rad(lon1)) / 2.0)

    a_term = u**2 + np.cos(lat1r) * np.cos(lat2r) * v**2
    # Rounding can push a_term just past 1 for near-antipodal points
    a_term = np.clip(a_term, 0.0, 1.0)
    return 2.0 * earth_radius_km * np.arcsin(np.sqrt(a_term))


def spherical_distance(a, b, earth_radius_km=None):
    """
    Compute the length of the path between two points along a great circle.

    Uses the haversine formula on a sphere of radius 6371 km.

    Args:
        a, b: GeoPoints
        earth_radius_km: Sphere radius override (km)

    Returns:
        Non-negative distance in kilometers
    """
    radius = earth_radius_km if earth_radius_km is not None else constants.EARTH_RADIUS_KM
    return float(_haversine_km(a.lat, a.lon, b.lat, b.lon, radius))


def spherical_distance_grid(origin, lat, lon, earth_radius_km=None):
    """
    Vectorized great-circle distance from one point to an array of points.

    Args:
        origin: GeoPoint the distances are measured from
        lat, lon: Arrays (same shape) of latitudes/longitudes in degrees

    Returns:
        Array of distances in kilometers, same shape as `lat`
    """
    radius = earth_radius_km if earth_radius_km is not None else constants.EARTH_RADIUS_KM
    return _haversine_km(origin.lat, origin.lon, np.asarray(lat, dtype=float),
                         np.asarray(lon, dtype=float), radius)


def to_planar_grid(lat, lon):
    """
    Vectorized forward projection.

    Returns:
        tuple: (x, y) arrays of normalized disk coordinates
    """
    lat = np.asarray(lat, dtype=float)
    r = -(lat - constants.POLE_LAT_DEG) / constants.LAT_SPAN_DEG
    th = np.deg2rad(lon)
    return r * -np.sin(th), r * np.cos(th)


def from_planar_grid(x, y):
    """
    Vectorized inverse projection.

    Latitude is not clamped: points with radius > 1 come back with
    lat < -90, which marks them as off the map.

    Returns:
        tuple: (lat, lon) arrays in degrees
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    # -x + 0.0 turns -0.0 into 0.0, so x == 0 yields lon in {0, 180}, never -0 or -180
    th = np.arctan2(-x + 0.0, y)

    # Huge finite radii overflow to lat = -inf, which still reads as off the map
    with np.errstate(over='ignore'):
        r = np.hypot(x, y)
        lat = -r * constants.LAT_SPAN_DEG + constants.POLE_LAT_DEG
    lon = np.rad2deg(th)
    return lat, lon


def to_planar(point: GeoPoint) -> PlanarPoint:
    """Map to x-y representation on the azimuthal projection disk."""
    x, y = to_planar_grid(point.lat, point.lon)
    return PlanarPoint(float(x), float(y))


def from_planar(point: PlanarPoint) -> GeoPoint:
    """Compute a GeoPoint from x-y azimuthal projection coordinates."""
    lat, lon = from_planar_grid(point.x, point.y)
    return GeoPoint(float(lat), float(lon))
