"""
Day/night classification for the Flat Earth renderer.

This module decides, for each tile of the projected disk, whether it lies
outside the map, in daylight, or in shadow. The terminator is a fixed-radius
small circle (a quarter of Earth's circumference) around the sub-solar point.
"""
from enum import Enum

import numpy as np

from flat_earth_renders import constants
from flat_earth_renders.geo import (
    GeoPoint,
    PlanarPoint,
    from_planar,
    from_planar_grid,
    spherical_distance,
    spherical_distance_grid,
)


class TileState(Enum):
    """Enumeration of possible tile classifications."""
    OUTSIDE_MAP = "outside_map"
    LIT = "lit"
    SHADOWED = "shadowed"


class IlluminationModel:
    """
    Classifies tiles relative to the sub-solar point.
    """

    def __init__(self, threshold_km=None, earth_radius_km=None):
        """
        Initialize terminator parameters.

        Args:
            threshold_km: Great-circle distance (km) below which a tile is lit
            earth_radius_km: Sphere radius used for distances (km)
        """
        self.threshold_km = threshold_km if threshold_km is not None else constants.TERMINATOR_DISTANCE_KM
        self.earth_radius_km = earth_radius_km if earth_radius_km is not None else constants.EARTH_RADIUS_KM

    def classify_geo(self, sun: GeoPoint, tile: GeoPoint) -> TileState:
        """Classify a tile that is already in latitude/longitude."""
        if not tile.is_on_map:
            return TileState.OUTSIDE_MAP
        if spherical_distance(sun, tile, self.earth_radius_km) < self.threshold_km:
            return TileState.LIT
        return TileState.SHADOWED

    def classify(self, sun: GeoPoint, tile: PlanarPoint) -> TileState:
        """
        Classify a single tile given its normalized disk coordinates.

        Args:
            sun: Sub-solar point
            tile: Tile position on the projection disk

        Returns:
            TileState
        """
        return self.classify_geo(sun, from_planar(tile))

    def _grid_masks(self, sun, x, y):
        lat, lon = from_planar_grid(x, y)
        on_map = lat >= constants.MIN_MAP_LAT_DEG

        # Off-map tiles get an infinite distance so they never count as lit
        dist = np.full(lat.shape, np.inf)
        if np.any(on_map):
            dist[on_map] = spherical_distance_grid(sun, lat[on_map], lon[on_map],
                                                   self.earth_radius_km)
        lit = on_map & (dist < self.threshold_km)
        return on_map, lit

    def classify_grid(self, sun, x, y):
        """
        Vectorized classification of many tiles.

        Args:
            sun: Sub-solar point
            x, y: Arrays (same shape) of normalized disk coordinates

        Returns:
            Array of TileState values (object dtype), same shape as `x`
        """
        on_map, lit = self._grid_masks(sun, x, y)

        states = np.full(on_map.shape, TileState.OUTSIDE_MAP.value, dtype=object)
        states[on_map] = TileState.SHADOWED.value
        states[lit] = TileState.LIT.value
        return states

    def shadow_mask(self, sun, x, y):
        """
        Boolean mask of tiles that receive the night overlay.

        Returns:
            Array of bools, True where the tile is on the map and not lit
        """
        on_map, lit = self._grid_masks(sun, x, y)
        return on_map & ~lit

    def lit_fraction(self, sun, x, y):
        """Fraction of on-map tiles that are lit (0.0 when no tile is on the map)."""
        on_map, lit = self._grid_masks(sun, x, y)
        n_on_map = np.count_nonzero(on_map)
        if n_on_map == 0:
            return 0.0
        return np.count_nonzero(lit) / n_on_map


def classify_tile(sun: GeoPoint, tile: PlanarPoint) -> TileState:
    """Classify one tile with the default terminator distance."""
    return IlluminationModel().classify(sun, tile)
