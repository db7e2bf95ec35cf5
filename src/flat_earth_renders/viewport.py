"""
Mapping between render-surface pixels and the normalized projection disk.

The disk center and pixel radius are explicit parameters here rather than
literals at each call site, so nothing in the geometry depends on a fixed
window size.
"""
from dataclasses import dataclass

import numpy as np

from flat_earth_renders import constants
from flat_earth_renders.geo import GeoPoint, PlanarPoint, from_planar, from_planar_grid, to_planar


@dataclass(frozen=True)
class DiskViewport:
    """
    Placement of the projection disk on the render surface.

    Attributes:
        center_x, center_y: Pixel position of the north pole
        radius: Pixel distance from the north pole to the south pole circle
    """
    center_x: float
    center_y: float
    radius: float

    def __post_init__(self):
        if not self.radius > 0:
            raise ValueError(f"radius must be positive, got {self.radius}")

    @classmethod
    def for_size(cls, size_px=None):
        """Disk inscribed in a square render surface of `size_px` pixels."""
        size = size_px if size_px is not None else constants.DEFAULT_IMAGE_SIZE_PX
        half = size / 2.0
        return cls(center_x=half, center_y=half, radius=half)

    @property
    def center(self):
        return (self.center_x, self.center_y)

    def pixel_to_planar(self, px, py) -> PlanarPoint:
        return PlanarPoint((px - self.center_x) / self.radius,
                           (py - self.center_y) / self.radius)

    def planar_to_pixel(self, point: PlanarPoint):
        return (self.center_x + self.radius * point.x,
                self.center_y + self.radius * point.y)

    def pixel_to_geo(self, px, py) -> GeoPoint:
        return from_planar(self.pixel_to_planar(px, py))

    def geo_to_pixel(self, point: GeoPoint):
        return self.planar_to_pixel(to_planar(point))

    def tile_coordinates(self, width, height, step=None):
        """
        Pixel coordinates of the tile scan: 0, step, 2*step, ... per axis.

        Returns:
            tuple: (xs, ys) 1D arrays
        """
        step = step if step is not None else constants.DEFAULT_TILE_STEP_PX
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        return np.arange(0.0, width, step), np.arange(0.0, height, step)

    def pixel_grid(self, width, height, step=None):
        """
        Normalized disk coordinates for every tile of the scan.

        Returns:
            tuple: (x, y) arrays of shape (rows, cols)
        """
        xs, ys = self.tile_coordinates(width, height, step)
        px, py = np.meshgrid(xs, ys)
        return (px - self.center_x) / self.radius, (py - self.center_y) / self.radius

    def geo_grid(self, width, height, step=None):
        """
        Latitude/longitude of every tile of the scan.

        Returns:
            tuple: (lat, lon) arrays of shape (rows, cols)
        """
        return from_planar_grid(*self.pixel_grid(width, height, step))


def pixel_to_geo(pixel, center, radius) -> GeoPoint:
    """
    Translate a pointer position into the sub-solar point it designates.

    Args:
        pixel: (x, y) pointer position in render-surface pixels
        center: (x, y) pixel position of the disk center
        radius: Disk radius in pixels

    Returns:
        GeoPoint under the pointer (lat < -90 when outside the disk)
    """
    return DiskViewport(center[0], center[1], radius).pixel_to_geo(pixel[0], pixel[1])
