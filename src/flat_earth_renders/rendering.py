"""
Frame state and image compositing for the Flat Earth renderer.
"""
from dataclasses import dataclass
import functools
import logging

import numpy as np
import PIL.Image
import PIL.ImageDraw

from flat_earth_renders import constants
from flat_earth_renders.geo import GeoPoint
from flat_earth_renders.illumination import IlluminationModel
from flat_earth_renders.viewport import DiskViewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameState:
    """
    State carried from one frame to the next.

    Attributes:
        sun: Point where the sun is directly overhead
    """
    sun: GeoPoint

    @classmethod
    def initial(cls):
        return cls(sun=GeoPoint(constants.DEFAULT_SUN_LAT, constants.DEFAULT_SUN_LON))


def advance_frame(state, pointer, update_requested, viewport):
    """
    Compute the state for the next frame.

    Args:
        state: Current FrameState
        pointer: (x, y) pointer position in pixels, or None if unknown
        update_requested: Whether the user asked to move the sun this frame
        viewport: DiskViewport used to interpret the pointer

    Returns:
        FrameState (the same object when nothing changes)
    """
    if not update_requested or pointer is None:
        return state
    return FrameState(sun=viewport.pixel_to_geo(pointer[0], pointer[1]))


def load_world_map(map_path, size_px):
    """
    Load the world map image and scale it onto the square render surface.

    Raises:
        FileNotFoundError: If `map_path` does not exist
        PIL.UnidentifiedImageError: If the file is not a readable image
    """
    with PIL.Image.open(map_path) as img:
        base = img.convert("RGB").resize((size_px, size_px), PIL.Image.LANCZOS)
    logger.info("Loaded world map %s (%dx%d)", map_path, size_px, size_px)
    return np.asarray(base, dtype=np.uint8)


def plain_disk(size_px, viewport):
    """Stand-in background when no world map is supplied: a flat disk on black."""
    img = np.empty((size_px, size_px, 3), dtype=np.uint8)
    img[:, :] = constants.BACKGROUND_RGB
    px, py = np.meshgrid(np.arange(size_px), np.arange(size_px))
    inside = (px - viewport.center_x)**2 + (py - viewport.center_y)**2 <= viewport.radius**2
    img[inside] = constants.DISK_RGB
    return img


class MapRenderer:
    def __init__(self, size_px=None, map_path=None, step=None, illumination=None):
        """
        Initialize the renderer and load the world map.

        Render Surface:
        - Square image of size_px x size_px pixels.
        - The projection disk is inscribed: center (size/2, size/2), radius size/2.
        - The day/night mask is evaluated on a grid of tiles every `step` pixels;
          each tile is a step x step square centered on its grid coordinate.

        A missing or unreadable map file fails here, at startup.
        """
        self.size = size_px if size_px is not None else constants.DEFAULT_IMAGE_SIZE_PX
        self.step = step if step is not None else constants.DEFAULT_TILE_STEP_PX
        self.map_path = map_path
        self.viewport = DiskViewport.for_size(self.size)
        self.illumination = illumination if illumination is not None else IlluminationModel()

        if map_path is not None:
            self.base_image = load_world_map(map_path, self.size)
        else:
            self.base_image = plain_disk(self.size, self.viewport)

        # Tile grid is fixed for the renderer's lifetime
        self.tile_x, self.tile_y = self.viewport.pixel_grid(self.size, self.size, self.step)
        n_rows, n_cols = self.tile_x.shape
        pixels = np.arange(self.size)
        # Pixel p belongs to the tile whose center k*step is nearest below p + step/2
        self._row_index = np.minimum(((pixels + self.step / 2.0) // self.step).astype(int), n_rows - 1)
        self._col_index = np.minimum(((pixels + self.step / 2.0) // self.step).astype(int), n_cols - 1)

        # Overlay blend factors
        self.shadow_alpha = constants.SHADOW_RGBA[3] / 255.0
        self.shadow_rgb = np.array(constants.SHADOW_RGBA[:3], dtype=float)

        # Frame cache lives on the instance, so a discarded renderer can be collected
        self._render_cached = functools.lru_cache(maxsize=32)(self._render_frame)

    def classify_frame(self, sun):
        """
        Tile states for the whole grid.

        Returns:
            (rows, cols) array of TileState values
        """
        return self.illumination.classify_grid(sun, self.tile_x, self.tile_y)

    def shadow_pixels(self, sun):
        """
        Per-pixel overlay mask, expanding each tile to the pixels it covers.

        Returns:
            (size, size) boolean array
        """
        tile_mask = self.illumination.shadow_mask(sun, self.tile_x, self.tile_y)
        return tile_mask[self._row_index][:, self._col_index]

    def _render_frame(self, sun_lat, sun_lon, draw_marker):
        """
        Render call behind the frame cache; arguments are hashable.
        """
        logger.debug("Rendering frame for sun at (%.4f, %.4f)", sun_lat, sun_lon)
        sun = GeoPoint(sun_lat, sun_lon)

        # 1. World map
        img = self.base_image.astype(float)

        # 2. Night overlay
        mask = self.shadow_pixels(sun)
        img[mask] = img[mask] * (1.0 - self.shadow_alpha) + self.shadow_rgb * self.shadow_alpha

        frame = PIL.Image.fromarray(np.clip(img, 0, 255).astype(np.uint8))

        # 3. Marker where the sun is directly overhead
        if draw_marker:
            mx, my = self.viewport.geo_to_pixel(sun)
            r = constants.SUN_MARKER_RADIUS_PX
            draw = PIL.ImageDraw.Draw(frame)
            draw.ellipse([mx - r, my - r, mx + r, my + r], fill=constants.SUN_MARKER_RGB)

        return np.asarray(frame)

    def render(self, sun=None, state=None, draw_marker=True):
        """
        Render one frame of the flat Earth.

        The sun position comes from `sun`, else from `state`, else the default.

        Returns:
            (size, size, 3) uint8 array
        """
        if sun is None:
            sun = state.sun if state is not None else FrameState.initial().sun
        return self._render_cached(float(sun.lat), float(sun.lon), bool(draw_marker))

    def render_image(self, sun=None, state=None, draw_marker=True):
        return PIL.Image.fromarray(self.render(sun, state, draw_marker))

    def save(self, path, sun=None, state=None, draw_marker=True):
        self.render_image(sun, state, draw_marker).save(path)
        logger.info("Saved frame to %s", path)
