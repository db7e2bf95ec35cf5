"""
Pytest fixtures and configuration for Flat Earth Renderer tests.

This module provides shared fixtures and utilities to reduce test code duplication
and improve test organization.
"""

import numpy as np
import PIL.Image
import pytest
from flat_earth_renders.geo import GeoPoint
from flat_earth_renders.illumination import IlluminationModel
from flat_earth_renders.rendering import MapRenderer
from flat_earth_renders.viewport import DiskViewport


@pytest.fixture
def renderer():
    """Small renderer without a world map image."""
    return MapRenderer(size_px=100)


@pytest.fixture
def viewport():
    """Default 800px viewport: center (400, 400), radius 400."""
    return DiskViewport.for_size(800)


@pytest.fixture
def model():
    return IlluminationModel()


@pytest.fixture
def named_points():
    """Common GeoPoints used in multiple tests (longitude positive west)."""
    return {
        'north_pole': GeoPoint(90.0, 0.0),
        'south_pole': GeoPoint(-90.0, 0.0),
        'greenwich_equator': GeoPoint(0.0, 0.0),
        'quarter_west': GeoPoint(0.0, 90.0),
        'washington': GeoPoint(47.7511, 120.7401),
        'sydney': GeoPoint(-33.8688, -151.2093),
    }


@pytest.fixture
def map_file(tmp_path):
    """A tiny checkerboard image standing in for the world map asset."""
    data = np.zeros((64, 64, 3), dtype=np.uint8)
    data[::2, ::2] = [200, 180, 120]
    data[1::2, 1::2] = [200, 180, 120]
    data[(data == 0).all(axis=2)] = [30, 90, 160]
    path = tmp_path / "map.png"
    PIL.Image.fromarray(data).save(path)
    return path


def assert_geo_close(actual, expected, atol=1e-9, err_msg=""):
    """Assert two GeoPoints match, comparing longitude modulo 360."""
    d_lon = (actual.lon - expected.lon + 180.0) % 360.0 - 180.0
    assert abs(actual.lat - expected.lat) <= atol, f"Latitude mismatch {actual} vs {expected} - {err_msg}"
    assert abs(d_lon) <= atol, f"Longitude mismatch {actual} vs {expected} - {err_msg}"
