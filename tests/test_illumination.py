import numpy as np
import pytest
from flat_earth_renders import constants
from flat_earth_renders.geo import GeoPoint, PlanarPoint, spherical_distance, to_planar
from flat_earth_renders.illumination import IlluminationModel, TileState, classify_tile


def test_default_threshold_is_quarter_circumference(model):
    assert model.threshold_km == pytest.approx(40075.0 / 4.0)
    assert model.threshold_km == pytest.approx(10018.75)


def test_classifier_polarity_near_threshold(model):
    """
    Sun at (0, 0): a tile at (0, 90) is ~10007.5 km away, just inside the
    terminator, so it is lit. A tile at (0, 91) is just outside: shadowed.
    """
    sun = GeoPoint(0.0, 0.0)

    assert model.classify_geo(sun, GeoPoint(0.0, 90.0)) is TileState.LIT
    assert model.classify_geo(sun, GeoPoint(0.0, 91.0)) is TileState.SHADOWED

    # Same decision through the planar entry point
    assert model.classify(sun, to_planar(GeoPoint(0.0, 90.0))) is TileState.LIT
    assert model.classify(sun, to_planar(GeoPoint(0.0, 91.0))) is TileState.SHADOWED


def test_distance_equal_to_threshold_is_shadowed():
    sun = GeoPoint(0.0, 0.0)
    tile = GeoPoint(0.0, 45.0)
    model = IlluminationModel(threshold_km=spherical_distance(sun, tile))
    assert model.classify_geo(sun, tile) is TileState.SHADOWED


def test_sub_solar_tile_is_lit(model, named_points):
    sun = named_points['washington']
    assert model.classify(sun, to_planar(sun)) is TileState.LIT


@pytest.mark.parametrize(
    "sun",
    [GeoPoint(0.0, 0.0), GeoPoint(90.0, 0.0), GeoPoint(-90.0, 45.0), GeoPoint(-60.0, -120.0)],
)
@pytest.mark.parametrize("angle", [0.0, 1.0, 2.5, 4.0])
def test_outside_disk_is_outside_map_regardless_of_sun(model, sun, angle):
    tile = PlanarPoint(1.5 * np.cos(angle), 1.5 * np.sin(angle))
    assert model.classify(sun, tile) is TileState.OUTSIDE_MAP


def test_module_level_classifier(named_points):
    sun = named_points['greenwich_equator']
    assert classify_tile(sun, PlanarPoint(0.0, 0.5)) is TileState.LIT
    # Equator at lon=180, the far side of the globe
    assert classify_tile(sun, PlanarPoint(0.0, -0.5)) is TileState.SHADOWED
    assert classify_tile(sun, PlanarPoint(0.0, 1.5)) is TileState.OUTSIDE_MAP


def test_grid_matches_scalar_classification(model):
    """
    The vectorized classifier must agree with the per-tile classifier.
    Tiles within a hair of the terminator are skipped to keep the test stable.
    """
    sun = GeoPoint(23.44, -30.0)
    coords = np.linspace(-1.2, 1.2, 25)
    x, y = np.meshgrid(coords, coords)

    states = model.classify_grid(sun, x, y)
    assert states.shape == x.shape

    for i in range(x.shape[0]):
        for j in range(x.shape[1]):
            tile = PlanarPoint(x[i, j], y[i, j])
            expected = model.classify(sun, tile)
            geo = GeoPoint.from_planar(tile)
            if geo.is_on_map and abs(spherical_distance(sun, geo) - model.threshold_km) < 1e-6:
                continue
            assert states[i, j] == expected.value, f"Mismatch at ({x[i, j]}, {y[i, j]})"


def test_shadow_mask_is_on_map_and_not_lit(model):
    sun = GeoPoint(0.0, 0.0)
    coords = np.linspace(-1.5, 1.5, 31)
    x, y = np.meshgrid(coords, coords)

    states = model.classify_grid(sun, x, y)
    mask = model.shadow_mask(sun, x, y)

    np.testing.assert_array_equal(mask, states == TileState.SHADOWED.value)
    # Nothing outside the disk is ever shadowed
    assert not np.any(mask[np.hypot(x, y) > 1.0])


def test_lit_fraction(model):
    coords = np.linspace(-1.0, 1.0, 101)
    x, y = np.meshgrid(coords, coords)

    # Sun at the pole lights everything with lat > 0 (radius < 0.5), about a quarter of the disk area
    frac = model.lit_fraction(GeoPoint(90.0, 0.0), x, y)
    assert 0.2 < frac < 0.3

    # No tile on the map at all
    far = np.full((3, 3), 5.0)
    assert model.lit_fraction(GeoPoint(0.0, 0.0), far, far) == 0.0


def test_custom_threshold_changes_boundary():
    sun = GeoPoint(0.0, 0.0)
    tile = GeoPoint(0.0, 60.0)
    assert IlluminationModel().classify_geo(sun, tile) is TileState.LIT
    assert IlluminationModel(threshold_km=5000.0).classify_geo(sun, tile) is TileState.SHADOWED


def test_terminator_is_small_circle_around_sun():
    """Every lit tile is within the threshold of the sun; every shadowed tile is not."""
    model = IlluminationModel()
    sun = GeoPoint(47.7511, 120.7401)
    for lat in np.linspace(-89.0, 89.0, 19):
        for lon in np.linspace(-175.0, 175.0, 15):
            tile = GeoPoint(lat, lon)
            d = spherical_distance(sun, tile)
            state = model.classify_geo(sun, tile)
            if d < constants.TERMINATOR_DISTANCE_KM:
                assert state is TileState.LIT
            else:
                assert state is TileState.SHADOWED


def test_huge_planar_tile_is_outside_map(model):
    sun = GeoPoint(0.0, 0.0)
    assert classify_tile(sun, PlanarPoint(1e307, 0.0)) is TileState.OUTSIDE_MAP
    assert model.classify(sun, PlanarPoint(-1e308, 1e308)) is TileState.OUTSIDE_MAP

    x = np.array([[0.0, 1e307]])
    y = np.array([[0.5, 1e307]])
    states = model.classify_grid(sun, x, y)
    assert states[0, 0] == TileState.LIT.value
    assert states[0, 1] == TileState.OUTSIDE_MAP.value
    assert not model.shadow_mask(sun, x, y)[0, 1]


def test_explicit_zero_overrides_are_kept():
    model = IlluminationModel(threshold_km=0.0, earth_radius_km=0.0)
    assert model.threshold_km == 0.0
    assert model.earth_radius_km == 0.0

    # Nothing is strictly closer than 0 km, not even the sub-solar tile
    sun = GeoPoint(10.0, 20.0)
    assert model.classify_geo(sun, sun) is TileState.SHADOWED
