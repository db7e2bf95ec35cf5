import argparse
import logging
import os
import sys
import time

import numpy as np
import PIL

from flat_earth_renders import constants
from flat_earth_renders.geo import GeoPoint, PlanarPoint, from_planar, spherical_distance, to_planar
from flat_earth_renders.illumination import IlluminationModel, TileState
from flat_earth_renders.rendering import MapRenderer
from flat_earth_renders.ui import CSS, create_ui

logger = logging.getLogger(__name__)


def generate_samples(renderer, output_dir="output"):
    """Render one frame for each named sun position."""
    print(f"\n--- Generating Samples ({renderer.size}x{renderer.size}) ---")
    os.makedirs(output_dir, exist_ok=True)

    for name, lat, lon, filename in constants.SAMPLE_SUNS:
        print(f"Rendering {name}...")
        t0 = time.time()
        renderer.save(os.path.join(output_dir, filename), sun=GeoPoint(lat, lon))
        print(f"  Complete in {time.time() - t0:.2f}s")


def run_geometric_verification(renderer):
    """
    Run geometric consistency checks.

    Returns:
        bool: True if every check passed
    """
    print("\n--- Geometric Verification ---")
    checks = []

    quarter = spherical_distance(GeoPoint(0.0, 0.0), GeoPoint(0.0, 90.0))
    expected = np.pi / 2.0 * constants.EARTH_RADIUS_KM
    checks.append(("Quarter great circle", f"{quarter:.3f} km (target {expected:.3f} km)",
                   abs(quarter - expected) < 1e-6))

    lats = np.linspace(-90.0, 89.0, 37)
    lons = np.linspace(-179.0, 180.0, 37)
    worst = 0.0
    for lat in lats:
        for lon in lons:
            g = from_planar(to_planar(GeoPoint(lat, lon)))
            d_lon = (g.lon - lon + 180.0) % 360.0 - 180.0
            worst = max(worst, abs(g.lat - lat), abs(d_lon))
    checks.append(("Round-trip error", f"{worst:.2e} deg", worst < 1e-9))

    edge = max(abs(to_planar(GeoPoint(-90.0, lon)).radius - 1.0) for lon in lons)
    checks.append(("South pole on unit circle", f"max |r - 1| = {edge:.2e}", edge < 1e-12))

    pole = max(to_planar(GeoPoint(90.0, lon)).radius for lon in lons)
    checks.append(("North pole at origin", f"max r = {pole:.2e}", pole == 0.0))

    model = renderer.illumination
    sun = GeoPoint(0.0, 0.0)
    polarity = (model.classify_geo(sun, GeoPoint(0.0, 90.0)) is TileState.LIT and
                model.classify_geo(sun, GeoPoint(0.0, 91.0)) is TileState.SHADOWED and
                model.classify(sun, PlanarPoint(1.5, 0.0)) is TileState.OUTSIDE_MAP)
    checks.append(("Terminator polarity", f"threshold {model.threshold_km:.2f} km", polarity))

    lit = model.lit_fraction(sun, renderer.tile_x, renderer.tile_y)
    checks.append(("Lit share (sun at 0,0)", f"{lit * 100:.1f}% of map tiles", 0.0 < lit < 1.0))

    for name, detail, ok in checks:
        print(f"[{'OK' if ok else 'FAIL'}] {name}: {detail}")
    return all(ok for _, _, ok in checks)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Flat Earth Renderer CLI")
    parser.add_argument("--ui", action="store_true", help="Launch the interactive Gradio UI")
    parser.add_argument("--samples", action="store_true", help="Render sample frames for named sun positions")
    parser.add_argument("--verify", action="store_true", help="Run geometric consistency checks")
    parser.add_argument("--render", metavar="PATH", help="Render a single frame to PATH")
    parser.add_argument("--lat", type=float, default=constants.DEFAULT_SUN_LAT, help="Sun latitude for --render")
    parser.add_argument("--lon", type=float, default=constants.DEFAULT_SUN_LON,
                        help="Sun longitude for --render (positive west)")
    parser.add_argument("--map", dest="map_path", help="World map image in the azimuthal projection")
    parser.add_argument("--size", type=int, default=constants.DEFAULT_IMAGE_SIZE_PX, help="Render size in pixels")
    parser.add_argument("--step", type=int, default=constants.DEFAULT_TILE_STEP_PX, help="Illumination tile size")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s")

    try:
        if args.ui:
            demo = create_ui(map_path=args.map_path, size_px=args.size, step=args.step)
        else:
            renderer = MapRenderer(size_px=args.size, map_path=args.map_path, step=args.step,
                                   illumination=IlluminationModel())
    except (OSError, PIL.UnidentifiedImageError) as e:
        logger.error("Can't load map %s: %s", args.map_path, e)
        return 1

    if args.ui:
        print("Launching UI...")
        demo.launch(css=CSS)
    elif args.samples:
        generate_samples(renderer)
    elif args.verify:
        return 0 if run_geometric_verification(renderer) else 1
    elif args.render:
        renderer.save(args.render, sun=GeoPoint(args.lat, args.lon))
        print(f"Render complete: {args.render}")
    else:
        parser.print_help()
    return 0


def run_ui():
    """Entry point for flat-earth-ui command."""
    sys.exit(main(["--ui"] + sys.argv[1:]))


def run_verify():
    """Entry point for flat-earth-verify command."""
    sys.exit(main(["--verify"] + sys.argv[1:]))


def run_samples():
    """Entry point for flat-earth-samples command."""
    sys.exit(main(["--samples"] + sys.argv[1:]))


if __name__ == "__main__":
    sys.exit(main())
