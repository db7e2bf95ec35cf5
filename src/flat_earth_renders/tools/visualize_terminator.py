import os

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.animation as animation
from matplotlib.patches import Circle

from flat_earth_renders import constants
from flat_earth_renders.geo import GeoPoint, from_planar_grid, spherical_distance_grid, to_planar, to_planar_grid
from flat_earth_renders.rendering import MapRenderer

# Seasonal sun latitudes swept by the animation (one day each)
TRACK_COLORS = {
    0.0: [1.0, 0.6, 0.0],    # Orange: equinox
    23.44: [1.0, 1.0, 0.2],  # Yellow: June solstice
    -23.44: [1.0, 0.2, 0.2], # Red: December solstice
}


def draw_graticule(ax):
    """Latitude circles every 30 deg and meridians every 30 deg on the unit disk."""
    lons = np.linspace(-180.0, 180.0, 361)
    for lat in range(60, -91, -30):
        x, y = to_planar_grid(np.full(lons.shape, float(lat)), lons)
        ax.plot(x, y, color="0.35", linewidth=0.6)

    lats = np.linspace(90.0, -90.0, 2)
    for lon in range(-180, 180, 30):
        x, y = to_planar_grid(lats, np.full(lats.shape, float(lon)))
        ax.plot(x, y, color="0.35", linewidth=0.6)


def create_visualization(sun_lat=0.0, frames=48, size_px=320, output_path="output/animation_terminator.gif"):
    renderer = MapRenderer(size_px=size_px, step=2)

    fig = plt.figure(figsize=(14, 6))
    ax1 = fig.add_subplot(1, 2, 1) # Disk with terminator
    ax2 = fig.add_subplot(1, 2, 2) # Rendered frame

    # Distance field on a coarse disk grid, reused by every frame
    grid = np.linspace(-1.0, 1.0, 241)
    gx, gy = np.meshgrid(grid, grid)
    g_lat, g_lon = from_planar_grid(gx, gy)
    off_map = g_lat < constants.MIN_MAP_LAT_DEG

    def update(frame):
        # Sun moves westward (positive lon) through one day
        sun_lon = (frame * 360.0 / frames + 180.0) % 360.0 - 180.0
        sun = GeoPoint(sun_lat, sun_lon)

        # View 1: Disk
        ax1.clear()
        ax1.set_title(f"Terminator (sun at {sun_lat:.2f}, {sun_lon:.1f})")
        ax1.set_aspect('equal')
        ax1.set_xlim(-1.1, 1.1)
        ax1.set_ylim(1.1, -1.1) # Screen orientation: +y down

        ax1.add_patch(Circle((0, 0), 1.0, color='steelblue', alpha=0.3))
        draw_graticule(ax1)

        for lat, col in TRACK_COLORS.items():
            lons = np.linspace(-180.0, 180.0, 361)
            tx, ty = to_planar_grid(np.full(lons.shape, lat), lons)
            ax1.plot(tx, ty, color=col, linewidth=1.0, linestyle='--')

        dist = spherical_distance_grid(sun, g_lat, g_lon)
        dist = np.ma.masked_where(off_map, dist)
        ax1.contourf(gx, gy, dist, levels=[constants.TERMINATOR_DISTANCE_KM, dist.max() + 1.0],
                     colors=['black'], alpha=0.5)
        ax1.contour(gx, gy, dist, levels=[constants.TERMINATOR_DISTANCE_KM], colors=['red'])

        p = to_planar(sun)
        ax1.plot(p.x, p.y, 'o', color=np.array(constants.SUN_MARKER_RGB) / 255.0, markersize=10, zorder=10)

        # View 2: Rendered frame
        ax2.clear()
        ax2.set_title("Rendered Frame")
        ax2.axis('off')
        ax2.imshow(renderer.render(sun=sun))

    # Animate
    ani = animation.FuncAnimation(fig, update, frames=frames, interval=100)

    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    print(f"Saving animation to {output_path}...")
    ani.save(output_path, writer='pillow', fps=10)
    print("Done.")


if __name__ == "__main__":
    create_visualization()
