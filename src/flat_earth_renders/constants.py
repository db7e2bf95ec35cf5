"""
Physical constants and configuration for the Flat Earth Renderer.
"""

# Earth (spherical model)
EARTH_RADIUS_KM = 6371.0
EARTH_CIRCUMFERENCE_KM = 40075.0

# Day/night boundary: tiles closer than this to the sub-solar point are lit
TERMINATOR_DISTANCE_KM = EARTH_CIRCUMFERENCE_KM / 4.0

# Projection: latitude spans the disk linearly, pole at the center
POLE_LAT_DEG = 90.0
LAT_SPAN_DEG = 180.0
MIN_MAP_LAT_DEG = -90.0

# Default sub-solar point (Washington, positive-west longitude)
DEFAULT_SUN_LAT = 47.7511
DEFAULT_SUN_LON = 120.7401

# Render surface
DEFAULT_IMAGE_SIZE_PX = 800
DEFAULT_TILE_STEP_PX = 1

# Visualization Colors
BACKGROUND_RGB = (0, 0, 0)
DISK_RGB = (40, 70, 110)  # Used when no world map image is supplied
SHADOW_RGBA = (0, 0, 0, 220)
SUN_MARKER_RGB = (220, 220, 30)
SUN_MARKER_RADIUS_PX = 10

# Named sun positions for sample renders (lat, lon)
SAMPLE_SUNS = [
    ("Washington", DEFAULT_SUN_LAT, DEFAULT_SUN_LON, "sample_washington.png"),
    ("Equinox Greenwich", 0.0, 0.0, "sample_equinox_greenwich.png"),
    ("June Solstice", 23.44, 0.0, "sample_june_solstice.png"),
    ("December Solstice", -23.44, 180.0, "sample_december_solstice.png"),
]
