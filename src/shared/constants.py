"""Dataset and runtime constants for GLOBE elevation lookups."""

from __future__ import annotations

from pathlib import Path

# --- Dataset ---
# Reserved cell value for "no data" (ocean, unmapped terrain)
NO_DATA_SENTINEL = -500

# Raster cell type: little-endian signed 16-bit, row-major, no header
ELEVATION_DTYPE = '<i2'

# Maximum number of tiles a sampling region may span along one axis
MAX_TILE_SPAN = 2

# --- Geodesy ---
# Spherical Earth radius used for metre -> degree conversion (km)
EARTH_RADIUS_KM = 6378.137

# Half-ranges for coordinate wrapping (degrees)
LAT_WRAP_BOUND = 90.0
LNG_WRAP_BOUND = 180.0

# --- Runtime defaults ---
DEFAULT_DATA_DIR = Path('data')
DEFAULT_OUTPUT_PATH = Path('output.json')
DEFAULT_APOTHEM_M = 0.0
DEFAULT_WORKERS = 1
DEFAULT_LOG_LEVEL = 'INFO'

# Key of the coordinate list in the input document
COORDINATES_KEY = 'customCoordinates'

# Progress bar length (characters)
PROGRESS_BAR_LEN = 20

# Log memory usage every N processed coordinates in a batch
BATCH_LOG_MEMORY_EVERY = 10_000

# Availability flags for optional libs
PSUTIL_AVAILABLE = True
