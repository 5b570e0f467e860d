"""Pytest configuration and fixtures for GLOBE elevation tests."""

import sys
from dataclasses import replace
from pathlib import Path

import numpy as np
import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from elevation.query import ElevationQuery  # noqa: E402
from geo.catalog import GLOBE_TILES, TileCatalog  # noqa: E402
from tiles.store import TileStore  # noqa: E402

# Same bounds as the real dataset, one cell per degree
SMALL_TILES = tuple(
    replace(t, cols=int(t.east - t.west), rows=int(t.north - t.south)) for t in GLOBE_TILES
)


def tile_value(tile) -> int:
    """Constant fill used for ``tile`` by the default fixtures."""
    return 100 * (tile.grid_y * 4 + tile.grid_x + 1)


def write_grid(directory: Path, tile, grid: np.ndarray) -> Path:
    path = directory / tile.id
    np.asarray(grid, dtype='<i2').reshape(-1).tofile(path)
    return path


@pytest.fixture
def small_catalog():
    return TileCatalog(SMALL_TILES)


@pytest.fixture
def tile_grids():
    """{tile_id: 2-D grid} written to ``tile_dir``; rewrite with write_grid after edits."""
    return {t.id: np.full((t.rows, t.cols), tile_value(t), dtype=np.int16) for t in SMALL_TILES}


@pytest.fixture
def tile_dir(tmp_path, tile_grids):
    directory = tmp_path / 'data'
    directory.mkdir()
    for tile in SMALL_TILES:
        write_grid(directory, tile, tile_grids[tile.id])
    return directory


@pytest.fixture
def store(tile_dir):
    s = TileStore(tile_dir)
    yield s
    s.clear()


@pytest.fixture
def query(store, small_catalog):
    return ElevationQuery(store, small_catalog)
