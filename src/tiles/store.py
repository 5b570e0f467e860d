"""Load-once in-memory store for decoded tile grids.

Grids are read from raw tile files on first access and kept for the lifetime
of the store. There is no eviction: the whole dataset fits in memory (or is
memory-mapped).
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from domain.errors import ConfigurationError
from shared.constants import DEFAULT_DATA_DIR, ELEVATION_DTYPE, NO_DATA_SENTINEL
from shared.diagnostics import log_memory_usage

if TYPE_CHECKING:
    from domain.models import Tile

logger = logging.getLogger(__name__)

TileLoader = Callable[[Path, 'Tile'], np.ndarray]


def load_tile_file(path: Path, tile: Tile, *, memory_map: bool = False) -> np.ndarray:
    """
    Decode a raw tile file into a flat, read-only int16 grid.

    The file must hold exactly ``cols * rows`` little-endian signed 16-bit
    values in row-major order (row 0 = northernmost), with no header.

    Args:
        path: Tile file.
        tile: Descriptor the file must match.
        memory_map: Map the file instead of reading it into memory.

    Returns:
        1-D array of length ``tile.cols * tile.rows``.

    Raises:
        ConfigurationError: file missing, unreadable, truncated or oversized.
    """
    if not path.is_file():
        msg = f'Tile file for {tile.id} not found: {path}'
        raise ConfigurationError(msg)

    itemsize = np.dtype(ELEVATION_DTYPE).itemsize
    expected = tile.cell_count * itemsize
    try:
        size = path.stat().st_size
        if size != expected:
            kind = 'truncated' if size < expected else 'oversized'
            msg = f'Tile file {path} is {kind}: {size} bytes, expected {expected}'
            raise ConfigurationError(msg)
        if memory_map:
            grid = np.memmap(path, dtype=ELEVATION_DTYPE, mode='r', shape=(tile.cell_count,))
        else:
            grid = np.fromfile(path, dtype=ELEVATION_DTYPE)
            grid.flags.writeable = False
    except OSError as e:
        msg = f'Failed to read tile file {path}: {e}'
        raise ConfigurationError(msg) from e
    return grid


class TileStore:
    """Process-wide cache of tile grids keyed by tile id.

    Each tile is loaded at most once. Concurrent first-time requests for the
    same tile wait on a per-tile lock, so exactly one load happens and every
    caller receives the same array. Different tiles load in parallel.

    Usage:
        store = TileStore(Path('data'))
        grid = store.ensure_loaded(tile)
        value = grid[row * tile.cols + col]
    """

    def __init__(
        self,
        data_dir: str | Path | None = None,
        *,
        loader: TileLoader | None = None,
        memory_map: bool = False,
        nodata_value: int = NO_DATA_SENTINEL,
    ) -> None:
        """Initialize tile store.

        Args:
            data_dir: Directory with one file per tile, named by tile id.
            loader: Custom ``(path, tile) -> grid`` decoder. Defaults to
                :func:`load_tile_file`.
            memory_map: Passed to the default loader.
            nodata_value: Cell value treated as "no data" by consumers.
        """
        self.data_dir = Path(data_dir or DEFAULT_DATA_DIR)
        self.memory_map = bool(memory_map)
        self.nodata_value = int(nodata_value)
        self._loader = loader
        self._grids: dict[str, np.ndarray] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self.load_count = 0

    def tile_path(self, tile: Tile) -> Path:
        return self.data_dir / tile.id

    def _tile_lock(self, tile_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(tile_id)
            if lock is None:
                lock = self._locks[tile_id] = threading.Lock()
            return lock

    def _load(self, tile: Tile) -> np.ndarray:
        path = self.tile_path(tile)
        t0 = time.perf_counter()
        if self._loader is not None:
            grid = self._loader(path, tile)
        else:
            grid = load_tile_file(path, tile, memory_map=self.memory_map)
        grid = np.asanyarray(grid).reshape(-1)
        if grid.shape[0] != tile.cell_count:
            msg = f'Tile {tile.id} decoded to {grid.shape[0]} cells, expected {tile.cell_count}'
            raise ConfigurationError(msg)
        with self._registry_lock:
            self.load_count += 1
        logger.info(
            'Loaded tile %s (%dx%d) from %s in %.2fs',
            tile.id,
            tile.cols,
            tile.rows,
            path,
            time.perf_counter() - t0,
        )
        log_memory_usage(f'after tile {tile.id}')
        return grid

    def ensure_loaded(self, tile: Tile) -> np.ndarray:
        """Return the tile's grid, loading it on first use (may block on I/O).

        Raises:
            ConfigurationError: tile data missing or malformed. Nothing is
                cached on failure.
        """
        grid = self._grids.get(tile.id)
        if grid is not None:
            return grid
        with self._tile_lock(tile.id):
            grid = self._grids.get(tile.id)
            if grid is None:
                grid = self._load(tile)
                self._grids[tile.id] = grid
        return grid

    def get(self, tile: Tile) -> np.ndarray | None:
        """Cached grid or None; never loads."""
        return self._grids.get(tile.id)

    def is_loaded(self, tile: Tile) -> bool:
        return tile.id in self._grids

    def loaded_ids(self) -> list[str]:
        return sorted(self._grids)

    def preload(self, tiles: Iterable[Tile]) -> None:
        for tile in tiles:
            self.ensure_loaded(tile)

    def clear(self) -> None:
        """Drop every cached grid (tests and teardown)."""
        with self._registry_lock:
            self._grids.clear()
            self._locks.clear()
