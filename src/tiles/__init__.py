"""Tile storage.

This module provides:
- TileStore: load-once, thread-safe cache of decoded tile grids
- load_tile_file: decoder for raw little-endian int16 tile files
"""

from tiles.store import TileStore, load_tile_file

__all__ = [
    'TileStore',
    'load_tile_file',
]
