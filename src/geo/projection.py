"""Projection of geographic coordinates onto a tile's cell grid.

Cells are addressed by nearest-integer projection (round half up), which
matches the dataset's cell-center convention. No clamping happens here:
callers must make sure the point belongs to the tile.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.models import GeoPoint, Tile


def round_half_up(value: float) -> int:
    """Nearest integer with ties rounded toward +inf (unlike built-in round)."""
    return math.floor(value + 0.5)


def relative_pos(target: float, start: float, end: float, cells: int) -> int:
    """Index of the cell nearest to ``target`` on a ``start``→``end`` axis."""
    fraction = (target - start) / (end - start)
    return round_half_up(cells * fraction)


def get_col(lng: float, tile: Tile) -> int:
    return relative_pos(lng, tile.west, tile.east, tile.cols)


def get_row(lat: float, tile: Tile) -> int:
    # row 0 is the northernmost row of the tile
    return relative_pos(lat, tile.north, tile.south, tile.rows)


def project(point: GeoPoint, tile: Tile) -> tuple[int, int]:
    """Return ``(row, col)`` of ``point`` within ``tile``."""
    return get_row(point.lat, tile), get_col(point.lng, tile)


def clamp_cell(row: int, col: int, tile: Tile) -> tuple[int, int]:
    """Pull an edge projection (row == rows or col == cols) back onto the grid."""
    return min(max(row, 0), tile.rows - 1), min(max(col, 0), tile.cols - 1)


def grid_index(row: int, col: int, tile: Tile) -> int:
    """Row-major index of a cell in the tile's flat grid."""
    return row * tile.cols + col
