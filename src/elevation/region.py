"""Square-region sampling across up to a 2x2 block of tiles.

A region is the square of half-width ``apothem`` metres around a point. Its
four corners are resolved to tiles and cells; the inclusive cell rectangle
between the top-left and bottom-right corners is then read, continuing
through a tile boundary into the neighbouring tile when the corners
disagree. Spans wider than one boundary crossing per axis are rejected.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from domain.errors import UnresolvableCoordinate, UnsupportedRegionSpan
from domain.models import ElevationResult, GeoPoint, Tile
from geo.offset import METRE_IN_DEGREES, offset_point
from geo.projection import clamp_cell, grid_index, project
from shared.constants import LAT_WRAP_BOUND, LNG_WRAP_BOUND, MAX_TILE_SPAN

if TYPE_CHECKING:
    from geo.catalog import TileCatalog
    from tiles.store import TileStore

logger = logging.getLogger(__name__)

# (lat sign, lng sign): top-left, top-right, bottom-left, bottom-right
CORNER_SIGNS: tuple[tuple[int, int], ...] = ((1, -1), (1, 1), (-1, -1), (-1, 1))


@dataclass(frozen=True)
class Corner:
    """A region corner resolved to its tile and (clamped) cell."""

    point: GeoPoint
    tile: Tile
    row: int
    col: int


@dataclass(frozen=True)
class RegionPlan:
    """Cell rectangle of a region, relative to the top-left corner's tile.

    Column ``i`` in ``[col_start, col_start + col_span]`` belongs to the
    top-left tile while ``i < cols`` of that tile and to the eastern
    neighbour beyond it; rows work the same way southwards.
    """

    corners: tuple[Corner, Corner, Corner, Corner]
    grid_width: int
    grid_height: int
    col_start: int
    row_start: int
    col_span: int
    row_span: int

    @property
    def tiles(self) -> tuple[Tile, Tile, Tile, Tile]:
        return tuple(c.tile for c in self.corners)  # type: ignore[return-value]

    @property
    def cell_count(self) -> int:
        return (self.col_span + 1) * (self.row_span + 1)


def boundaries_crossed(lo: float, hi: float, edges: set[float], period: float) -> int:
    """Count periodic tile edges ``e`` with ``lo < e <= hi`` (unwrapped axis)."""
    count = 0
    for edge in edges:
        count += math.floor((hi - edge) / period) - math.floor((lo - edge) / period)
    return count


def resolve_cell(point: GeoPoint, catalog: TileCatalog) -> tuple[Tile, int, int]:
    """Tile and clamped ``(row, col)`` of ``point``.

    Raises:
        UnresolvableCoordinate: the point is outside every tile.
    """
    tile = catalog.find_tile(point)
    if tile is None:
        raise UnresolvableCoordinate(point.lat, point.lng)
    row, col = clamp_cell(*project(point, tile), tile)
    return tile, row, col


def plan_region(point: GeoPoint, apothem: float, catalog: TileCatalog) -> RegionPlan:
    """
    Resolve the corners of the square around ``point`` and its cell span.

    Args:
        point: Region center.
        apothem: Half-width in metres, > 0.
        catalog: Tiles to resolve corners against.

    Returns:
        RegionPlan for :meth:`RegionAggregator.aggregate`.

    Raises:
        UnresolvableCoordinate: a corner is outside every tile.
        UnsupportedRegionSpan: the region crosses more than one tile
            boundary along an axis.
    """
    corners = []
    for lat_sign, lng_sign in CORNER_SIGNS:
        corner_point = offset_point(point, lat_sign * apothem, lng_sign * apothem)
        tile, row, col = resolve_cell(corner_point, catalog)
        corners.append(Corner(corner_point, tile, row, col))
    top_left, top_right, bottom_left, bottom_right = corners

    d_lat = apothem * METRE_IN_DEGREES
    d_lng = d_lat / math.cos(math.radians(point.lat))
    lng_crossings = boundaries_crossed(
        point.lng - d_lng, point.lng + d_lng, {t.west for t in catalog}, 2 * LNG_WRAP_BOUND
    )
    lat_crossings = boundaries_crossed(
        point.lat - d_lat, point.lat + d_lat, {t.south for t in catalog}, 2 * LAT_WRAP_BOUND
    )
    step_x = (top_right.tile.grid_x - top_left.tile.grid_x) % catalog.grid_columns
    step_y = (bottom_left.tile.grid_y - top_left.tile.grid_y) % catalog.grid_rows
    if (
        lng_crossings >= MAX_TILE_SPAN
        or lat_crossings >= MAX_TILE_SPAN
        or step_x > 1
        or step_y > 1
    ):
        msg = (
            f'only supports regions that cover up to a {MAX_TILE_SPAN}x{MAX_TILE_SPAN} '
            f'grid of tiles (apothem {apothem} m at lat {point.lat}, lng {point.lng})'
        )
        raise UnsupportedRegionSpan(msg)

    grid_width = 2 if top_left.tile.grid_x != top_right.tile.grid_x else 1
    grid_height = 2 if top_left.tile.grid_y != bottom_left.tile.grid_y else 1

    first = top_left.tile
    col_span = bottom_right.col - top_left.col
    row_span = bottom_right.row - top_left.row
    if grid_width > 1:
        col_span = (first.cols - top_left.col) + bottom_right.col
    if grid_height > 1:
        row_span = (first.rows - top_left.row) + bottom_right.row

    return RegionPlan(
        corners=tuple(corners),  # type: ignore[arg-type]
        grid_width=grid_width,
        grid_height=grid_height,
        col_start=top_left.col,
        row_start=top_left.row,
        col_span=col_span,
        row_span=row_span,
    )


def summarize(values: np.ndarray, center: int) -> ElevationResult | None:
    """Mean, population variance, min and max of ``values``; None when empty."""
    if values.size == 0:
        return None
    values = values.astype(np.int64, copy=False)
    count = values.size
    mean = float(values.sum()) / count
    variance = float(np.square(values - mean).sum()) / count
    return ElevationResult(
        center=int(center),
        average=mean,
        min=int(values.min()),
        max=int(values.max()),
        variance=variance,
    )


class RegionAggregator:
    """Elevation statistics over single cells and square regions.

    Grids come from a :class:`TileStore`; cells equal to the store's
    no-data value are left out of every statistic.
    """

    def __init__(self, catalog: TileCatalog, store: TileStore) -> None:
        self.catalog = catalog
        self.store = store

    @property
    def nodata_value(self) -> int:
        return self.store.nodata_value

    def sample(self, tile: Tile, row: int, col: int) -> int:
        grid = self.store.ensure_loaded(tile)
        return int(grid[grid_index(row, col, tile)])

    def center_value(self, point: GeoPoint) -> int:
        """Raw value of the cell under ``point`` (may be the no-data value)."""
        tile, row, col = resolve_cell(point, self.catalog)
        return self.sample(tile, row, col)

    def single_cell(self, point: GeoPoint) -> ElevationResult | None:
        center = self.center_value(point)
        if center == self.nodata_value:
            return None
        return ElevationResult(
            center=center,
            average=float(center),
            min=center,
            max=center,
            variance=0.0,
        )

    def collect(self, plan: RegionPlan) -> np.ndarray:
        """Valid cell values inside ``plan`` (no-data cells dropped)."""
        first = plan.corners[0].tile
        i = np.arange(plan.col_start, plan.col_start + plan.col_span + 1)
        j = np.arange(plan.row_start, plan.row_start + plan.row_span + 1)
        sub_x = (i >= first.cols).astype(np.intp)
        sub_y = (j >= first.rows).astype(np.intp)
        # offset into the neighbouring tile once past the first tile's extent
        local_cols = i - sub_x * first.cols
        local_rows = j - sub_y * first.rows

        blocks: list[np.ndarray] = []
        for gy in (0, 1):
            rows = local_rows[sub_y == gy]
            if rows.size == 0:
                continue
            for gx in (0, 1):
                cols = local_cols[sub_x == gx]
                if cols.size == 0:
                    continue
                tile = plan.tiles[gy * 2 + gx]
                grid = self.store.ensure_loaded(tile).reshape(tile.rows, tile.cols)
                block = grid[np.ix_(rows, cols)].ravel()
                blocks.append(block[block != self.nodata_value])
        if not blocks:
            return np.empty(0, dtype=np.int64)
        return np.concatenate(blocks)

    def aggregate(self, point: GeoPoint, apothem: float) -> ElevationResult | None:
        """
        Statistics for the square of half-width ``apothem`` around ``point``.

        The center value is sampled on its own and is reported even when it
        is the no-data value, as long as some other cell in the region is
        valid.

        Returns:
            ElevationResult, or None when every sampled cell is no-data.
        """
        if apothem == 0:
            return self.single_cell(point)
        center = self.center_value(point)
        plan = plan_region(point, apothem, self.catalog)
        logger.debug(
            'Region at (%s, %s) apothem=%s spans %dx%d tiles, %d cells',
            point.lat,
            point.lng,
            apothem,
            plan.grid_width,
            plan.grid_height,
            plan.cell_count,
        )
        return summarize(self.collect(plan), center)
