"""Static catalog of the GLOBE 30" elevation tiles.

Sixteen tiles (``a10g`` .. ``p10g``) form an exact 4x4 partition of the
globe. Each tile covers 90 degrees of longitude; the polar rows cover 40
degrees of latitude and the equatorial rows 50.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence

from domain.errors import ConfigurationError
from domain.models import GeoPoint, Tile
from shared.constants import LAT_WRAP_BOUND, LNG_WRAP_BOUND

logger = logging.getLogger(__name__)


GLOBE_TILES: tuple[Tile, ...] = (
    Tile('a10g', cols=10800, rows=4800, grid_x=0, grid_y=0, elevation_min=1, elevation_max=6098,
         north=90, south=50, west=-180, east=-90),
    Tile('b10g', cols=10800, rows=4800, grid_x=1, grid_y=0, elevation_min=1, elevation_max=3940,
         north=90, south=50, west=-90, east=0),
    Tile('c10g', cols=10800, rows=4800, grid_x=2, grid_y=0, elevation_min=-30, elevation_max=4010,
         north=90, south=50, west=0, east=90),
    Tile('d10g', cols=10800, rows=4800, grid_x=3, grid_y=0, elevation_min=1, elevation_max=4588,
         north=90, south=50, west=90, east=180),
    Tile('e10g', cols=10800, rows=6000, grid_x=0, grid_y=1, elevation_min=-84, elevation_max=5443,
         north=50, south=0, west=-180, east=-90),
    Tile('f10g', cols=10800, rows=6000, grid_x=1, grid_y=1, elevation_min=-40, elevation_max=6085,
         north=50, south=0, west=-90, east=0),
    Tile('g10g', cols=10800, rows=6000, grid_x=2, grid_y=1, elevation_min=-407, elevation_max=8752,
         north=50, south=0, west=0, east=90),
    Tile('h10g', cols=10800, rows=6000, grid_x=3, grid_y=1, elevation_min=-63, elevation_max=7491,
         north=50, south=0, west=90, east=180),
    Tile('i10g', cols=10800, rows=6000, grid_x=0, grid_y=2, elevation_min=1, elevation_max=2732,
         north=0, south=-50, west=-180, east=-90),
    Tile('j10g', cols=10800, rows=6000, grid_x=1, grid_y=2, elevation_min=-127, elevation_max=6798,
         north=0, south=-50, west=-90, east=0),
    Tile('k10g', cols=10800, rows=6000, grid_x=2, grid_y=2, elevation_min=1, elevation_max=5825,
         north=0, south=-50, west=0, east=90),
    Tile('l10g', cols=10800, rows=6000, grid_x=3, grid_y=2, elevation_min=1, elevation_max=5179,
         north=0, south=-50, west=90, east=180),
    Tile('m10g', cols=10800, rows=4800, grid_x=0, grid_y=3, elevation_min=1, elevation_max=4009,
         north=-50, south=-90, west=-180, east=-90),
    Tile('n10g', cols=10800, rows=4800, grid_x=1, grid_y=3, elevation_min=1, elevation_max=4743,
         north=-50, south=-90, west=-90, east=0),
    Tile('o10g', cols=10800, rows=4800, grid_x=2, grid_y=3, elevation_min=1, elevation_max=4039,
         north=-50, south=-90, west=0, east=90),
    Tile('p10g', cols=10800, rows=4800, grid_x=3, grid_y=3, elevation_min=1, elevation_max=4363,
         north=-50, south=-90, west=90, east=180),
)


class TileCatalog:
    """Immutable set of tiles partitioning the globe.

    The constructor validates the partition and raises
    :class:`ConfigurationError` when it has gaps or overlaps.

    Usage:
        catalog = TileCatalog(GLOBE_TILES)
        tile = catalog.find_tile(GeoPoint(lat=47.0, lng=8.0))
    """

    def __init__(self, tiles: Iterable[Tile]) -> None:
        self._tiles: tuple[Tile, ...] = tuple(tiles)
        self.grid_columns, self.grid_rows = validate_catalog(self._tiles)
        self._by_id = {t.id: t for t in self._tiles}
        self._by_grid = {(t.grid_x, t.grid_y): t for t in self._tiles}

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def __len__(self) -> int:
        return len(self._tiles)

    def __getitem__(self, tile_id: str) -> Tile:
        return self._by_id[tile_id]

    def find_tile(self, point: GeoPoint) -> Tile | None:
        """Tile whose half-open bounds contain ``point``, or None."""
        for tile in self._tiles:
            if tile.contains(point):
                return tile
        return None

    def at_grid(self, grid_x: int, grid_y: int) -> Tile:
        return self._by_grid[(grid_x, grid_y)]


def _check_axis(
    edges: Sequence[tuple[float, float]], start: float, end: float, axis: str
) -> None:
    """Edges must be contiguous from ``start`` to ``end`` in order."""
    expected = start
    for lo, hi in edges:
        if lo != expected:
            msg = f'catalog {axis} bands are not contiguous at {expected} (next band starts at {lo})'
            raise ConfigurationError(msg)
        expected = hi
    if expected != end:
        msg = f'catalog {axis} bands end at {expected}, expected {end}'
        raise ConfigurationError(msg)


def validate_catalog(tiles: Sequence[Tile]) -> tuple[int, int]:
    """
    Check that ``tiles`` form a gap-free, non-overlapping grid over the globe.

    Tiles sharing a ``grid_x`` must share west/east bounds, tiles sharing a
    ``grid_y`` must share north/south bounds, every grid position must be
    filled exactly once, and the bands must run from -180 to 180 (west to
    east) and from 90 to -90 (north to south).

    Returns:
        (grid_columns, grid_rows) of the arrangement.

    Raises:
        ConfigurationError: on any violation.
    """
    if not tiles:
        msg = 'tile catalog is empty'
        raise ConfigurationError(msg)

    seen_ids: set[str] = set()
    columns: dict[int, tuple[float, float]] = {}
    bands: dict[int, tuple[float, float]] = {}
    positions: set[tuple[int, int]] = set()

    for tile in tiles:
        if tile.id in seen_ids:
            msg = f'duplicate tile id {tile.id!r}'
            raise ConfigurationError(msg)
        seen_ids.add(tile.id)
        if tile.cols <= 0 or tile.rows <= 0:
            msg = f'tile {tile.id} has an empty grid ({tile.cols}x{tile.rows})'
            raise ConfigurationError(msg)
        if not (tile.north > tile.south and tile.east > tile.west):
            msg = f'tile {tile.id} has a degenerate bounding box'
            raise ConfigurationError(msg)
        pos = (tile.grid_x, tile.grid_y)
        if pos in positions:
            msg = f'tile {tile.id} overlaps another tile at grid position {pos}'
            raise ConfigurationError(msg)
        positions.add(pos)

        lng_edges = (tile.west, tile.east)
        if columns.setdefault(tile.grid_x, lng_edges) != lng_edges:
            msg = f'tile {tile.id} does not line up with grid column {tile.grid_x}'
            raise ConfigurationError(msg)
        lat_edges = (tile.north, tile.south)
        if bands.setdefault(tile.grid_y, lat_edges) != lat_edges:
            msg = f'tile {tile.id} does not line up with grid row {tile.grid_y}'
            raise ConfigurationError(msg)

    grid_columns, grid_rows = len(columns), len(bands)
    if sorted(columns) != list(range(grid_columns)) or sorted(bands) != list(range(grid_rows)):
        msg = 'tile grid positions must be numbered from 0 without holes'
        raise ConfigurationError(msg)
    if len(positions) != grid_columns * grid_rows:
        msg = (
            f'catalog has {len(positions)} tiles, '
            f'expected {grid_columns * grid_rows} for a {grid_columns}x{grid_rows} grid'
        )
        raise ConfigurationError(msg)

    _check_axis([columns[x] for x in range(grid_columns)], -LNG_WRAP_BOUND, LNG_WRAP_BOUND, 'longitude')
    # latitude bands run north to south: compare negated edges
    _check_axis(
        [(-bands[y][0], -bands[y][1]) for y in range(grid_rows)],
        -LAT_WRAP_BOUND,
        LAT_WRAP_BOUND,
        'latitude',
    )
    logger.debug('Tile catalog validated: %d tiles in a %dx%d grid', len(tiles), grid_columns, grid_rows)
    return grid_columns, grid_rows


GLOBE_CATALOG = TileCatalog(GLOBE_TILES)


def find_tile(point: GeoPoint) -> Tile | None:
    """Look ``point`` up in the GLOBE catalog."""
    return GLOBE_CATALOG.find_tile(point)
