"""Tests for the GLOBE tile catalog."""

from dataclasses import replace

import pytest

from domain.errors import ConfigurationError
from domain.models import GeoPoint
from geo.catalog import GLOBE_CATALOG, GLOBE_TILES, TileCatalog, find_tile, validate_catalog


class TestGlobeTiles:
    """Static descriptor table."""

    def test_sixteen_tiles_in_4x4_grid(self):
        assert len(GLOBE_CATALOG) == 16
        assert GLOBE_CATALOG.grid_columns == 4
        assert GLOBE_CATALOG.grid_rows == 4

    def test_ids_run_a_to_p(self):
        assert [t.id for t in GLOBE_TILES] == [f'{c}10g' for c in 'abcdefghijklmnop']

    def test_polar_and_equatorial_sizes(self):
        for tile in GLOBE_TILES:
            assert tile.cols == 10800
            if tile.grid_y in (0, 3):
                assert tile.rows == 4800
            else:
                assert tile.rows == 6000

    def test_lookup_by_id_and_grid(self):
        assert GLOBE_CATALOG['g10g'].grid_x == 2
        assert GLOBE_CATALOG.at_grid(3, 1).id == 'h10g'


class TestFindTile:
    """Point to tile resolution."""

    def test_every_sampled_point_has_exactly_one_tile(self):
        lats = [lat + frac for lat in range(-90, 90, 10) for frac in (0.0, 0.25, 9.999)]
        lngs = [lng + frac for lng in range(-180, 180, 15) for frac in (0.0, 0.5, 14.999)]
        for lat in lats:
            for lng in lngs:
                point = GeoPoint(lat=lat, lng=lng)
                owners = [t for t in GLOBE_TILES if t.contains(point)]
                assert len(owners) == 1, (lat, lng, [t.id for t in owners])

    def test_shared_edges_belong_to_northern_and_eastern_tile(self):
        assert find_tile(GeoPoint(lat=50.0, lng=-90.0)).id == 'b10g'
        assert find_tile(GeoPoint(lat=0.0, lng=0.0)).id == 'g10g'
        assert find_tile(GeoPoint(lat=-90.0, lng=-180.0)).id == 'm10g'

    def test_a10g_corners(self):
        assert find_tile(GeoPoint(lat=89.99, lng=-179.99)).id == 'a10g'
        assert find_tile(GeoPoint(lat=50.0, lng=-90.01)).id == 'a10g'

    def test_upper_bounds_are_exclusive(self):
        assert find_tile(GeoPoint(lat=90.0, lng=0.0)) is None
        assert find_tile(GeoPoint(lat=0.0, lng=180.0)) is None

    def test_out_of_range_and_nan(self):
        assert find_tile(GeoPoint(lat=91.0, lng=0.0)) is None
        assert find_tile(GeoPoint(lat=float('nan'), lng=0.0)) is None


class TestValidateCatalog:
    """Partition checks."""

    def test_globe_catalog_is_valid(self):
        assert validate_catalog(GLOBE_TILES) == (4, 4)

    def test_empty(self):
        with pytest.raises(ConfigurationError, match='empty'):
            TileCatalog([])

    def test_duplicate_id(self):
        tiles = list(GLOBE_TILES)
        tiles[1] = replace(tiles[1], id='a10g')
        with pytest.raises(ConfigurationError, match='duplicate'):
            validate_catalog(tiles)

    def test_overlapping_grid_position(self):
        tiles = list(GLOBE_TILES)
        tiles[1] = replace(tiles[1], grid_x=0)
        with pytest.raises(ConfigurationError):
            validate_catalog(tiles)

    def test_misaligned_column(self):
        tiles = list(GLOBE_TILES)
        tiles[4] = replace(tiles[4], east=-91)
        with pytest.raises(ConfigurationError, match='line up'):
            validate_catalog(tiles)

    def test_gap_between_columns(self):
        tiles = [replace(t, west=-89) if t.grid_x == 1 else t for t in GLOBE_TILES]
        with pytest.raises(ConfigurationError, match='contiguous'):
            validate_catalog(tiles)

    def test_missing_tile(self):
        with pytest.raises(ConfigurationError, match='expected 16'):
            validate_catalog(GLOBE_TILES[:-1])

    def test_not_covering_the_globe(self):
        tiles = [replace(t, south=-80) if t.grid_y == 3 else t for t in GLOBE_TILES]
        with pytest.raises(ConfigurationError, match='latitude'):
            validate_catalog(tiles)

    def test_degenerate_box(self):
        tiles = list(GLOBE_TILES)
        tiles[0] = replace(tiles[0], south=90)
        with pytest.raises(ConfigurationError, match='degenerate'):
            validate_catalog(tiles)
