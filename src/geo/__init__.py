"""Geo module - tile catalog, grid projection and metre offsets."""

from .catalog import GLOBE_CATALOG, GLOBE_TILES, TileCatalog, find_tile, validate_catalog
from .offset import METRE_IN_DEGREES, offset_point, wrap_coordinate
from .projection import get_col, get_row, grid_index, project

__all__ = [
    'GLOBE_CATALOG',
    'GLOBE_TILES',
    'METRE_IN_DEGREES',
    'TileCatalog',
    'find_tile',
    'get_col',
    'get_row',
    'grid_index',
    'offset_point',
    'project',
    'validate_catalog',
    'wrap_coordinate',
]
