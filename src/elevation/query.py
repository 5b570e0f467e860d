"""Elevation lookup façade."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from domain.models import ElevationResult, GeoPoint
from elevation.region import RegionAggregator
from geo.catalog import GLOBE_CATALOG, TileCatalog
from tiles.store import TileStore

if TYPE_CHECKING:
    from domain.models import EnrichmentSettings

logger = logging.getLogger(__name__)


class ElevationQuery:
    """Answers "what is the ground elevation here?" for single points.

    Usage:
        query = ElevationQuery(TileStore('data'))
        result = query.query(GeoPoint(lat=46.5, lng=9.8), apothem=500)
        if result is None:
            ...  # no data (water or unmapped terrain)
    """

    def __init__(
        self,
        store: TileStore,
        catalog: TileCatalog | None = None,
    ) -> None:
        self.store = store
        self.catalog = catalog or GLOBE_CATALOG
        self.aggregator = RegionAggregator(self.catalog, store)

    @classmethod
    def from_settings(cls, settings: EnrichmentSettings) -> ElevationQuery:
        store = TileStore(
            settings.data_dir,
            memory_map=settings.memory_map,
            nodata_value=settings.nodata_value,
        )
        return cls(store)

    def query(self, point: GeoPoint, apothem: float = 0.0) -> ElevationResult | None:
        """
        Elevation statistics at ``point`` over a square of half-width ``apothem``.

        Args:
            point: Geographic point.
            apothem: Half-width of the sampling square in metres; 0 samples the
                single cell under the point.

        Returns:
            ElevationResult, or None when every sampled cell is no-data.

        Raises:
            ValueError: apothem is negative or not finite.
            UnresolvableCoordinate: the point or a region corner is outside
                every tile.
            UnsupportedRegionSpan: the region spans more than 2x2 tiles.
            ConfigurationError: a needed tile file is missing or malformed.
        """
        apothem = float(apothem)
        if not math.isfinite(apothem) or apothem < 0:
            msg = f'apothem must be a finite number >= 0, got {apothem}'
            raise ValueError(msg)
        return self.aggregator.aggregate(point, apothem)

    def elevation_at(self, lat: float, lng: float, apothem: float = 0.0) -> ElevationResult | None:
        return self.query(GeoPoint(lat=lat, lng=lng), apothem)
