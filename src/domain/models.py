from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.constants import (
    COORDINATES_KEY,
    DEFAULT_APOTHEM_M,
    DEFAULT_DATA_DIR,
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_WORKERS,
    NO_DATA_SENTINEL,
)


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """Geographic point in degrees (lat in [-90, 90), lng in [-180, 180))."""

    lat: float
    lng: float


@dataclass(frozen=True)
class Tile:
    """Static descriptor of one raster tile of the global dataset.

    ``grid_x``/``grid_y`` place the tile in the logical arrangement of the
    catalog and are used to detect adjacency between region corners.
    """

    id: str
    cols: int
    rows: int
    grid_x: int
    grid_y: int
    elevation_min: int
    elevation_max: int
    north: float
    south: float
    east: float
    west: float

    @property
    def cell_count(self) -> int:
        return self.cols * self.rows

    @property
    def width_deg(self) -> float:
        return self.east - self.west

    @property
    def height_deg(self) -> float:
        return self.north - self.south

    def contains(self, point: GeoPoint) -> bool:
        """Half-open bounds test: south <= lat < north, west <= lng < east."""
        matches_lat = self.south <= point.lat < self.north
        matches_lng = self.west <= point.lng < self.east
        return matches_lat and matches_lng


class ElevationResult(BaseModel):
    """Elevation statistics for one query (metres)."""

    model_config = ConfigDict(frozen=True)

    center: int
    average: float
    min: int
    max: int
    variance: float


class Coordinate(BaseModel):
    """One entry of the input document; unknown fields are kept verbatim."""

    model_config = ConfigDict(extra='allow')

    lat: float
    lng: float
    elevation: ElevationResult | None = None

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)

    def to_json_dict(self) -> dict:
        data = self.model_dump(mode='json')
        if self.elevation is None:
            data.pop('elevation', None)
        return data


class CoordinateDocument(BaseModel):
    """Input/output document: ``{"name": ..., "customCoordinates": [...]}``."""

    model_config = ConfigDict(extra='allow', populate_by_name=True)

    custom_coordinates: list[Coordinate] = Field(
        default_factory=list, alias=COORDINATES_KEY
    )

    def to_json_dict(self) -> dict:
        data = self.model_dump(
            mode='json', by_alias=True, exclude={'custom_coordinates'}
        )
        data[COORDINATES_KEY] = [c.to_json_dict() for c in self.custom_coordinates]
        return data


class EnrichmentSettings(BaseModel):
    """Settings for one batch enrichment run."""

    model_config = {
        'extra': 'ignore',
    }

    # Directory holding the raw tile files (a10g..p10g)
    data_dir: Path = DEFAULT_DATA_DIR
    # Half-width of the sampling square (metres)
    apothem_m: float = DEFAULT_APOTHEM_M
    # Where the enriched document is written
    output_path: Path = DEFAULT_OUTPUT_PATH
    # Parallel query workers (1 = sequential)
    workers: int = DEFAULT_WORKERS
    # Map tile files instead of reading them into memory
    memory_map: bool = False
    # Cell value treated as "no data"
    nodata_value: int = NO_DATA_SENTINEL
    log_level: str = DEFAULT_LOG_LEVEL

    @field_validator('apothem_m')
    @classmethod
    def validate_apothem(cls, v):
        v = float(v)
        if not (v >= 0.0) or v == float('inf'):
            msg = 'apothem_m must be a finite number >= 0'
            raise ValueError(msg)
        return v

    @field_validator('workers')
    @classmethod
    def validate_workers(cls, v):
        v = int(v)
        if v < 1:
            msg = 'workers must be >= 1'
            raise ValueError(msg)
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        v = str(v).upper()
        if v not in {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}:
            msg = f'unknown log level: {v}'
            raise ValueError(msg)
        return v
