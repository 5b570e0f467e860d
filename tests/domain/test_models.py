"""Tests for domain models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from domain.errors import (
    ConfigurationError,
    ElevationError,
    QueryError,
    UnresolvableCoordinate,
    UnsupportedRegionSpan,
)
from domain.models import (
    Coordinate,
    CoordinateDocument,
    ElevationResult,
    EnrichmentSettings,
    GeoPoint,
    Tile,
)


def _tile(**overrides):
    fields = {
        'cols': 4,
        'rows': 2,
        'grid_x': 0,
        'grid_y': 0,
        'elevation_min': 0,
        'elevation_max': 10,
        'north': 10.0,
        'south': 0.0,
        'east': 20.0,
        'west': 0.0,
    }
    fields.update(overrides)
    return Tile('t', **fields)


class TestTile:
    def test_derived_sizes(self):
        tile = _tile()
        assert tile.cell_count == 8
        assert tile.width_deg == 20.0
        assert tile.height_deg == 10.0

    def test_contains_half_open(self):
        tile = _tile()
        assert tile.contains(GeoPoint(lat=0.0, lng=0.0))
        assert tile.contains(GeoPoint(lat=9.99, lng=19.99))
        assert not tile.contains(GeoPoint(lat=10.0, lng=5.0))
        assert not tile.contains(GeoPoint(lat=5.0, lng=20.0))

    def test_frozen(self):
        with pytest.raises(AttributeError):
            _tile().cols = 5


class TestCoordinate:
    def test_extra_fields_round_trip(self):
        coord = Coordinate.model_validate({'lat': 1.5, 'lng': 2.5, 'heading': 90, 'panoId': 'abc'})
        assert coord.point == GeoPoint(lat=1.5, lng=2.5)
        assert coord.to_json_dict() == {'lat': 1.5, 'lng': 2.5, 'heading': 90, 'panoId': 'abc'}

    def test_elevation_serialized_when_set(self):
        coord = Coordinate(lat=0.0, lng=0.0)
        coord.elevation = ElevationResult(center=5, average=5.0, min=5, max=5, variance=0.0)
        assert coord.to_json_dict()['elevation'] == {
            'center': 5,
            'average': 5.0,
            'min': 5,
            'max': 5,
            'variance': 0.0,
        }

    def test_missing_lat_is_invalid(self):
        with pytest.raises(ValidationError):
            Coordinate.model_validate({'lng': 2.0})


class TestCoordinateDocument:
    def test_alias_and_extras(self):
        doc = CoordinateDocument.model_validate(
            {'name': 'map', 'customCoordinates': [{'lat': 1, 'lng': 2}]}
        )
        assert len(doc.custom_coordinates) == 1
        out = doc.to_json_dict()
        assert out['name'] == 'map'
        assert out['customCoordinates'] == [{'lat': 1.0, 'lng': 2.0}]
        assert 'custom_coordinates' not in out

    def test_populate_by_name(self):
        doc = CoordinateDocument(custom_coordinates=[Coordinate(lat=0, lng=0)])
        assert list(doc.to_json_dict()) == ['customCoordinates']


class TestEnrichmentSettings:
    def test_defaults(self):
        settings = EnrichmentSettings()
        assert settings.data_dir == Path('data')
        assert settings.output_path == Path('output.json')
        assert settings.apothem_m == 0.0
        assert settings.workers == 1
        assert settings.nodata_value == -500
        assert settings.log_level == 'INFO'

    def test_log_level_normalized(self):
        assert EnrichmentSettings(log_level='debug').log_level == 'DEBUG'

    @pytest.mark.parametrize(
        'field,value',
        [
            ('apothem_m', -1.0),
            ('apothem_m', float('inf')),
            ('apothem_m', float('nan')),
            ('workers', 0),
            ('log_level', 'chatty'),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            EnrichmentSettings(**{field: value})

    def test_unknown_keys_ignored(self):
        settings = EnrichmentSettings.model_validate({'workers': 3, 'colour': 'red'})
        assert settings.workers == 3


class TestErrors:
    def test_hierarchy(self):
        assert issubclass(ConfigurationError, ElevationError)
        assert issubclass(UnresolvableCoordinate, QueryError)
        assert issubclass(UnsupportedRegionSpan, QueryError)
        assert not issubclass(ConfigurationError, QueryError)

    def test_unresolvable_message(self):
        err = UnresolvableCoordinate(91.0, 10.0)
        assert str(err) == 'invalid coordinates provided: lat: 91.0, lng: 10.0'
