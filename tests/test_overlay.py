"""Tests for building display polygons and identifying them by location."""

import logging

import pytest

from country_map_viewer.features import (
	Properties,
	loads_feature_collection,
	parse_feature_collection,
)
from country_map_viewer.geometry import Point
from country_map_viewer.overlay import (
	DisplayPolygon,
	PolygonOverlay,
	build_display_polygons,
	load_polygons_by_country,
)


@pytest.fixture
def collection(geojson):
	return parse_feature_collection(geojson)


def _square(lat: float, lng: float, size: float, name: str) -> DisplayPolygon:
	points = [
		Point(lat, lng),
		Point(lat + size, lng),
		Point(lat + size, lng + size),
		Point(lat, lng + size),
	]
	return DisplayPolygon(points, Properties(name.upper(), 'FR', name), name)


class TestDisplayPolygon:
	def test_contains(self):
		polygon = _square(0.0, 0.0, 10.0, 'square')
		assert polygon.contains(5.0, 5.0)
		assert not polygon.contains(15.0, 5.0)

	def test_contains_uses_lat_lng_order(self):
		polygon = _square(40.0, 0.0, 5.0, 'tall')
		assert polygon.contains(42.0, 2.0)
		assert not polygon.contains(2.0, 42.0)

	def test_too_few_points_contains_nothing(self):
		polygon = DisplayPolygon([Point(0.0, 0.0), Point(1.0, 1.0)], Properties())
		assert polygon.shape is None
		assert not polygon.contains(0.5, 0.5)

	def test_info_text(self):
		polygon = _square(0.0, 0.0, 1.0, 'Alpha')
		assert polygon.info_text() == 'Code: ALPHA\nCountry: FR\nName: Alpha'


class TestPolygonOverlay:
	def test_add_and_clear(self):
		overlay = PolygonOverlay('polygons')
		overlay.add(_square(0.0, 0.0, 1.0, 'a'))
		overlay.add(_square(5.0, 5.0, 1.0, 'b'))
		assert len(overlay) == 2
		assert [p.name for p in overlay.polygons] == ['a', 'b']
		overlay.clear()
		assert len(overlay) == 0

	def test_find_polygon_at_returns_first_added(self):
		overlay = PolygonOverlay('polygons')
		overlay.add(_square(0.0, 0.0, 10.0, 'big'))
		overlay.add(_square(2.0, 2.0, 2.0, 'small'))
		found = overlay.find_polygon_at(3.0, 3.0)
		assert found is not None
		assert found.name == 'big'

	def test_find_polygon_at_nothing(self):
		overlay = PolygonOverlay('polygons')
		overlay.add(_square(0.0, 0.0, 1.0, 'a'))
		assert overlay.find_polygon_at(50.0, 50.0) is None


class TestBuildDisplayPolygons:
	def test_skips_malformed_geometry(self, collection, caplog):
		with caplog.at_level(logging.WARNING):
			polygons = build_display_polygons(collection)
		assert [p.name for p in polygons] == ['Alpha', 'Bravo', 'Charlie']
		assert 'Broken' in caplog.text

	def test_skips_unconvertible_coordinates_from_json(self, caplog):
		huge = '9' * 401
		deep = '[' * 600 + '[[0, 0], [0, 1], [1, 1]]' + ']' * 600
		text = (
			'{"type": "FeatureCollection", "features": ['
			f'{{"geometry": {{"type": "Polygon", "coordinates": [[[{huge}, 1], [2, 3], [4, 5]]]}}, "properties": {{"country": "FR", "name": "Huge"}}}},'
			f'{{"geometry": {{"type": "Polygon", "coordinates": {deep}}}, "properties": {{"country": "FR", "name": "Deep"}}}},'
			'{"geometry": {"type": "Polygon", "coordinates": [[[0, 0], [0, 1], [1, 1]]]}, "properties": {"country": "FR", "name": "Fine"}}'
			']}'
		)
		collection = loads_feature_collection(text)
		overlay = PolygonOverlay('polygons')
		with caplog.at_level(logging.WARNING):
			assert load_polygons_by_country(collection, 'FR', overlay) == 1
		assert [p.name for p in overlay.polygons] == ['Fine']
		assert 'Huge' in caplog.text
		assert 'Deep' in caplog.text

	def test_back_reference_to_properties(self, collection):
		polygons = build_display_polygons(collection.filter_by_country('ES'))
		assert polygons[0].properties is collection.features[1].properties


class TestLoadPolygonsByCountry:
	def test_loads_matching(self, collection):
		overlay = PolygonOverlay('polygons')
		assert load_polygons_by_country(collection, 'FR', overlay) == 2
		assert [p.name for p in overlay.polygons] == ['Alpha', 'Charlie']

	def test_replaces_previous(self, collection):
		overlay = PolygonOverlay('polygons')
		load_polygons_by_country(collection, 'FR', overlay)
		assert load_polygons_by_country(collection, 'ES', overlay) == 1
		assert [p.name for p in overlay.polygons] == ['Bravo']

	def test_only_malformed(self, collection):
		overlay = PolygonOverlay('polygons')
		assert load_polygons_by_country(collection, 'IT', overlay) == 0
		assert len(overlay) == 0

	def test_hole_dropped_so_click_inside_hole_hits(self, collection):
		overlay = PolygonOverlay('polygons')
		load_polygons_by_country(collection, 'FR', overlay)
		found = overlay.find_polygon_at(5.0, 5.0)
		assert found is not None
		assert found.properties.code == 'FR-A'

	def test_multipolygon_hit(self, collection):
		overlay = PolygonOverlay('polygons')
		load_polygons_by_country(collection, 'FR', overlay)
		found = overlay.find_polygon_at(25.0, 25.0)
		assert found is not None
		assert found.name == 'Charlie'
