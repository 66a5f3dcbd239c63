import copy
from typing import Any

import pytest

from tests.shapes import HOLE, OTHER_SQUARE, SQUARE


def make_feature(
	code: str, country: str, name: str, geometry: dict[str, Any] | None, area_type: str = 'Province'
) -> dict[str, Any]:
	return {
		'type': 'Feature',
		'geometry': geometry,
		'properties': {'code': code, 'country': country, 'name': name, 'type': area_type},
	}


@pytest.fixture
def geojson() -> dict[str, Any]:
	"""Small dataset with two countries, a polygon with a hole, a multi-polygon, and one broken geometry."""
	return copy.deepcopy(
		{
			'type': 'FeatureCollection',
			'features': [
				make_feature('FR-A', 'FR', 'Alpha', {'type': 'Polygon', 'coordinates': [SQUARE, HOLE]}),
				make_feature('ES-B', 'ES', 'Bravo', {'type': 'Polygon', 'coordinates': [OTHER_SQUARE]}),
				make_feature(
					'FR-C',
					'FR',
					'Charlie',
					{'type': 'MultiPolygon', 'coordinates': [[OTHER_SQUARE]]},
				),
				make_feature(
					'IT-X', 'IT', 'Broken', {'type': 'Polygon', 'coordinates': [[['a', 'b']]]}
				),
			],
		}
	)
