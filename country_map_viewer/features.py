"""Data model for the boundaries dataset, which is a GeoJSON FeatureCollection"""

import json
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import DeserializationError
from .geometry import Coordinates

logger = logging.getLogger(__name__)


def _as_str(value: Any) -> str:
	if value is None:
		return ''
	return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class Properties:
	"""Metadata of each boundary, shown when it is clicked on."""

	code: str = ''
	country: str = ''
	name: str = ''
	type: str = ''
	"""Kind of administrative area, e.g. province or region"""

	@classmethod
	def from_dict(cls, d: Mapping[str, Any]) -> 'Properties':
		return cls(
			_as_str(d.get('code')),
			_as_str(d.get('country')),
			_as_str(d.get('name')),
			_as_str(d.get('type')),
		)


@dataclass(frozen=True)
class Geometry:
	type: str
	coordinates: Coordinates = field(default_factory=list)
	crs: Mapping[str, Any] | None = None
	"""Not used for anything, everything is assumed to be WGS84 anyway"""

	@classmethod
	def from_dict(cls, d: Mapping[str, Any] | None) -> 'Geometry':
		if d is None:
			# null geometry is valid GeoJSON, it just has nothing to draw
			return cls('', [])
		if not isinstance(d, Mapping):
			raise DeserializationError(f'Expected geometry to be an object, got {type(d).__name__}')
		coordinates = d.get('coordinates')
		return cls(
			_as_str(d.get('type')), [] if coordinates is None else coordinates, d.get('crs')
		)


@dataclass(frozen=True)
class Feature:
	geometry: Geometry
	properties: Properties


@dataclass(frozen=True)
class FeatureCollection:
	features: tuple[Feature, ...] = ()

	def __len__(self) -> int:
		return len(self.features)

	def __iter__(self) -> Iterator[Feature]:
		return iter(self.features)

	def filter_by_country(self, country: str) -> list[Feature]:
		"""Features whose country is exactly `country`, keeping their original order."""
		return [feature for feature in self.features if feature.properties.country == country]

	def countries(self) -> list[str]:
		"""Each distinct country in the collection, sorted."""
		return sorted({feature.properties.country for feature in self.features})


def parse_feature(d: Any, index: int = 0) -> Feature:
	if not isinstance(d, Mapping):
		raise DeserializationError(f'Feature {index} is {type(d).__name__}, expected an object')
	properties = d.get('properties')
	if not isinstance(properties, Mapping):
		raise DeserializationError(f'Feature {index} does not have a properties object')
	if 'geometry' not in d:
		raise DeserializationError(f'Feature {index} does not have a geometry')
	return Feature(Geometry.from_dict(d['geometry']), Properties.from_dict(properties))


def parse_feature_collection(data: Any) -> FeatureCollection:
	"""Converts an already decoded GeoJSON FeatureCollection into a FeatureCollection.

	Raises:
		DeserializationError: If data is not an object with a list of features, or any feature is missing its properties or geometry.
	"""
	if not isinstance(data, Mapping):
		raise DeserializationError(f'Expected a GeoJSON object, got {type(data).__name__}')
	features = data.get('features')
	if not isinstance(features, list):
		raise DeserializationError('GeoJSON does not contain a list of features')
	if data.get('type', 'FeatureCollection') != 'FeatureCollection':
		logger.warning('Expected a FeatureCollection, got %s, reading features anyway', data['type'])
	return FeatureCollection(tuple(parse_feature(f, i) for i, f in enumerate(features)))


def loads_feature_collection(text: str | bytes) -> FeatureCollection:
	"""Decodes JSON text (as downloaded) into a FeatureCollection.

	Raises:
		DeserializationError: If text is not valid JSON or not a usable FeatureCollection.
	"""
	try:
		data = json.loads(text)
	except (json.JSONDecodeError, UnicodeDecodeError) as ex:
		raise DeserializationError(f'Invalid JSON: {ex}') from ex
	collection = parse_feature_collection(data)
	logger.info('Loaded %d features', len(collection))
	return collection
