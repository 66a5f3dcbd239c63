"""Polygons as displayed on the map, and the overlay that holds them"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import shapely
from tqdm.auto import tqdm

from .errors import GeometryFormatError
from .features import Feature, FeatureCollection, Properties
from .geometry import Point, flatten_geometry, points_to_ring

logger = logging.getLogger(__name__)


@dataclass
class DisplayPolygon:
	"""Outline of a feature to be drawn, which remembers which feature it came from so it can be identified when clicked."""

	points: Sequence[Point]
	properties: Properties
	name: str = ''
	_shape: shapely.Polygon | None = field(default=None, init=False, repr=False, compare=False)

	@property
	def shape(self) -> shapely.Polygon | None:
		"""shapely version of the outline (in x = longitude, y = latitude), or None if it can't enclose anything"""
		if self._shape is None:
			ring = points_to_ring(self.points)
			if ring is None:
				return None
			self._shape = shapely.Polygon(ring)
			shapely.prepare(self._shape)
		return self._shape

	def contains(self, lat: float, lng: float) -> bool:
		shape = self.shape
		if shape is None:
			return False
		return bool(shapely.contains_xy(shape, lng, lat))

	def info_text(self) -> str:
		return f'Code: {self.properties.code}\nCountry: {self.properties.country}\nName: {self.properties.name}'


class PolygonOverlay:
	"""Named layer of polygons on the map. Polygons are only ever added or all cleared at once."""

	def __init__(self, name: str) -> None:
		self.name = name
		self._polygons: list[DisplayPolygon] = []

	def __len__(self) -> int:
		return len(self._polygons)

	def __repr__(self) -> str:
		return f'{type(self).__name__}({self.name!r}, {len(self)} polygons)'

	@property
	def polygons(self) -> tuple[DisplayPolygon, ...]:
		return tuple(self._polygons)

	def add(self, polygon: DisplayPolygon) -> None:
		self._polygons.append(polygon)

	def clear(self) -> None:
		self._polygons.clear()

	def find_polygon_at(self, lat: float, lng: float) -> DisplayPolygon | None:
		"""Returns the first polygon added that contains this point, if any."""
		return next((polygon for polygon in self._polygons if polygon.contains(lat, lng)), None)


def build_display_polygons(
	features: Iterable[Feature], *, all_rings: bool = False, use_tqdm: bool = False
) -> list[DisplayPolygon]:
	"""Flattens the geometry of each feature into a polygon. Features with malformed geometry are logged and skipped.

	Arguments:
		all_rings: Include holes (interior rings) in each outline, see `flatten_coordinates`.
	"""
	polygons = []
	for feature in tqdm(features, 'Building polygons', unit='feature', leave=False, disable=not use_tqdm):
		try:
			points = flatten_geometry(feature.geometry, all_rings=all_rings)
		except GeometryFormatError as ex:
			logger.warning(
				'Skipping %s (%s): %s', feature.properties.name or 'feature', feature.properties.code, ex
			)
			continue
		polygons.append(DisplayPolygon(points, feature.properties, feature.properties.name))
	return polygons


def load_polygons_by_country(
	collection: FeatureCollection,
	country: str,
	overlay: PolygonOverlay,
	*,
	all_rings: bool = False,
	use_tqdm: bool = False,
) -> int:
	"""Replaces everything in overlay with the polygons of each feature in `country`.

	Returns:
		Number of polygons added
	"""
	overlay.clear()
	features = collection.filter_by_country(country)
	polygons = build_display_polygons(features, all_rings=all_rings, use_tqdm=use_tqdm)
	for polygon in polygons:
		overlay.add(polygon)
	logger.info('Showing %d/%d polygons for %s', len(polygons), len(features), country)
	return len(polygons)
