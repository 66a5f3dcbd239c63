"""Turns GeoJSON coordinate arrays into flat lists of points that can be drawn as one outline"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import shapely

from .errors import GeometryFormatError

if TYPE_CHECKING:
	from .features import Geometry

Coordinates = Sequence[Any]
"""Arbitrarily nested array of numbers, as found in the "coordinates" field of a GeoJSON geometry"""
MAX_DEPTH = 32
"""Deepest nesting accepted, multi-polygons are only 4 deep so anything near this is nonsense"""


@dataclass(frozen=True)
class Point:
	"""Latitude/longitude pair, in that order (unlike GeoJSON, which stores longitude first)."""

	lat: float
	lng: float


def _is_array(value: Any) -> bool:
	return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _is_empty(coordinates: Any) -> bool:
	"""True if coordinates is an array that contains nothing but other empty arrays."""
	if not _is_array(coordinates):
		return False
	stack = [coordinates]
	while stack:
		for child in stack.pop():
			if not _is_array(child):
				return False
			stack.append(child)
	return True


def coordinate_depth(coordinates: Any) -> int:
	"""Nesting depth of an array, found by walking into the first element until there is no array (or an empty one).

	Elements that are empty all the way down are passed over when there is something else to walk into. A bare position is 1, a ring is 2, a polygon is 3 and a multi-polygon is 4.
	"""
	depth = 0
	current = coordinates
	while _is_array(current):
		depth += 1
		if not current:
			break
		current = next((child for child in current if not _is_empty(child)), current[0])
	return depth


def _position_to_point(position: Any) -> Point:
	if not _is_array(position) or len(position) < 2:
		raise GeometryFormatError(f'Expected a [longitude, latitude] pair, got {position!r}')
	lng = position[0]
	lat = position[1]
	for value in (lng, lat):
		# bool is a subclass of int, but true/false in a coordinate is definitely wrong
		if isinstance(value, bool) or not isinstance(value, (int, float)):
			raise GeometryFormatError(f'Coordinate {position!r} contains non-numeric value {value!r}')
	try:
		lng = float(lng)
		lat = float(lat)
	except OverflowError as ex:
		raise GeometryFormatError(f'Coordinate {position!r} is out of range') from ex
	if not (math.isfinite(lng) and math.isfinite(lat)):
		raise GeometryFormatError(f'Coordinate {position!r} contains a non-finite value')
	return Point(lat, lng)


def _ring_to_points(ring: Coordinates) -> list[Point]:
	return [_position_to_point(position) for position in ring]


def _polygon_to_points(polygon: Coordinates, *, all_rings: bool) -> list[Point]:
	if not polygon:
		return []
	rings = polygon if all_rings else polygon[:1]
	points: list[Point] = []
	for ring in rings:
		if not _is_array(ring):
			raise GeometryFormatError(f'Expected a ring of coordinates, got {ring!r}')
		points += _ring_to_points(ring)
	return points


def _flatten(coordinates: Coordinates, depth: int, *, all_rings: bool) -> list[Point]:
	if depth == 2:
		return _ring_to_points(coordinates)
	if depth == 3:
		return _polygon_to_points(coordinates, all_rings=all_rings)

	points: list[Point] = []
	for part in coordinates:
		if _is_empty(part):
			continue
		part_depth = coordinate_depth(part)
		if part_depth != depth - 1:
			raise GeometryFormatError(
				f'Ragged coordinates: expected parts nested {depth - 1} deep, found one nested {part_depth} deep'
			)
		points += _flatten(part, part_depth, all_rings=all_rings)
	return points


def flatten_coordinates(coordinates: Coordinates, *, all_rings: bool = False) -> list[Point]:
	"""Converts a GeoJSON coordinates array into a flat list of points, in the order they appear.

	A ring ([[lng, lat], ...]) is converted directly. For a polygon ([ring, ...]) only the outer ring is used, and for a multi-polygon ([polygon, ...]) the outer ring of each polygon is used, one after the other.

	Arguments:
		coordinates: Coordinates of a Polygon or MultiPolygon geometry, or a single ring.
		all_rings: Also include the interior rings (holes) of each polygon, after its outer ring.

	Raises:
		GeometryFormatError: If coordinates is not an array, is ragged or nested more than MAX_DEPTH deep, or contains something other than pairs of numbers.
	"""
	if not _is_array(coordinates):
		raise GeometryFormatError(
			f'Expected an array of coordinates, got {type(coordinates).__name__}'
		)
	if _is_empty(coordinates):
		return []
	depth = coordinate_depth(coordinates)
	if depth < 2:
		raise GeometryFormatError(
			f'Coordinates {coordinates!r} are a single position, not an outline'
		)
	if depth > MAX_DEPTH:
		raise GeometryFormatError(f'Coordinates are nested too deeply ({depth} levels)')
	return _flatten(coordinates, depth, all_rings=all_rings)


def flatten_geometry(geometry: 'Geometry', *, all_rings: bool = False) -> list[Point]:
	return flatten_coordinates(geometry.coordinates, all_rings=all_rings)


def points_to_ring(points: Sequence[Point]) -> shapely.LinearRing | None:
	"""Converts points back into x/y order as a shapely ring, or None if there aren't enough points to enclose anything."""
	coords = [(point.lng, point.lat) for point in points]
	if len(coords) > 1 and coords[0] == coords[-1]:
		# Already closed, as GeoJSON rings should be
		coords.pop()
	if len(coords) < 3:
		return None
	return shapely.LinearRing(coords)
