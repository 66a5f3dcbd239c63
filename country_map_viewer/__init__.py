from .download import DEFAULT_DATASET_URL, download_dataset, fetch_feature_collection
from .errors import DeserializationError, DownloadError, GeometryFormatError, MapViewerError
from .features import (
	Feature,
	FeatureCollection,
	Geometry,
	Properties,
	loads_feature_collection,
	parse_feature_collection,
)
from .geometry import (
	Point,
	coordinate_depth,
	flatten_coordinates,
	flatten_geometry,
	points_to_ring,
)
from .overlay import (
	DisplayPolygon,
	PolygonOverlay,
	build_display_polygons,
	load_polygons_by_country,
)
from .viewer import LoadCompleted, MapView, MapViewer, ZoomSlider

__all__ = [
	'DEFAULT_DATASET_URL',
	'DeserializationError',
	'DisplayPolygon',
	'DownloadError',
	'Feature',
	'FeatureCollection',
	'Geometry',
	'GeometryFormatError',
	'LoadCompleted',
	'MapView',
	'MapViewer',
	'MapViewerError',
	'Point',
	'PolygonOverlay',
	'Properties',
	'ZoomSlider',
	'build_display_polygons',
	'coordinate_depth',
	'download_dataset',
	'fetch_feature_collection',
	'flatten_coordinates',
	'flatten_geometry',
	'load_polygons_by_country',
	'loads_feature_collection',
	'parse_feature_collection',
	'points_to_ring',
]
