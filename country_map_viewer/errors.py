class MapViewerError(Exception):
	"""Base class for errors raised by country_map_viewer."""


class DownloadError(MapViewerError):
	"""The dataset could not be fetched, either from a network failure or a non-success response."""

	def __init__(self, message: str, status: int | None = None):
		super().__init__(message)
		self.status = status


class DeserializationError(MapViewerError):
	"""The downloaded payload was not a usable GeoJSON FeatureCollection."""


class GeometryFormatError(MapViewerError):
	"""A coordinate array was nested or typed in a way that cannot be turned into points."""
