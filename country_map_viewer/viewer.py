"""State of the map viewer window, kept separate from any particular UI toolkit.

The dataset is loaded by a background task that posts a single `LoadCompleted` message to the viewer's inbox, and the foreground (whatever drives the UI) applies it with `process_next_message`, so the viewer's state is only ever changed from one place.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .download import DEFAULT_DATASET_URL, fetch_feature_collection
from .errors import MapViewerError
from .features import FeatureCollection
from .overlay import DisplayPolygon, PolygonOverlay, load_polygons_by_country

if TYPE_CHECKING:
	import aiohttp

logger = logging.getLogger(__name__)

MessageSink = Callable[[str, str], None]
"""Shows a modal message to the user, with a title and text"""
ZoomListener = Callable[[int], None]


def _log_message(title: str, text: str) -> None:
	logger.info('%s: %s', title, text)


@dataclass
class MapView:
	"""Position and zoom of the map control."""

	lat: float = 42.5
	lng: float = 1.5
	zoom: int = 5
	min_zoom: int = 0
	max_zoom: int = 18
	enabled: bool = True
	zoom_changed: list[ZoomListener] = field(default_factory=list, repr=False)

	def set_zoom(self, zoom: int) -> None:
		"""Clamps zoom to the allowed range, and notifies listeners if it actually changed."""
		zoom = max(self.min_zoom, min(self.max_zoom, int(zoom)))
		if zoom == self.zoom:
			return
		self.zoom = zoom
		for listener in self.zoom_changed:
			listener(zoom)

	def set_position(self, lat: float, lng: float) -> None:
		"""Centers the map on a point, clamping latitude and wrapping longitude around to [-180, 180)."""
		self.lat = max(-90.0, min(90.0, float(lat)))
		lng = float(lng)
		if not -180.0 <= lng < 180.0:
			lng = (lng + 180.0) % 360.0 - 180.0
		self.lng = lng


@dataclass
class ZoomSlider:
	minimum: int
	maximum: int
	value: int
	enabled: bool = True
	value_changed: list[ZoomListener] = field(default_factory=list, repr=False)

	def set_value(self, value: int) -> None:
		value = max(self.minimum, min(self.maximum, int(value)))
		if value == self.value:
			return
		self.value = value
		for listener in self.value_changed:
			listener(value)


@dataclass
class LoadCompleted:
	"""Result of loading the dataset, either the collection or what went wrong."""

	collection: FeatureCollection | None = None
	error: Exception | None = None

	@property
	def ok(self) -> bool:
		return self.error is None and self.collection is not None


class MapViewer:
	def __init__(
		self,
		show_message: MessageSink | None = None,
		*,
		all_rings: bool = False,
		use_tqdm: bool = True,
	) -> None:
		"""
		Arguments:
			show_message: Called with (title, text) to show an error or information to the user, by default they are just logged.
			all_rings: Draw holes of each polygon as part of its outline, see `flatten_coordinates`.
			use_tqdm: Show progress bars while downloading and building polygons.
		"""
		self.show_message = show_message or _log_message
		self.all_rings = all_rings
		self.use_tqdm = use_tqdm

		self.map_view = MapView()
		self.zoom_slider = ZoomSlider(
			self.map_view.min_zoom, self.map_view.max_zoom, self.map_view.zoom
		)
		# Each one only notifies when the value changes, so this doesn't go around in circles
		self.zoom_slider.value_changed.append(self.map_view.set_zoom)
		self.map_view.zoom_changed.append(self.zoom_slider.set_value)

		self.overlay = PolygonOverlay('polygons')
		self.collection: FeatureCollection | None = None
		self.countries: list[str] = []
		self.selected_country: str | None = None
		self.controls_enabled = True
		self.inbox: asyncio.Queue[LoadCompleted] = asyncio.Queue()
		self._load_task: asyncio.Task[None] | None = None

	@property
	def is_loading(self) -> bool:
		"""Whether the "loading" label should be shown."""
		return not self.controls_enabled

	def set_controls_enabled(self, enabled: bool) -> None:
		self.controls_enabled = enabled
		self.map_view.enabled = enabled
		self.zoom_slider.enabled = enabled

	async def _load(self, session: 'aiohttp.ClientSession', url: str) -> None:
		try:
			collection = await fetch_feature_collection(session, url, use_tqdm=self.use_tqdm)
		except MapViewerError as ex:
			logger.error('Loading dataset failed: %s', ex)
			message = LoadCompleted(error=ex)
		except Exception as ex:
			# Still has to be reported, or the controls would stay disabled forever
			logger.exception('Unexpected error loading dataset')
			message = LoadCompleted(error=ex)
		else:
			message = LoadCompleted(collection)
		await self.inbox.put(message)

	def start_loading(
		self, session: 'aiohttp.ClientSession', url: str = DEFAULT_DATASET_URL
	) -> 'asyncio.Task[None]':
		"""Disables the controls and starts downloading the dataset in the background. Must be called from a running event loop.

		The result arrives in `inbox` as a `LoadCompleted`, to be applied with `process_next_message`.
		"""
		if self._load_task and not self._load_task.done():
			raise RuntimeError('Dataset is already being loaded')
		self.set_controls_enabled(False)
		self._load_task = asyncio.create_task(self._load(session, url), name=f'load {url}')
		return self._load_task

	def apply_load_completed(self, message: LoadCompleted) -> None:
		if message.error is not None or message.collection is None:
			self.show_message('Error', f'Error downloading or loading data: {message.error}')
		else:
			self.collection = message.collection
			self.populate_countries()
		self.set_controls_enabled(True)

	async def process_next_message(self) -> LoadCompleted:
		"""Waits for the next message in the inbox and applies it."""
		message = await self.inbox.get()
		self.apply_load_completed(message)
		self.inbox.task_done()
		return message

	async def load(
		self, session: 'aiohttp.ClientSession', url: str = DEFAULT_DATASET_URL
	) -> LoadCompleted:
		"""Loads the dataset and applies the result, for when there is nothing else for the foreground to do in the meantime."""
		self.start_loading(session, url)
		return await self.process_next_message()

	def populate_countries(self) -> None:
		self.countries = self.collection.countries() if self.collection else []
		self.selected_country = None
		self.overlay.clear()

	def select_country(self, country: str) -> int:
		"""Shows the polygons of every feature in `country`, replacing whatever was shown before.

		Does nothing while the controls are disabled or if no data is loaded.

		Returns:
			Number of polygons now shown
		"""
		if not self.controls_enabled or self.collection is None:
			logger.debug('Ignoring selection of %s, no data loaded', country)
			return 0
		if country not in self.countries:
			logger.warning('%s is not in the dataset', country)
		self.selected_country = country
		return load_polygons_by_country(
			self.collection, country, self.overlay, all_rings=self.all_rings, use_tqdm=self.use_tqdm
		)

	def set_zoom(self, zoom: int) -> None:
		"""Moves the zoom slider, which also zooms the map."""
		if not self.controls_enabled:
			return
		self.zoom_slider.set_value(zoom)

	def center_on(self, lat: float, lng: float) -> None:
		if not self.controls_enabled:
			return
		self.map_view.set_position(lat, lng)

	def click(self, lat: float, lng: float) -> DisplayPolygon | None:
		"""Identifies the polygon at this point on the map and shows its information, if there is one."""
		if not self.controls_enabled:
			return None
		polygon = self.overlay.find_polygon_at(lat, lng)
		if polygon:
			self.show_message('Polygon Info', polygon.info_text())
		return polygon
