"""Downloading the boundaries dataset"""

import asyncio
import logging

import aiohttp
from tqdm.auto import tqdm

from .errors import DownloadError
from .features import FeatureCollection, loads_feature_collection

logger = logging.getLogger(__name__)

DATASET_DRIVE_ID = '16s24hYHfYQhKMNcP1hpgQmg13Yb8j0hV'
DEFAULT_DATASET_URL = f'https://drive.google.com/uc?export=download&id={DATASET_DRIVE_ID}'

_chunk_size = 64 * 1024


async def download_dataset(
	session: aiohttp.ClientSession, url: str = DEFAULT_DATASET_URL, *, use_tqdm: bool = True
) -> bytes:
	"""Downloads the whole response body from `url` with a single GET request. Does not retry.

	Raises:
		DownloadError: If the request fails or the response status is not a success.
	"""
	logger.info('Downloading %s', url)
	try:
		async with session.get(url) as response:
			if not response.ok:
				raise DownloadError(
					f'{url} returned {response.status} {response.reason}', response.status
				)
			body = bytearray()
			with tqdm(
				desc='Downloading dataset',
				total=response.content_length,
				unit='B',
				unit_scale=True,
				leave=False,
				disable=not use_tqdm,
			) as t:
				async for chunk in response.content.iter_chunked(_chunk_size):
					body += chunk
					t.update(len(chunk))
	except (aiohttp.ClientError, asyncio.TimeoutError) as ex:
		raise DownloadError(f'Could not download {url}: {str(ex) or type(ex).__name__}') from ex
	logger.debug('Downloaded %d bytes', len(body))
	return bytes(body)


async def fetch_feature_collection(
	session: aiohttp.ClientSession, url: str = DEFAULT_DATASET_URL, *, use_tqdm: bool = True
) -> FeatureCollection:
	"""Downloads and parses the dataset. Parsing happens in a worker thread as the file is fairly large.

	Raises:
		DownloadError: If downloading fails.
		DeserializationError: If the response is not a valid GeoJSON FeatureCollection.
	"""
	body = await download_dataset(session, url, use_tqdm=use_tqdm)
	return await asyncio.to_thread(loads_feature_collection, body)
