import asyncio
import logging
import shlex
from argparse import ArgumentParser, BooleanOptionalAction, Namespace

import aiohttp
from tqdm.contrib.logging import logging_redirect_tqdm

from .download import DEFAULT_DATASET_URL
from .viewer import MapViewer

_help = """Commands:
	list: List countries in the dataset
	country <name>: Show the polygons for a country
	click <lat> <lng>: Identify the polygon at a point
	zoom <level>: Set the zoom level
	center <lat> <lng>: Center the map on a point
	quit: Exit"""


def _print_message(title: str, text: str) -> None:
	print(f'[{title}]')
	print(text)


def _print_countries(viewer: MapViewer) -> None:
	if not viewer.countries:
		print('No countries loaded')
		return
	for country in viewer.countries:
		marker = '*' if country == viewer.selected_country else ' '
		print(f'{marker} {country}')


def run_command(viewer: MapViewer, line: str) -> bool:
	"""Runs one line of input in the shell. Returns false if the shell should exit."""
	try:
		words = shlex.split(line)
	except ValueError as ex:
		print(f'Could not parse {line!r}: {ex}')
		return True
	if not words:
		return True
	command, *args = words
	command = command.lower()

	if command in {'quit', 'exit', 'q'}:
		return False
	if command == 'list':
		_print_countries(viewer)
	elif command == 'country' and args:
		count = viewer.select_country(' '.join(args))
		print(f'Showing {count} polygons')
	elif command == 'click' and len(args) == 2:
		try:
			lat, lng = float(args[0]), float(args[1])
		except ValueError:
			print('click needs a latitude and longitude')
			return True
		if viewer.click(lat, lng) is None:
			print('Nothing here')
	elif command == 'center' and len(args) == 2:
		try:
			lat, lng = float(args[0]), float(args[1])
		except ValueError:
			print('center needs a latitude and longitude')
			return True
		viewer.center_on(lat, lng)
		print(f'Center: {viewer.map_view.lat}, {viewer.map_view.lng}')
	elif command == 'zoom' and len(args) == 1 and args[0].isdigit():
		viewer.set_zoom(int(args[0]))
		print(f'Zoom: {viewer.map_view.zoom}')
	else:
		print(_help)
	return True


async def shell(viewer: MapViewer) -> None:
	print(_help)
	while True:
		try:
			line = await asyncio.to_thread(input, '> ')
		except EOFError:
			break
		if not run_command(viewer, line):
			break


async def run(args: Namespace) -> None:
	viewer = MapViewer(_print_message, all_rings=args.all_rings)
	async with aiohttp.ClientSession() as session:
		print('Wait, loading data ...')
		result = await viewer.load(session, args.url)
	if not result.ok:
		return

	print(f'Loaded {len(viewer.countries)} countries')
	if args.country:
		count = viewer.select_country(args.country)
		print(f'Showing {count} polygons for {args.country}')
	if args.click:
		lat, lng = args.click
		if viewer.click(lat, lng) is None:
			print('Nothing here')
		return
	await shell(viewer)


def main():
	argparser = ArgumentParser(
		description='Browse administrative boundaries of countries and identify them by location'
	)
	argparser.add_argument(
		'--url', help='URL to download the GeoJSON dataset from', default=DEFAULT_DATASET_URL
	)
	argparser.add_argument('--country', help='Country to show polygons for straight away')
	argparser.add_argument(
		'--click',
		nargs=2,
		type=float,
		metavar=('LAT', 'LNG'),
		help='Identify the polygon at this point and exit, instead of starting the shell',
	)
	argparser.add_argument(
		'--all-rings',
		action=BooleanOptionalAction,
		default=False,
		help='Include holes and every ring of multi-polygons in the outlines, default false',
	)
	argparser.add_argument('--verbose', action='store_true', help='Log debug messages')

	args = argparser.parse_args()
	with logging_redirect_tqdm():
		logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
		asyncio.run(run(args))


if __name__ == '__main__':
	main()
