"""Command line entry point for the navigation location provider."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from domain.errors import LocationServiceError
from domain.models import ServiceSettings
from services.location_service import LocationService
from services.notifier import FutureSink
from settings import load_settings

logger = logging.getLogger(__name__)


def setup_logging(settings: ServiceSettings, level: int = logging.INFO) -> Path:
    """Configure logging to stdout and a log file next to the tile cache.

    Returns:
        Path of the log file.
    """
    log_dir = settings.cache_path.parent
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / 'navprovider.log'

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(str(log_file), encoding='utf-8'),
        ],
    )
    return log_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Geocoding and map tile provider'
    )
    parser.add_argument('--config', type=Path, default=None, help='Settings TOML file')
    parser.add_argument('--debug', action='store_true', help='Debug logging')
    parser.add_argument(
        '--strict',
        action='store_true',
        help='Use the strict (verbose) connectivity policy',
    )
    parser.add_argument(
        '--offline',
        action='store_true',
        help='Run in offline (flight) mode: only cached data is served',
    )
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('reverse', help='Coordinates -> address')
    p.add_argument('lat', type=float)
    p.add_argument('lon', type=float)

    p = sub.add_parser('forward', help='Address -> coordinates')
    p.add_argument('--num', default=None, help='House number')
    p.add_argument('--street', default=None)
    p.add_argument('--city', default=None)
    p.add_argument('--zip', default=None)
    p.add_argument('--country', default=None)

    p = sub.add_parser('tile', help='Map image centred on a point')
    p.add_argument('lat', type=float)
    p.add_argument('lon', type=float)
    p.add_argument('zoom', type=int)
    p.add_argument('width', type=int)
    p.add_argument('height', type=int)
    p.add_argument('--style', type=lambda s: int(s, 0), default=0x5, help='Map option bits')
    p.add_argument('--out', type=Path, default=Path('map.png'))

    sub.add_parser('categories', help='List POI categories')
    return parser


def forward_terms(args: argparse.Namespace) -> list:
    terms: list = [None] * 9
    terms[0] = args.num
    terms[2] = args.street
    terms[4] = args.city
    terms[7] = args.zip
    terms[8] = args.country
    return terms


async def run(args: argparse.Namespace, settings: ServiceSettings) -> int:
    sink = FutureSink()
    async with LocationService(settings, sink=sink) as service:
        dispatcher = service.dispatcher
        try:
            if args.command == 'reverse':
                token = dispatcher.reverse_geocode(args.lat, args.lon, verbose=args.strict)
            elif args.command == 'forward':
                token = dispatcher.forward_geocode(forward_terms(args), verbose=args.strict)
            elif args.command == 'tile':
                token = dispatcher.get_map_tile(
                    args.lat, args.lon, args.zoom, args.width, args.height, args.style
                )
            else:
                token = dispatcher.get_categories()
        except (LocationServiceError, ValueError) as e:
            logger.error('Request refused: %s', e)
            return 2

        outcome = await sink.wait(token)

    if not outcome.ok:
        print(f'error: {outcome.error_code}: {outcome.error}')
        return 1
    if args.command == 'reverse':
        for address in outcome.value:
            print(', '.join(part for part in address.as_list() if part))
    elif args.command == 'forward':
        for coord in outcome.value:
            print(f'{coord.latitude:.6f} {coord.longitude:.6f}')
    elif args.command == 'tile':
        tile = outcome.value
        args.out.write_bytes(tile.png)
        print(
            f'{args.out}: {tile.width}x{tile.height} '
            f'NW {tile.north_west.latitude:.6f},{tile.north_west.longitude:.6f} '
            f'SE {tile.south_east.latitude:.6f},{tile.south_east.longitude:.6f}'
        )
    else:
        for name in outcome.value:
            print(name)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    settings = load_settings(args.config)
    if args.offline:
        settings = settings.model_copy(update={'offline': True})
    setup_logging(settings, logging.DEBUG if args.debug else logging.INFO)
    logger.info('Starting navigation provider: %s', args.command)
    try:
        return asyncio.run(run(args, settings))
    except KeyboardInterrupt:
        return 130


if __name__ == '__main__':
    sys.exit(main())
