"""Command line entry point: load the tiles around a point into the cache."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from pydantic import ValidationError

from domain.errors import CacheInitializationError, InvalidArgumentError
from infrastructure.http.client import AiohttpTransport, resolve_cache_dir
from settings import LoaderSettings, load_settings
from shared.constants import LOG_FILE_NAME, LOG_FORMAT
from shared.progress import ConsoleProgress
from tiles.loader import TileLoader

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2


def setup_logging(level: str = 'INFO', *, log_to_file: bool = True) -> Path:
    """Configure application logging to stdout and LOCALAPPDATA.

    Returns:
        Directory holding the log file.
    """
    local_base = Path(os.getenv('LOCALAPPDATA') or Path.home() / '.local' / 'share') / 'tileloader'
    log_dir = local_base / 'log'
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_to_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_dir / LOG_FILE_NAME), encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    return log_dir


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Download and cache the map tiles around a geographic point',
    )
    parser.add_argument('--profile', help='TOML profile with loader settings')
    parser.add_argument('--service', help='Tile URL template with {x}, {y}, {z}')
    parser.add_argument('--lat', type=float, dest='latitude', help='Latitude, degrees')
    parser.add_argument('--lon', type=float, dest='longitude', help='Longitude, degrees')
    parser.add_argument('--zoom', type=int, help='Zoom level (0-31)')
    parser.add_argument('--blocks', type=int, help='Tile rings around the centre tile')
    parser.add_argument('--cache-dir', dest='cache_dir', help='Tile cache root directory')
    parser.add_argument('--log-level', default='INFO', help='Logging level')
    parser.add_argument('--no-log-file', action='store_true', help='Log to stdout only')
    parser.add_argument('--progress', action='store_true', help='Show a progress bar')
    return parser


def resolve_settings(args: argparse.Namespace) -> LoaderSettings:
    """Profile values overridden by explicitly given command line flags."""
    base = load_settings(args.profile) if args.profile else LoaderSettings()
    overrides = {
        key: getattr(args, key)
        for key in ('service', 'latitude', 'longitude', 'zoom', 'blocks', 'cache_dir')
        if getattr(args, key) is not None
    }
    return LoaderSettings.model_validate({**base.model_dump(), **overrides})


def run(settings: LoaderSettings, *, show_progress: bool = False) -> int:
    cache_root = Path(settings.cache_dir) if settings.cache_dir else resolve_cache_dir()
    transport = AiohttpTransport(
        timeout_s=settings.http_timeout_s, user_agent=settings.user_agent
    )
    try:
        with TileLoader(
            settings.service,
            settings.latitude,
            settings.longitude,
            settings.zoom,
            settings.blocks,
            cache_root=cache_root,
            transport=transport,
        ) as loader:
            progress = (
                ConsoleProgress(loader.window.count, label='Tiles') if show_progress else None
            )
            tiles = loader.start(on_progress=progress.update if progress else None)
            if progress is not None:
                progress.close()
            for tile in tiles:
                print(f'{tile.z}/{tile.x}/{tile.y}\t{tile.image_path}')
            report = loader.last_report
            logger.info(
                'Centre tile (%d, %d), offset (%.4f, %.4f), %.3f m/px',
                loader.center_tile_x,
                loader.center_tile_y,
                loader.origin_offset_x,
                loader.origin_offset_y,
                loader.resolution(),
            )
            if report.failed:
                logger.warning('%d of %d tiles missing', report.failed, report.requested)
    finally:
        transport.close()
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, log_to_file=not args.no_log_file)

    try:
        settings = resolve_settings(args)
    except (ValidationError, FileNotFoundError) as e:
        logger.error('Invalid settings: %s', e)
        return EXIT_USAGE
    if not settings.has_origin:
        logger.error('Latitude and longitude are required (--lat/--lon or profile)')
        return EXIT_USAGE

    try:
        return run(settings, show_progress=args.progress)
    except (InvalidArgumentError, CacheInitializationError) as e:
        logger.error('%s', e)
        return EXIT_USAGE


if __name__ == '__main__':
    sys.exit(main())
