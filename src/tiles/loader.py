"""
Загрузка набора тайлов вокруг заданной точки.

TileLoader переводит (lat, lon, zoom) в центральный тайл, перебирает квадратное
окно из `blocks` колец вокруг него и для каждого индекса либо берёт файл из
дискового кэша, либо скачивает тайл и сохраняет его. Ошибка загрузки одного
тайла не прерывает перебор: тайл просто отсутствует в результате.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from domain.errors import TileFetchError
from domain.models import CentreTile, LoadReport, MapTile, TileRequestContext
from geo.projection import lat_lon_to_tile_coords, zoom_to_resolution
from infrastructure.http.client import AiohttpTransport
from tiles.cache import TileDiskCache
from tiles.coverage import compute_window, iter_window
from tiles.fetcher import TileFetcher

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from domain.models import TileWindow
    from infrastructure.http.client import Transport

logger = logging.getLogger(__name__)


class TileLoader:
    """Loads the tiles of a square window around a geographic point.

    Usage:
        loader = TileLoader(
            'https://tile.openstreetmap.org/{z}/{x}/{y}.png',
            latitude=52.52, longitude=13.40, zoom=17, blocks=2,
        )
        for tile in loader.start():
            print(tile.x, tile.y, tile.image_path)
        loader.close()
    """

    def __init__(
        self,
        service: str,
        latitude: float,
        longitude: float,
        zoom: int,
        blocks: int,
        *,
        cache_root: str | Path | None = None,
        transport: Transport | None = None,
    ) -> None:
        """Validate the request and prepare the cache namespace.

        Args:
            service: Tile server URL template with {x}, {y}, {z} placeholders.
            latitude: Latitude of the origin (degrees, |lat| <= 85.0511).
            longitude: Longitude of the origin (degrees, |lon| <= 180).
            zoom: Zoom level, 0..31.
            blocks: Number of tile rings to load around the centre tile.
            cache_root: Base cache directory. Defaults to TILE_CACHE_DIR.
            transport: Blocking HTTP transport. Defaults to AiohttpTransport,
                which is then closed by close().

        Raises:
            InvalidArgumentError: coordinates, zoom or blocks out of range.
            CacheInitializationError: cache directory cannot be created.
        """
        self.context = TileRequestContext(
            service=service,
            latitude=latitude,
            longitude=longitude,
            zoom=zoom,
            blocks=blocks,
        )
        self.centre = CentreTile.from_context(self.context)
        self.cache = TileDiskCache(cache_root, service)

        self._owns_transport = transport is None
        if transport is None:
            transport = AiohttpTransport()
        self.fetcher = TileFetcher(transport, service)

        self._tiles: tuple[MapTile, ...] = ()
        self.last_report = LoadReport()

    # --- Session parameters
    @property
    def object_uri(self) -> str:
        """Path to tiles on the server."""
        return self.context.service

    @property
    def zoom(self) -> int:
        return self.context.zoom

    @property
    def blocks(self) -> int:
        return self.context.blocks

    @property
    def center_tile_x(self) -> int:
        return self.centre.x

    @property
    def center_tile_y(self) -> int:
        return self.centre.y

    @property
    def origin_offset_x(self) -> float:
        """Fraction of a tile to offset the origin (X)."""
        return self.centre.offset_x

    @property
    def origin_offset_y(self) -> float:
        """Fraction of a tile to offset the origin (Y)."""
        return self.centre.offset_y

    @property
    def window(self) -> TileWindow:
        return compute_window(self.centre.x, self.centre.y, self.blocks, self.zoom)

    @property
    def tiles(self) -> tuple[MapTile, ...]:
        """Tiles produced by the last start(); empty after abort()."""
        return self._tiles

    def resolution(self) -> float:
        """Meters/pixel of the tiles at the session latitude."""
        return zoom_to_resolution(self.context.latitude, self.zoom)

    def inside_centre_tile(self, lat: float, lon: float) -> bool:
        """Test if (lat, lon) falls inside the centre tile at the session zoom."""
        x, y = lat_lon_to_tile_coords(lat, lon, self.zoom)
        return math.floor(x) == self.centre.x and math.floor(y) == self.centre.y

    # --- Loading
    def start(
        self,
        on_progress: Callable[[int, int], None] | None = None,
    ) -> tuple[MapTile, ...]:
        """
        Load every tile of the window, from the cache where possible.

        Tiles that fail to download are logged and left out; the scan always
        runs to the end of the window.

        Args:
            on_progress: Called as on_progress(done, total) after each index.

        Returns:
            The loaded tiles in row-major window order.

        """
        # discard previous set of tiles
        self.abort()

        window = self.window
        zoom = self.zoom
        report = LoadReport(requested=window.count)
        logger.info(
            'Loading %d blocks around tile (%d, %d) at zoom %d: x=[%d, %d] y=[%d, %d]',
            self.blocks,
            self.centre.x,
            self.centre.y,
            zoom,
            window.min_x,
            window.max_x,
            window.min_y,
            window.max_y,
        )

        loaded: list[MapTile] = []
        for done, (x, y) in enumerate(iter_window(window), start=1):
            tile = self._load_tile(x, y, zoom, report)
            if tile is not None:
                loaded.append(tile)
            if on_progress is not None:
                on_progress(done, window.count)

        self._tiles = tuple(loaded)
        self.last_report = report
        logger.info(
            'Loaded %d/%d tiles (%d from cache, %d downloaded, %d failed)',
            report.loaded,
            report.requested,
            report.cache_hits,
            report.downloaded,
            report.failed,
        )
        return self._tiles

    def _load_tile(self, x: int, y: int, z: int, report: LoadReport) -> MapTile | None:
        path = self.cache.path_for_tile(x, y, z)
        if path.is_file():
            logger.debug('Cache hit for tile z/x/y=%d/%d/%d', z, x, y)
            report.cache_hits += 1
            return MapTile(x=x, y=y, z=z, image_path=path)

        try:
            data = self.fetcher.fetch(x, y, z)
        except TileFetchError as e:
            logger.warning('Failed loading %s with code %d', e.url, e.status)
            report.failed += 1
            report.failed_tiles.append((x, y))
            return None

        try:
            path = self.cache.write(x, y, z, data)
        except OSError as e:
            logger.error('Failed to cache tile z/x/y=%d/%d/%d at %s: %s', z, x, y, path, e)
            report.failed += 1
            report.failed_tiles.append((x, y))
            return None
        report.downloaded += 1
        return MapTile(x=x, y=y, z=z, image_path=path)

    def abort(self) -> None:
        """Discard the current set of tiles."""
        self._tiles = ()

    def close(self) -> None:
        """Close the transport if this loader created it."""
        if self._owns_transport:
            close = getattr(self.fetcher.transport, 'close', None)
            if callable(close):
                close()

    def __enter__(self) -> TileLoader:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
