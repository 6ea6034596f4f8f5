"""File-based tile cache namespaced by tile server.

Every tile server URL template gets its own directory under the cache root,
named by the SHA-256 digest of the template. Tiles inside it are plain image
files named after their (x, y, z) index:

    <cache_root>/<sha256(template)>/x<X>_y<Y>_z<Z>.jpg

The layout is stable across runs so repeated sessions against the same
server reuse previously downloaded tiles. Presence of the file is the only
validity check; the cache is never evicted.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path

from domain.errors import CacheInitializationError
from shared.constants import TILE_CACHE_DIR, TILE_FILENAME_GLOB, TILE_FILENAME_TEMPLATE

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Statistics about one cache namespace."""

    total_tiles: int
    total_size_bytes: int


def cache_namespace(template: str) -> str:
    """Stable directory name for a tile server URL template."""
    return hashlib.sha256(template.encode('utf-8')).hexdigest()


def cached_name_for_tile(x: int, y: int, z: int) -> str:
    return TILE_FILENAME_TEMPLATE.format(x=x, y=y, z=z)


class TileDiskCache:
    """On-disk tile storage for a single tile server.

    Usage:
        cache = TileDiskCache('/var/cache/tiles', 'https://host/{z}/{x}/{y}.png')
        if not cache.exists(x=10, y=20, z=5):
            cache.write(x=10, y=20, z=5, data=tile_bytes)
        path = cache.path_for_tile(x=10, y=20, z=5)
    """

    def __init__(self, cache_root: str | Path | None, template: str) -> None:
        """Create (idempotently) the namespace directory for template.

        Args:
            cache_root: Base cache directory. Defaults to TILE_CACHE_DIR.
            template: Tile server URL template the namespace is keyed on.

        Raises:
            CacheInitializationError: the directory cannot be created.
        """
        self.cache_root = Path(cache_root or TILE_CACHE_DIR)
        self.template = template
        self.namespace = cache_namespace(template)
        self.cache_dir = self.cache_root / self.namespace
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f'Cannot create tile cache directory {self.cache_dir}: {e}'
            raise CacheInitializationError(msg) from e
        logger.info('Tile cache for %s at %s', template, self.cache_dir)

    def path_for_tile(self, x: int, y: int, z: int) -> Path:
        """Get file path for cached tile [x, y, z]."""
        return self.cache_dir / cached_name_for_tile(x, y, z)

    def exists(self, x: int, y: int, z: int) -> bool:
        """Check if a tile file is present in the cache."""
        return self.path_for_tile(x, y, z).is_file()

    def write(self, x: int, y: int, z: int, data: bytes) -> Path:
        """Store tile bytes verbatim, replacing any previous file.

        Returns:
            Path of the written file.
        """
        path = self.path_for_tile(x, y, z)
        path.write_bytes(data)
        logger.debug('Cached tile z/x/y=%d/%d/%d (%d bytes)', z, x, y, len(data))
        return path

    def get_stats(self) -> CacheStats:
        """Count tile files and their total size in this namespace."""
        total_tiles = 0
        total_size = 0
        for tile_file in self.cache_dir.glob(TILE_FILENAME_GLOB):
            if tile_file.is_file():
                total_tiles += 1
                total_size += tile_file.stat().st_size
        return CacheStats(total_tiles=total_tiles, total_size_bytes=total_size)
