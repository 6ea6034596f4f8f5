"""Tile caching and loading.

This module provides:
- TileDiskCache: per-server on-disk tile storage
- TileFetcher: blocking download of single tiles
- TileLoader: centre tile + surrounding window materialization
"""

from tiles.cache import CacheStats, TileDiskCache, cache_namespace
from tiles.coverage import compute_window, iter_window
from tiles.fetcher import TileFetcher
from tiles.loader import TileLoader
from tiles.urls import uri_for_tile

__all__ = [
    'CacheStats',
    'TileDiskCache',
    'TileFetcher',
    'TileLoader',
    'cache_namespace',
    'compute_window',
    'iter_window',
    'uri_for_tile',
]
