"""Exceptions raised by the tile loader."""


class TileLoaderError(Exception):
    """Base class for tile loader errors."""


class InvalidArgumentError(TileLoaderError, ValueError):
    """Zoom, latitude, longitude or block radius is outside its domain."""


class CacheInitializationError(TileLoaderError, RuntimeError):
    """The cache namespace directory could not be created."""


class TileFetchError(TileLoaderError, RuntimeError):
    """A single tile could not be downloaded."""

    def __init__(self, url: str, status: int) -> None:
        self.url = url
        self.status = status
        super().__init__(f'Failed loading {url} with code {status}')
