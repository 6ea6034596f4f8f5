"""Domain layer - tile models and errors.

Models live in domain.models; only the error types are re-exported here
because geo.projection depends on them.
"""
from domain.errors import (
    CacheInitializationError,
    InvalidArgumentError,
    TileFetchError,
    TileLoaderError,
)

__all__ = [
    'CacheInitializationError',
    'InvalidArgumentError',
    'TileFetchError',
    'TileLoaderError',
]
