"""Geo module - Web Mercator tile projection."""

from .projection import (
    lat_lon_to_tile_coords,
    max_tile_index,
    tile_coords_to_lat_lon,
    validate_coordinates,
    zoom_to_resolution,
)

__all__ = [
    'lat_lon_to_tile_coords',
    'max_tile_index',
    'tile_coords_to_lat_lon',
    'validate_coordinates',
    'zoom_to_resolution',
]
