"""
Проекция Web Mercator для схемы тайлов «slippy map».

Формулы: https://wiki.openstreetmap.org/wiki/Slippy_map_tilenames
"""

from __future__ import annotations

import math

from domain.errors import InvalidArgumentError
from shared.constants import (
    EQUATOR_RESOLUTION_M_PX,
    MAX_ZOOM,
    MERCATOR_LAT_LIMIT_DEG,
    WORLD_LNG_HALF_SPAN_DEG,
    WORLD_LNG_SPAN_DEG,
)


def validate_zoom(zoom: int) -> None:
    if zoom < 0 or zoom > MAX_ZOOM:
        msg = f'Zoom level {zoom} too high' if zoom > MAX_ZOOM else f'Zoom level {zoom} invalid'
        raise InvalidArgumentError(msg)


def validate_coordinates(lat: float, lon: float, zoom: int) -> None:
    """Проверяет, что (lat, lon, zoom) лежат в области определения проекции."""
    validate_zoom(zoom)
    if not (-MERCATOR_LAT_LIMIT_DEG <= lat <= MERCATOR_LAT_LIMIT_DEG):
        msg = f'Latitude {lat} invalid'
        raise InvalidArgumentError(msg)
    if not (-WORLD_LNG_HALF_SPAN_DEG <= lon <= WORLD_LNG_HALF_SPAN_DEG):
        msg = f'Longitude {lon} invalid'
        raise InvalidArgumentError(msg)


def lat_lon_to_tile_coords(lat: float, lon: float, zoom: int) -> tuple[float, float]:
    """
    Преобразует WGS84 (lat, lon) в дробные координаты тайла на уровне zoom.

    Целая часть результата: индекс тайла, дробная: положение точки
    внутри тайла (0..1 от северо-западного угла).

    Raises:
        InvalidArgumentError: zoom > 31, |lat| > 85.0511 или |lon| > 180

    """
    validate_coordinates(lat, lon, zoom)
    lat_rad = math.radians(lat)
    n = 1 << zoom
    x = n * ((lon + WORLD_LNG_HALF_SPAN_DEG) / WORLD_LNG_SPAN_DEG)
    y = n * (1 - (math.log(math.tan(lat_rad) + 1 / math.cos(lat_rad)) / math.pi)) / 2
    return x, y


def tile_coords_to_lat_lon(x: float, y: float, zoom: int) -> tuple[float, float]:
    """Обратное преобразование: дробные координаты тайла -> WGS84 (lat, lon)."""
    validate_zoom(zoom)
    n = 1 << zoom
    lon = x / n * WORLD_LNG_SPAN_DEG - WORLD_LNG_HALF_SPAN_DEG
    lat = math.degrees(math.atan(math.sinh(math.pi * (1 - 2 * y / n))))
    return lat, lon


def zoom_to_resolution(lat: float, zoom: int) -> float:
    """Возвращает метров на пиксель (тайл 256 px) на заданной широте и зуме."""
    lat_rad = math.radians(lat)
    return EQUATOR_RESOLUTION_M_PX * math.cos(lat_rad) / (1 << zoom)


def max_tile_index(zoom: int) -> int:
    """Наибольший допустимый индекс тайла по любой оси на уровне zoom."""
    return (1 << zoom) - 1
