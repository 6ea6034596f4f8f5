from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from domain.errors import InvalidArgumentError
from geo.projection import lat_lon_to_tile_coords, validate_coordinates

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@dataclass(frozen=True)
class TileRequestContext:
    """Неизменяемые параметры сессии загрузки тайлов."""

    service: str
    latitude: float
    longitude: float
    zoom: int
    blocks: int

    def __post_init__(self) -> None:
        validate_coordinates(self.latitude, self.longitude, self.zoom)
        if self.blocks < 0:
            msg = f'Blocks {self.blocks} invalid'
            raise InvalidArgumentError(msg)


@dataclass(frozen=True)
class CentreTile:
    """Центральный тайл и дробное смещение исходной точки внутри него."""

    x: int
    y: int
    offset_x: float
    offset_y: float

    @classmethod
    def from_context(cls, ctx: TileRequestContext) -> CentreTile:
        fx, fy = lat_lon_to_tile_coords(ctx.latitude, ctx.longitude, ctx.zoom)
        x = math.floor(fx)
        y = math.floor(fy)
        return cls(x=x, y=y, offset_x=fx - x, offset_y=fy - y)


@dataclass(frozen=True)
class MapTile:
    """A tile whose image bytes are present on disk."""

    x: int
    y: int
    z: int
    image_path: Path


@dataclass(frozen=True)
class TileWindow:
    """Inclusive rectangle of tile indices."""

    min_x: int
    max_x: int
    min_y: int
    max_y: int

    @property
    def width(self) -> int:
        return max(0, self.max_x - self.min_x + 1)

    @property
    def height(self) -> int:
        return max(0, self.max_y - self.min_y + 1)

    @property
    def count(self) -> int:
        return self.width * self.height

    def indices(self) -> Iterator[tuple[int, int]]:
        """Yield (x, y) row-major: y outer, x inner, both ascending."""
        for y in range(self.min_y, self.max_y + 1):
            for x in range(self.min_x, self.max_x + 1):
                yield x, y

    def __contains__(self, xy: object) -> bool:
        if not isinstance(xy, tuple) or len(xy) != 2:
            return False
        x, y = xy
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


@dataclass
class LoadReport:
    """Counters collected during one load of the tile window."""

    requested: int = 0
    cache_hits: int = 0
    downloaded: int = 0
    failed: int = 0
    failed_tiles: list[tuple[int, int]] = field(default_factory=list)

    @property
    def loaded(self) -> int:
        return self.cache_hits + self.downloaded
