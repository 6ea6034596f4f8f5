from __future__ import annotations

from typing import TYPE_CHECKING

from domain.models import TileWindow
from geo.projection import max_tile_index

if TYPE_CHECKING:
    from collections.abc import Iterator


def compute_window(center_x: int, center_y: int, blocks: int, zoom: int) -> TileWindow:
    """
    Square window of tiles `blocks` rings around the centre tile.

    The window is clamped to the tile grid of the zoom level, so it never
    contains negative indices or indices past 2**zoom - 1.
    """
    max_index = max_tile_index(zoom)
    return TileWindow(
        min_x=max(0, center_x - blocks),
        max_x=min(max_index, center_x + blocks),
        min_y=max(0, center_y - blocks),
        max_y=min(max_index, center_y + blocks),
    )


def iter_window(window: TileWindow) -> Iterator[tuple[int, int]]:
    """Yield (x, y) in scan order (rows top to bottom, columns left to right)."""
    yield from window.indices()
