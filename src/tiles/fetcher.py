from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from domain.errors import TileFetchError
from tiles.urls import uri_for_tile

if TYPE_CHECKING:
    from infrastructure.http.client import Transport

logger = logging.getLogger(__name__)


class TileFetcher:
    """Downloads single tiles of one tile server through a blocking transport."""

    def __init__(self, transport: Transport, template: str) -> None:
        self.transport = transport
        self.template = template
        self._stats_downloads = 0
        self._stats_errors = 0

    @property
    def stats(self) -> dict[str, int]:
        return {
            'downloads': self._stats_downloads,
            'errors': self._stats_errors,
        }

    def url_for(self, x: int, y: int, z: int) -> str:
        return uri_for_tile(self.template, x, y, z)

    def fetch(self, x: int, y: int, z: int) -> bytes:
        """
        Download tile [x, y, z] and return its raw bytes.

        Raises:
            TileFetchError: the server answered with anything but 200,
                or the transport got no response at all (status 0).

        """
        url = self.url_for(x, y, z)
        resp = self.transport.get(url)
        if not resp.ok:
            self._stats_errors += 1
            raise TileFetchError(url, resp.status)
        self._stats_downloads += 1
        logger.debug('Downloaded %s (%d bytes)', url, len(resp.body))
        return resp.body
