from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import ssl
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import aiohttp
import certifi

from shared.constants import (
    HTTP_NO_RESPONSE,
    HTTP_OK,
    HTTP_TIMEOUT_DEFAULT,
    HTTP_USER_AGENT,
    TILE_CACHE_DIR,
)
from shared.portable import get_portable_path, is_portable_mode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Status and raw body of a finished GET request."""

    url: str
    status: int
    body: bytes = b''

    @property
    def ok(self) -> bool:
        return self.status == HTTP_OK


class Transport(Protocol):
    """Blocking HTTP GET primitive used by the tile fetcher."""

    def get(self, url: str) -> HttpResponse: ...


def resolve_cache_dir() -> Path:
    # Portable режим: кэш в папке приложения
    if is_portable_mode():
        return get_portable_path('cache/tiles')

    # Обычный режим
    raw_dir = Path(TILE_CACHE_DIR)
    if raw_dir.is_absolute():
        return raw_dir

    local = os.getenv('LOCALAPPDATA')
    if local:
        return (Path(local) / 'tileloader' / '.cache' / 'tiles').resolve()
    # Fallback: user's home directory
    return (Path.home() / '.tileloader_cache' / 'tiles').resolve()


def make_http_session(
    *,
    timeout_s: float = HTTP_TIMEOUT_DEFAULT,
    user_agent: str = HTTP_USER_AGENT,
) -> aiohttp.ClientSession:
    """Must be called with a running event loop."""
    # SSL-контекст с сертификатами из certifi
    ssl_context = ssl.create_default_context(cafile=certifi.where())
    connector = aiohttp.TCPConnector(ssl=ssl_context)
    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout_s),
        headers={'User-Agent': user_agent},
    )


class AiohttpTransport:
    """Blocking transport on top of aiohttp.

    Owns a private event loop and runs every request to completion before
    returning, so callers see a plain synchronous ``get``. Network errors
    are reported as status 0 with an empty body instead of raising.

    Usage:
        with AiohttpTransport(timeout_s=10) as transport:
            resp = transport.get('https://tile.openstreetmap.org/0/0/0.png')
    """

    def __init__(
        self,
        *,
        timeout_s: float = HTTP_TIMEOUT_DEFAULT,
        user_agent: str = HTTP_USER_AGENT,
    ) -> None:
        self.timeout_s = timeout_s
        self.user_agent = user_agent
        self._loop = asyncio.new_event_loop()
        self._session: aiohttp.ClientSession | None = None

    async def _get(self, url: str) -> HttpResponse:
        if self._session is None:
            self._session = make_http_session(
                timeout_s=self.timeout_s, user_agent=self.user_agent
            )
        try:
            async with self._session.get(url) as resp:
                body = await resp.read()
                return HttpResponse(url=url, status=resp.status, body=body)
        except (TimeoutError, asyncio.TimeoutError, aiohttp.ClientError) as e:
            logger.warning('Request to %s failed: %s', url, e)
            return HttpResponse(url=url, status=HTTP_NO_RESPONSE)

    def get(self, url: str) -> HttpResponse:
        if self._loop.is_closed():
            msg = 'Transport is closed'
            raise RuntimeError(msg)
        return self._loop.run_until_complete(self._get(url))

    def close(self) -> None:
        if self._loop.is_closed():
            return
        if self._session is not None:
            with contextlib.suppress(Exception):
                self._loop.run_until_complete(self._session.close())
            self._session = None
        self._loop.close()

    def __enter__(self) -> AiohttpTransport:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
