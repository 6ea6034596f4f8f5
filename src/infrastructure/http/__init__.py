"""HTTP client infrastructure."""
from infrastructure.http.client import (
    AiohttpTransport,
    HttpResponse,
    Transport,
    make_http_session,
    resolve_cache_dir,
)

__all__ = [
    'AiohttpTransport',
    'HttpResponse',
    'Transport',
    'make_http_session',
    'resolve_cache_dir',
]
