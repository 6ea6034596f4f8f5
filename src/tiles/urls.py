from __future__ import annotations

import re

_X_RE = re.compile(re.escape('{x}'), re.IGNORECASE)
_Y_RE = re.compile(re.escape('{y}'), re.IGNORECASE)
_Z_RE = re.compile(re.escape('{z}'), re.IGNORECASE)


def uri_for_tile(template: str, x: int, y: int, z: int) -> str:
    """
    Substitute tile indices into a URL template.

    Every occurrence of {x}, {y} and {z} (in any letter case) is replaced.
    The result is not validated; a malformed template shows up later as a
    failed fetch.
    """
    url = _X_RE.sub(str(x), template)
    url = _Y_RE.sub(str(y), url)
    return _Z_RE.sub(str(z), url)
