from __future__ import annotations

import ssl

import aiohttp
import certifi

# Defaults for elevation lookups (one batch may cover thousands of points)
DEFAULT_TIMEOUT_S = 60.0
DEFAULT_CONNECT_TIMEOUT_S = 10.0


def make_http_session(
    timeout_s: float = DEFAULT_TIMEOUT_S,
    connect_timeout_s: float = DEFAULT_CONNECT_TIMEOUT_S,
) -> aiohttp.ClientSession:
    """Create an aiohttp session with certifi CA bundle and default timeouts.

    The caller owns the session and must close it (``async with`` works).
    """
    ssl_context = ssl.create_default_context(cafile=certifi.where())
    connector = aiohttp.TCPConnector(ssl=ssl_context)
    timeout = aiohttp.ClientTimeout(
        total=timeout_s, connect=connect_timeout_s, sock_connect=connect_timeout_s
    )
    return aiohttp.ClientSession(connector=connector, timeout=timeout)
