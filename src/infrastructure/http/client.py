from __future__ import annotations

import logging
import ssl
from urllib.parse import urlsplit

import aiohttp
import certifi

from domain.errors import RemoteUnreachable
from shared.constants import HTTP_OK, HTTP_TIMEOUT_DEFAULT

logger = logging.getLogger(__name__)


def make_http_session() -> aiohttp.ClientSession:
    # SSL context with the certifi CA bundle
    ssl_context = ssl.create_default_context(cafile=certifi.where())
    connector = aiohttp.TCPConnector(ssl=ssl_context)
    return aiohttp.ClientSession(connector=connector)


def loggable_url(url: str) -> str:
    """URL without its query string, so tokens never reach the log."""
    parts = urlsplit(url)
    return f'{parts.scheme}://{parts.netloc}{parts.path}'


async def fetch_bytes(
    client: aiohttp.ClientSession,
    url: str,
    *,
    timeout: float = HTTP_TIMEOUT_DEFAULT,
) -> bytes:
    """
    GET url and return the body.

    Raises RemoteUnreachable on transport errors, timeouts and any status
    other than 200.
    """
    path = loggable_url(url)
    logger.debug('GET %s', path)
    try:
        async with client.get(
            url, timeout=aiohttp.ClientTimeout(total=timeout)
        ) as resp:
            if resp.status != HTTP_OK:
                msg = f'HTTP {resp.status} from {path}'
                raise RemoteUnreachable(msg)
            return await resp.read()
    except (TimeoutError, aiohttp.ClientError) as e:
        msg = f'Could not connect to {path}: {e}'
        raise RemoteUnreachable(msg) from None
