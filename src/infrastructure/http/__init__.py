"""HTTP client infrastructure."""
from infrastructure.http.client import (
    fetch_bytes,
    loggable_url,
    make_http_session,
)

__all__ = [
    'fetch_bytes',
    'loggable_url',
    'make_http_session',
]
