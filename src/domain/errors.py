"""Error taxonomy of the location service.

Synchronous denials are raised straight out of the dispatcher; everything
else is converted into the job's single error outcome by the worker.
"""

from __future__ import annotations


class LocationServiceError(Exception):
    """Base class for every failure the service reports to callers."""

    code = 'error'

    def __init__(self, message: str = '') -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class OfflineDenied(LocationServiceError):
    """Request refused before any network attempt."""

    code = 'offline_denied'


class ServiceBusy(LocationServiceError):
    """Job queue is full."""

    code = 'service_busy'


class ConnectivityFailure(LocationServiceError):
    """Network became unavailable while the job was running."""

    code = 'connectivity_failure'


class RemoteUnreachable(LocationServiceError):
    """Transport failure or non-success HTTP status."""

    code = 'remote_unreachable'


class ParseFailure(LocationServiceError):
    """Response matched no known schema or lacked a required field."""

    code = 'parse_failure'


class TileFetchFailure(LocationServiceError):
    """At least one tile of the covering grid could not be materialized."""

    code = 'tile_fetch_failure'


class DecodeFailure(LocationServiceError):
    """Image bytes could not be decoded."""

    code = 'decode_failure'


class InternalError(LocationServiceError):
    code = 'internal'
