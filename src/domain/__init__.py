"""Domain models and errors."""

from domain.errors import (
    ConnectivityFailure,
    DecodeFailure,
    InternalError,
    LocationServiceError,
    OfflineDenied,
    ParseFailure,
    RemoteUnreachable,
    ServiceBusy,
    TileFetchFailure,
)
from domain.models import Address, Coordinate, MapTile, ServiceSettings

__all__ = [
    'Address',
    'ConnectivityFailure',
    'Coordinate',
    'DecodeFailure',
    'InternalError',
    'LocationServiceError',
    'MapTile',
    'OfflineDenied',
    'ParseFailure',
    'RemoteUnreachable',
    'ServiceBusy',
    'ServiceSettings',
    'TileFetchFailure',
]
