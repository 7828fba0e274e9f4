"""Services package - job model, worker, dispatcher and result delivery."""

from services.context import ServiceContext
from services.dispatcher import RequestDispatcher
from services.jobs import (
    ForwardGeocodePayload,
    Job,
    JobKind,
    JobOutcome,
    MapTilePayload,
    ReverseGeocodePayload,
)
from services.location_service import LocationService
from services.notifier import CallbackSink, FutureSink, LoggingSink, ResultSink
from services.worker import Worker

__all__ = [
    'CallbackSink',
    'ForwardGeocodePayload',
    'FutureSink',
    'Job',
    'JobKind',
    'JobOutcome',
    'LocationService',
    'LoggingSink',
    'MapTilePayload',
    'RequestDispatcher',
    'ResultSink',
    'ReverseGeocodePayload',
    'ServiceContext',
    'Worker',
]
