"""Network reachability gating."""

from connectivity.gate import ConnectivityGate, LinkError, LinkStatus, ReachabilityMonitor
from connectivity.monitor import HttpProbeMonitor, StaticMonitor

__all__ = [
    'ConnectivityGate',
    'HttpProbeMonitor',
    'LinkError',
    'LinkStatus',
    'ReachabilityMonitor',
    'StaticMonitor',
]
