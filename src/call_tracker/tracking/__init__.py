"""Call tracking core: tracking and pass-through implementations of one capability."""

from .http import HttpCallDescription, describe_http_call
from .interfaces import CallTracker
from .passthrough import PassThroughService
from .service import TrackingService
from .work import DeferredWork, invoke

__all__ = [
    "CallTracker",
    "DeferredWork",
    "HttpCallDescription",
    "PassThroughService",
    "TrackingService",
    "describe_http_call",
    "invoke",
]
