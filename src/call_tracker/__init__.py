"""Wrap asynchronous calls with start/complete/error telemetry and dependency timing."""

from .errors import InvalidArgumentError
from .models import DependencyType, EventTags, TrackedCall
from .telemetry import TelemetrySink
from .tracking import CallTracker, PassThroughService, TrackingService

__all__ = [
    "CallTracker",
    "DependencyType",
    "EventTags",
    "InvalidArgumentError",
    "PassThroughService",
    "TelemetrySink",
    "TrackedCall",
    "TrackingService",
]
