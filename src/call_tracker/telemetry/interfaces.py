"""Contract for the telemetry backend receiving tracked-call records."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Protocol

from call_tracker.models import EventTags


class TelemetrySink(Protocol):
    """Receives events, dependency records and exceptions from a tracker.

    Implementations must tolerate concurrent calls from simultaneous tracked
    calls; the tracker does no locking of its own.
    """

    def emit_event(self, name: str, tags: EventTags, metrics: Mapping[str, float] | None = None) -> None:
        """Publish a named event tagged with the operation and correlation id."""

    def emit_dependency(
        self,
        name: str,
        dependency_type: str,
        target: str | None,
        data: str | None,
        timestamp: datetime,
        duration: timedelta,
        result_code: str | None = None,
        success: bool | None = None,
    ) -> None:
        """Publish one dependency record with its timing and outcome."""

    def emit_exception(self, error: BaseException) -> None:
        """Publish an exception raised by tracked work."""
