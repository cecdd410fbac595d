from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

START_PREFIX = "[CALLING]"
COMPLETE_PREFIX = "[CALLED]"
ERROR_PREFIX = "[ERROR]"
DURATION_METRIC = "Duration"


class DependencyType(str, Enum):
    WEB_API = "WebAPI"


@dataclass(slots=True, frozen=True)
class EventTags:
    operation_name: str
    correlation_id: str | None = None

    @classmethod
    def for_call(cls, operation_name: str, correlation_id: str | None) -> EventTags:
        if correlation_id is not None and not correlation_id.strip():
            correlation_id = None
        return cls(operation_name=operation_name, correlation_id=correlation_id)


@dataclass(slots=True)
class TrackedCall:
    """One instrumented invocation, filled in as the call progresses."""

    name: str
    dependency_type: str
    start_time: datetime
    correlation_id: str | None = None
    target: str | None = None
    data: str | None = None
    duration: timedelta | None = None
    result_code: str | None = None
    success: bool | None = None

    @property
    def tags(self) -> EventTags:
        return EventTags.for_call(self.name, self.correlation_id)

    @property
    def duration_ms(self) -> float | None:
        if self.duration is None:
            return None
        return self.duration.total_seconds() * 1000


def event_name(prefix: str, operation_name: str) -> str:
    return f"{prefix} {operation_name}"


def dependency_type_name(value: str | DependencyType) -> str:
    if isinstance(value, DependencyType):
        return value.value
    return value
