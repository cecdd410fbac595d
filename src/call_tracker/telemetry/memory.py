"""In-memory telemetry sink used for tests, demos and the CLI probe."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from call_tracker.models import EventTags, TrackedCall


class SinkEntryKind(str, Enum):
    """What kind of emission a recorded entry came from."""

    EVENT = "event"
    DEPENDENCY = "dependency"
    EXCEPTION = "exception"


@dataclass(slots=True)
class SinkEntry:
    """A single recorded emission, in arrival order."""

    kind: SinkEntryKind
    name: str
    tags: EventTags | None = None
    metrics: dict[str, float] = field(default_factory=dict)
    call: TrackedCall | None = None
    error: BaseException | None = None


class InMemorySink:
    """Records every emission in order."""

    def __init__(self) -> None:
        self._entries: list[SinkEntry] = []
        self._lock = threading.Lock()

    @property
    def entries(self) -> list[SinkEntry]:
        with self._lock:
            return list(self._entries)

    def kinds(self) -> list[SinkEntryKind]:
        return [entry.kind for entry in self.entries]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def emit_event(self, name: str, tags: EventTags, metrics: Mapping[str, float] | None = None) -> None:
        self._append(SinkEntry(kind=SinkEntryKind.EVENT, name=name, tags=tags, metrics=dict(metrics or {})))

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
        call = TrackedCall(
            name=name,
            dependency_type=dependency_type,
            start_time=timestamp,
            target=target,
            data=data,
            duration=duration,
            result_code=result_code,
            success=success,
        )
        self._append(SinkEntry(kind=SinkEntryKind.DEPENDENCY, name=name, call=call))

    def emit_exception(self, error: BaseException) -> None:
        self._append(SinkEntry(kind=SinkEntryKind.EXCEPTION, name=type(error).__name__, error=error))

    def _append(self, entry: SinkEntry) -> None:
        with self._lock:
            self._entries.append(entry)
