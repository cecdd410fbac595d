"""Composition root: choose the sink and the tracker variant from settings."""

from __future__ import annotations

from call_tracker.config import Settings, settings
from call_tracker.telemetry import InMemorySink, JsonlSink, LoggingSink, TelemetrySink
from call_tracker.tracking import CallTracker, PassThroughService, TrackingService


def build_sink(config: Settings | None = None) -> TelemetrySink:
    config = config or settings
    backend = config.sink_backend.strip().lower()
    if backend == "logging":
        return LoggingSink()
    if backend == "jsonl":
        return JsonlSink(config.sink_path)
    if backend == "memory":
        return InMemorySink()
    raise ValueError(f"Unknown telemetry sink backend: {config.sink_backend}")


def build_tracker(config: Settings | None = None, sink: TelemetrySink | None = None) -> CallTracker:
    config = config or settings
    if not config.telemetry_enabled:
        return PassThroughService()
    return TrackingService(
        sink if sink is not None else build_sink(config),
        raise_sink_errors=config.raise_sink_errors,
    )
