"""Telemetry sink contract and reference sinks."""

from .interfaces import TelemetrySink
from .jsonl import JsonlSink
from .logging import LoggingSink
from .memory import InMemorySink, SinkEntry, SinkEntryKind

__all__ = [
    "InMemorySink",
    "JsonlSink",
    "LoggingSink",
    "SinkEntry",
    "SinkEntryKind",
    "TelemetrySink",
]
