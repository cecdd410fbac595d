"""Telemetry sink that writes structured records through stdlib logging."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta

from call_tracker.models import EventTags


class LoggingSink:
    """Reports events, dependencies and exceptions as structured log records."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("call_tracker.telemetry")

    def emit_event(self, name: str, tags: EventTags, metrics: Mapping[str, float] | None = None) -> None:
        self._logger.info(
            "telemetry_event",
            extra={
                "event": name,
                "operation_name": tags.operation_name,
                "correlation_id": tags.correlation_id,
                "metrics": dict(metrics or {}),
            },
        )

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
        self._logger.info(
            "telemetry_dependency",
            extra={
                "dependency_name": name,
                "dependency_type": dependency_type,
                "target": target,
                "data": data,
                "start_time": timestamp.isoformat(),
                "duration_ms": duration.total_seconds() * 1000,
                "result_code": result_code,
                "success": success,
            },
        )

    def emit_exception(self, error: BaseException) -> None:
        self._logger.error(
            "telemetry_exception",
            exc_info=error,
            extra={"error_type": type(error).__name__, "error_message": str(error)},
        )
