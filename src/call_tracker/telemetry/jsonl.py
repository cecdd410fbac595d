"""Simple JSONL-backed telemetry persistence."""

from __future__ import annotations

import json
import threading
import traceback
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from call_tracker.models import EventTags


class JsonlSink:
    """Appends one JSON object per emission to a local file."""

    def __init__(self, file_path: str | Path) -> None:
        self._path = Path(file_path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def emit_event(self, name: str, tags: EventTags, metrics: Mapping[str, float] | None = None) -> None:
        self._write(
            {
                "kind": "event",
                "name": name,
                "operation_name": tags.operation_name,
                "correlation_id": tags.correlation_id,
                "metrics": dict(metrics or {}),
            }
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
        self._write(
            {
                "kind": "dependency",
                "name": name,
                "type": dependency_type,
                "target": target,
                "data": data,
                "timestamp": timestamp.isoformat(),
                "duration_ms": duration.total_seconds() * 1000,
                "result_code": result_code,
                "success": success,
            }
        )

    def emit_exception(self, error: BaseException) -> None:
        self._write(
            {
                "kind": "exception",
                "name": type(error).__name__,
                "message": str(error),
                "traceback": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
            }
        )

    def list_recent(self, limit: int) -> list[dict[str, Any]]:
        """Return up to ``limit`` newest records."""
        if not self._path.exists():
            return []

        records: list[dict[str, Any]] = []
        with self._lock, self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                if not line.strip():
                    continue
                try:
                    records.append(json.loads(line))
                except json.JSONDecodeError:
                    continue

        records.reverse()
        return records[:limit]

    def _write(self, payload: dict[str, Any]) -> None:
        payload["recorded_at"] = datetime.now(timezone.utc).isoformat()
        line = json.dumps(payload) + "\n"
        with self._lock, self._path.open("a", encoding="utf-8") as handle:
            handle.write(line)
