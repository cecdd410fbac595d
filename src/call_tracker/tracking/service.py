"""Tracker that reports start, completion and failure of deferred work to a sink."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, TypeVar

from call_tracker.errors import InvalidArgumentError
from call_tracker.models import (
    COMPLETE_PREFIX,
    DURATION_METRIC,
    ERROR_PREFIX,
    START_PREFIX,
    DependencyType,
    TrackedCall,
    dependency_type_name,
    event_name,
)
from call_tracker.telemetry.interfaces import TelemetrySink

from .http import describe_http_call, request_method_and_url, response_status
from .work import DeferredWork, invoke

T = TypeVar("T")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TrackingService:
    """Emits ``start -> (dependency, complete) | (exception, error)`` around each call.

    Results and exceptions from the wrapped work are returned or re-raised
    untouched. Sink failures are logged and swallowed unless
    ``raise_sink_errors`` is set, in which case they propagate to the caller.
    """

    def __init__(
        self,
        sink: TelemetrySink,
        *,
        clock: Callable[[], datetime] | None = None,
        raise_sink_errors: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        if sink is None:
            raise InvalidArgumentError("A telemetry sink is required")
        self._sink = sink
        self._clock = clock or _utc_now
        self._raise_sink_errors = raise_sink_errors
        self._logger = logger or logging.getLogger("call_tracker.tracking")

    async def track_http_call(
        self,
        method: str,
        uri: Any,
        work: DeferredWork[T],
        *,
        correlation_id: str | None = None,
    ) -> T:
        description = describe_http_call(method, uri)
        _require_callable(work)
        return await self._track(
            name=description.name,
            dependency_type=DependencyType.WEB_API,
            work=work,
            correlation_id=correlation_id,
            target=description.target,
            data=description.data,
            result_code=response_status,
        )

    async def track_http_request(
        self,
        request: Any,
        work: DeferredWork[T],
        *,
        correlation_id: str | None = None,
    ) -> T:
        method, url = request_method_and_url(request)
        return await self.track_http_call(method, url, work, correlation_id=correlation_id)

    async def track_call(
        self,
        name: str,
        dependency_type: str,
        work: DeferredWork[T],
        *,
        correlation_id: str | None = None,
        target: str | None = None,
        data: str | None = None,
    ) -> T:
        _require_text(name, "name")
        _require_text(dependency_type, "dependency_type")
        _require_callable(work)
        return await self._track(
            name=name,
            dependency_type=dependency_type,
            work=work,
            correlation_id=correlation_id,
            target=target,
            data=data,
        )

    async def track_action(
        self,
        name: str,
        dependency_type: str,
        work: DeferredWork[Any],
        *,
        correlation_id: str | None = None,
        target: str | None = None,
        data: str | None = None,
    ) -> None:
        await self.track_call(
            name,
            dependency_type,
            work,
            correlation_id=correlation_id,
            target=target,
            data=data,
        )

    async def _track(
        self,
        *,
        name: str,
        dependency_type: str | DependencyType,
        work: DeferredWork[T],
        correlation_id: str | None,
        target: str | None,
        data: str | None,
        result_code: Callable[[T], str | None] | None = None,
    ) -> T:
        call = TrackedCall(
            name=name,
            dependency_type=dependency_type_name(dependency_type),
            start_time=self._clock(),
            correlation_id=correlation_id,
            target=target,
            data=data,
        )
        self._emit("event", self._sink.emit_event, event_name(START_PREFIX, call.name), call.tags)

        try:
            result = await invoke(work)
        except BaseException as exc:
            # Cancellation is reported as a failure too; exactly one terminal outcome per call.
            call.success = False
            self._logger.debug(
                "tracked_call_failed",
                extra={"operation_name": call.name, "error_type": type(exc).__name__},
            )
            self._emit("exception", self._sink.emit_exception, exc)
            self._emit("event", self._sink.emit_event, event_name(ERROR_PREFIX, call.name), call.tags)
            raise

        call.duration = self._clock() - call.start_time
        call.success = True
        if result_code is not None:
            call.result_code = self._result_code(result_code, result)

        self._emit(
            "dependency",
            self._sink.emit_dependency,
            call.name,
            call.dependency_type,
            call.target,
            call.data,
            call.start_time,
            call.duration,
            result_code=call.result_code,
            success=call.success,
        )
        self._emit(
            "event",
            self._sink.emit_event,
            event_name(COMPLETE_PREFIX, call.name),
            call.tags,
            {DURATION_METRIC: call.duration_ms},
        )
        self._logger.debug(
            "tracked_call_completed",
            extra={"operation_name": call.name, "duration_ms": call.duration_ms},
        )
        return result

    def _result_code(self, read: Callable[[T], str | None], result: T) -> str | None:
        try:
            return read(result)
        except Exception:
            self._logger.warning("result_code_unavailable", exc_info=True)
            return None

    def _emit(self, kind: str, emit: Callable[..., None], *args: Any, **kwargs: Any) -> None:
        try:
            emit(*args, **kwargs)
        except Exception:
            if self._raise_sink_errors:
                raise
            self._logger.warning("telemetry_sink_failed", extra={"emission": kind}, exc_info=True)


def _require_text(value: str | None, argument: str) -> None:
    if value is None or not str(value).strip():
        raise InvalidArgumentError(f"{argument} is required")


def _require_callable(work: Any) -> None:
    if not callable(work):
        raise InvalidArgumentError("work must be a zero-argument callable")
