"""Tracker used when telemetry is disabled: runs work and returns its outcome verbatim."""

from __future__ import annotations

from typing import Any, TypeVar

from .work import DeferredWork, invoke

T = TypeVar("T")


class PassThroughService:
    """Same surface as ``TrackingService`` with no telemetry and no timing."""

    async def track_http_call(
        self,
        method: str,
        uri: Any,
        work: DeferredWork[T],
        *,
        correlation_id: str | None = None,
    ) -> T:
        return await invoke(work)

    async def track_http_request(
        self,
        request: Any,
        work: DeferredWork[T],
        *,
        correlation_id: str | None = None,
    ) -> T:
        return await invoke(work)

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
        return await invoke(work)

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
        await invoke(work)
