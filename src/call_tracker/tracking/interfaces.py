"""Capability shared by the tracking and pass-through implementations."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

from .work import DeferredWork

T = TypeVar("T")


class CallTracker(Protocol):
    """Wraps deferred work and returns its result or raises its failure unchanged."""

    async def track_http_call(
        self,
        method: str,
        uri: Any,
        work: DeferredWork[T],
        *,
        correlation_id: str | None = None,
    ) -> T:
        """Track an outbound HTTP call described by method and absolute URI."""

    async def track_http_request(
        self,
        request: Any,
        work: DeferredWork[T],
        *,
        correlation_id: str | None = None,
    ) -> T:
        """Track an outbound HTTP call described by a request object."""

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
        """Track a call returning a value."""

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
        """Track a call with no meaningful return value."""
