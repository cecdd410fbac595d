"""Deferred units of work handed to a tracker."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import TypeVar, Union

T = TypeVar("T")

DeferredWork = Callable[[], Union[Awaitable[T], T]]
"""Zero-argument callable run exactly once by the tracker; never retried or memoized."""


async def invoke(work: DeferredWork[T]) -> T:
    """Call ``work`` once and await its outcome when it is awaitable."""
    outcome = work()
    if inspect.isawaitable(outcome):
        return await outcome
    return outcome
