"""Derive dependency fields for outbound HTTP calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from call_tracker.errors import InvalidArgumentError


@dataclass(slots=True, frozen=True)
class HttpCallDescription:
    """Name, target and data recorded for one HTTP dependency."""

    name: str
    target: str
    data: str | None


def describe_http_call(method: str | None, uri: Any) -> HttpCallDescription:
    """Validate ``method``/``uri`` and build the dependency description.

    ``uri`` may be a string or any URL object whose ``str()`` is an absolute URL
    (``httpx.URL`` for instance). The name is ``"{METHOD} {path}"``, the target
    is the host and the data is the query string without its ``?``.
    """
    if method is None or not str(method).strip():
        raise InvalidArgumentError("HTTP method is required")
    if uri is None or not str(uri).strip():
        raise InvalidArgumentError("HTTP request URI is required")

    try:
        parts = urlsplit(str(uri).strip())
    except ValueError as exc:
        raise InvalidArgumentError(f"Invalid HTTP request URI: {uri}") from exc
    if not parts.scheme or not parts.hostname:
        raise InvalidArgumentError(f"HTTP request URI must be absolute: {uri}")

    return HttpCallDescription(
        name=f"{str(method).strip().upper()} {parts.path or '/'}",
        target=parts.hostname,
        data=parts.query or None,
    )


def request_method_and_url(request: Any) -> tuple[str, Any]:
    """Read method and URL from an httpx/requests style request object."""
    if request is None:
        raise InvalidArgumentError("HTTP request is required")
    return getattr(request, "method", None), getattr(request, "url", None)


def response_status(response: Any) -> str | None:
    """Return the response status code as text, if the response exposes one."""
    for attr in ("status_code", "status"):
        value = getattr(response, attr, None)
        if isinstance(value, int):
            return str(int(value))
        if value is not None:
            return str(value)
    return None
