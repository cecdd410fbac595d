"""CLI startup entrypoint for call-tracker."""

from __future__ import annotations

import asyncio
from pathlib import Path

import httpx
import typer
from rich import print

from call_tracker.config import settings
from call_tracker.errors import InvalidArgumentError
from call_tracker.factory import build_sink, build_tracker
from call_tracker.logging_config import configure_logging
from call_tracker.telemetry import InMemorySink, JsonlSink, SinkEntry
from call_tracker.tracking import describe_http_call

app = typer.Typer(help="Call tracking toolkit")


@app.callback()
def main() -> None:
    configure_logging(settings)


def _build_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.http_timeout_seconds)


def _format_entry(entry: SinkEntry) -> dict:
    payload: dict = {"kind": entry.kind.value, "name": entry.name}
    if entry.tags is not None and entry.tags.correlation_id:
        payload["correlation_id"] = entry.tags.correlation_id
    if entry.metrics:
        payload["metrics"] = entry.metrics
    if entry.call is not None:
        payload.update(
            {
                "type": entry.call.dependency_type,
                "target": entry.call.target,
                "data": entry.call.data,
                "duration_ms": entry.call.duration_ms,
                "result_code": entry.call.result_code,
            }
        )
    if entry.error is not None:
        payload["message"] = str(entry.error)
    return payload


@app.command()
def start() -> None:
    """Show runtime tracking configuration."""
    print(
        {
            "app_name": settings.app_name,
            "telemetry_enabled": settings.telemetry_enabled,
            "sink_backend": settings.sink_backend,
            "sink_path": settings.sink_path,
            "raise_sink_errors": settings.raise_sink_errors,
        }
    )


@app.command()
def probe(
    url: str = typer.Argument(..., help="Absolute URL to request"),
    method: str = typer.Option("GET", help="HTTP method"),
    correlation_id: str = typer.Option(None, help="Correlation token attached to emitted events"),
    show_telemetry: bool = typer.Option(False, help="Record telemetry in memory and print it"),
) -> None:
    """Send one tracked HTTP request."""
    try:
        describe_http_call(method, url)
    except InvalidArgumentError as exc:
        raise typer.BadParameter(str(exc)) from exc

    sink = InMemorySink() if show_telemetry else build_sink(settings)
    tracker = build_tracker(settings, sink=sink)

    async def _run() -> httpx.Response:
        async with _build_client() as client:
            request = client.build_request(method.upper(), url)
            return await tracker.track_http_request(
                request,
                lambda: client.send(request),
                correlation_id=correlation_id,
            )

    try:
        response = asyncio.run(_run())
    except httpx.HTTPError as exc:
        print({"error": f"{type(exc).__name__}: {exc}"})
        raise typer.Exit(code=1)

    result: dict = {"status_code": response.status_code, "url": str(response.request.url)}
    if show_telemetry:
        result["telemetry"] = [_format_entry(entry) for entry in sink.entries]
    print(result)


@app.command()
def tail(
    path: str = typer.Option(None, help="JSONL telemetry file (defaults to CALL_TRACKER_SINK_PATH)"),
    limit: int = typer.Option(20, help="How many records to show, newest first"),
) -> None:
    """Print recent records written by the jsonl sink."""
    target = Path(path or settings.sink_path)
    if not target.exists():
        print({"error": f"Telemetry file not found: {target}"})
        raise typer.Exit(code=1)
    print({"records": JsonlSink(target).list_recent(limit)})


if __name__ == "__main__":
    app()
