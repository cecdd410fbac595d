from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from call_tracker.errors import InvalidArgumentError
from call_tracker.telemetry import InMemorySink, SinkEntryKind
from call_tracker.tracking import TrackingService


class InvalidOperation(Exception):
    pass


class StepClock:
    def __init__(self, step: timedelta) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        value = self.now
        self.now += self.step
        return value


class ExplodingSink(InMemorySink):
    def emit_event(self, name, tags, metrics=None):
        raise RuntimeError("sink down")


def test_service_requires_sink() -> None:
    with pytest.raises(InvalidArgumentError):
        TrackingService(None)


def test_track_call_emits_start_dependency_complete_in_order() -> None:
    sink = InMemorySink()
    tracker = TrackingService(sink, clock=StepClock(timedelta(milliseconds=250)))
    payload = {"rows": 3}

    async def work() -> dict:
        return payload

    result = asyncio.run(
        tracker.track_call("LoadRows", "SQL", work, correlation_id="corr-1", target="db01", data="select 1")
    )

    assert result is payload
    assert sink.kinds() == [SinkEntryKind.EVENT, SinkEntryKind.DEPENDENCY, SinkEntryKind.EVENT]

    started, dependency, completed = sink.entries
    assert started.name == "[CALLING] LoadRows"
    assert started.tags.operation_name == "LoadRows"
    assert started.tags.correlation_id == "corr-1"

    assert dependency.call.name == "LoadRows"
    assert dependency.call.dependency_type == "SQL"
    assert dependency.call.target == "db01"
    assert dependency.call.data == "select 1"
    assert dependency.call.start_time == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert dependency.call.duration == timedelta(milliseconds=250)
    assert dependency.call.success is True
    assert dependency.call.result_code is None

    assert completed.name == "[CALLED] LoadRows"
    assert completed.metrics == {"Duration": 250.0}


def test_track_call_reraises_same_exception_without_dependency() -> None:
    sink = InMemorySink()
    tracker = TrackingService(sink)
    error = InvalidOperation("boom")

    async def work() -> None:
        raise error

    with pytest.raises(InvalidOperation) as excinfo:
        asyncio.run(tracker.track_call("DoThing", "Internal", work))

    assert excinfo.value is error
    assert sink.kinds() == [SinkEntryKind.EVENT, SinkEntryKind.EXCEPTION, SinkEntryKind.EVENT]
    _, exception, errored = sink.entries
    assert exception.error is error
    assert str(exception.error) == "boom"
    assert errored.name == "[ERROR] DoThing"
    assert errored.tags.operation_name == "DoThing"


def test_failure_keeps_exception_cause_chain() -> None:
    tracker = TrackingService(InMemorySink())

    def work() -> None:
        try:
            raise KeyError("missing")
        except KeyError as exc:
            raise InvalidOperation("wrapped") from exc

    with pytest.raises(InvalidOperation) as excinfo:
        asyncio.run(tracker.track_call("Lookup", "Internal", work))

    assert isinstance(excinfo.value.__cause__, KeyError)


def test_track_http_call_records_web_api_dependency() -> None:
    sink = InMemorySink()
    tracker = TrackingService(sink)
    uri = "http://svc/api/x?y=1"

    async def _run() -> httpx.Response:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="ok"))
        async with httpx.AsyncClient(transport=transport) as client:
            return await tracker.track_http_call("get", uri, lambda: client.get(uri))

    response = asyncio.run(_run())

    assert response.status_code == 200
    dependency = sink.entries[1].call
    assert dependency.name == "GET /api/x"
    assert dependency.dependency_type == "WebAPI"
    assert dependency.target == "svc"
    assert dependency.data == "y=1"
    assert dependency.result_code == "200"
    assert sink.entries[0].name == "[CALLING] GET /api/x"


def test_track_http_request_reads_method_and_url() -> None:
    sink = InMemorySink()
    tracker = TrackingService(sink)

    async def _run() -> httpx.Response:
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        async with httpx.AsyncClient(transport=transport) as client:
            request = client.build_request("DELETE", "https://orders.internal:8443/orders/7")
            return await tracker.track_http_request(request, lambda: client.send(request), correlation_id="c-9")

    response = asyncio.run(_run())

    assert response.status_code == 404
    dependency = sink.entries[1].call
    assert dependency.name == "DELETE /orders/7"
    assert dependency.target == "orders.internal"
    assert dependency.data is None
    assert dependency.result_code == "404"
    assert sink.entries[2].tags.correlation_id == "c-9"


@pytest.mark.parametrize(
    ("method", "uri"),
    [
        (None, "http://svc/api"),
        ("   ", "http://svc/api"),
        ("GET", None),
        ("GET", "  "),
        ("GET", "/relative/path"),
    ],
)
def test_invalid_http_arguments_fail_before_telemetry(method, uri) -> None:
    sink = InMemorySink()
    tracker = TrackingService(sink)
    calls: list[int] = []

    with pytest.raises(InvalidArgumentError):
        asyncio.run(tracker.track_http_call(method, uri, lambda: calls.append(1)))

    assert sink.entries == []
    assert calls == []


def test_missing_request_object_is_rejected() -> None:
    sink = InMemorySink()
    tracker = TrackingService(sink)

    with pytest.raises(InvalidArgumentError):
        asyncio.run(tracker.track_http_request(None, lambda: None))

    assert sink.entries == []


def test_blank_name_or_missing_work_is_rejected() -> None:
    sink = InMemorySink()
    tracker = TrackingService(sink)

    with pytest.raises(InvalidArgumentError):
        asyncio.run(tracker.track_call(" ", "Internal", lambda: 1))
    with pytest.raises(InvalidArgumentError):
        asyncio.run(tracker.track_action("Notify", "Queue", None))

    assert sink.entries == []


def test_work_is_invoked_exactly_once_and_sync_results_pass_through() -> None:
    tracker = TrackingService(InMemorySink())
    calls: list[int] = []

    def work() -> int:
        calls.append(1)
        return 42

    assert asyncio.run(tracker.track_call("Compute", "Internal", work)) == 42
    assert calls == [1]


def test_track_action_returns_none_and_records_dependency() -> None:
    sink = InMemorySink()
    tracker = TrackingService(sink)
    sent: list[str] = []

    async def notify() -> str:
        sent.append("hello")
        return "ignored"

    result = asyncio.run(tracker.track_action("Notify", "Queue", notify, target="bus"))

    assert result is None
    assert sent == ["hello"]
    assert sink.kinds() == [SinkEntryKind.EVENT, SinkEntryKind.DEPENDENCY, SinkEntryKind.EVENT]
    assert sink.entries[1].call.target == "bus"
    assert sink.entries[1].call.data is None


def test_duration_tracks_real_elapsed_time() -> None:
    sink = InMemorySink()
    tracker = TrackingService(sink)

    async def slow() -> str:
        await asyncio.sleep(0.05)
        return "done"

    asyncio.run(tracker.track_call("Slow", "Internal", slow))

    duration_ms = sink.entries[2].metrics["Duration"]
    assert 40 <= duration_ms < 2000
    assert sink.entries[1].call.duration_ms == duration_ms


def test_blank_correlation_id_is_not_tagged() -> None:
    sink = InMemorySink()
    tracker = TrackingService(sink)

    asyncio.run(tracker.track_call("Ping", "Internal", lambda: None, correlation_id="  "))

    assert all(entry.tags.correlation_id is None for entry in sink.entries if entry.tags)


def test_cancellation_is_reported_and_propagated() -> None:
    sink = InMemorySink()
    tracker = TrackingService(sink)

    async def cancelled() -> None:
        raise asyncio.CancelledError()

    async def _run() -> None:
        with pytest.raises(asyncio.CancelledError):
            await tracker.track_call("Stream", "Internal", cancelled)

    asyncio.run(_run())

    assert sink.kinds() == [SinkEntryKind.EVENT, SinkEntryKind.EXCEPTION, SinkEntryKind.EVENT]


def test_sink_failures_are_swallowed_by_default(caplog) -> None:
    tracker = TrackingService(ExplodingSink())

    with caplog.at_level("WARNING", logger="call_tracker.tracking"):
        result = asyncio.run(tracker.track_call("Compute", "Internal", lambda: 7))

    assert result == 7
    assert "telemetry_sink_failed" in caplog.messages


def test_sink_failures_do_not_mask_work_failure_by_default() -> None:
    sink = ExplodingSink()
    tracker = TrackingService(sink)

    def work() -> None:
        raise InvalidOperation("boom")

    with pytest.raises(InvalidOperation):
        asyncio.run(tracker.track_call("DoThing", "Internal", work))

    assert sink.kinds() == [SinkEntryKind.EXCEPTION]


def test_sink_failures_propagate_when_configured() -> None:
    tracker = TrackingService(ExplodingSink(), raise_sink_errors=True)
    calls: list[int] = []

    with pytest.raises(RuntimeError, match="sink down"):
        asyncio.run(tracker.track_call("Compute", "Internal", lambda: calls.append(1)))

    assert calls == []


class BrokenStatusResponse:
    @property
    def status_code(self) -> int:
        raise RuntimeError("status not read yet")


def test_unreadable_status_still_completes_the_call(caplog) -> None:
    sink = InMemorySink()
    tracker = TrackingService(sink)
    response = BrokenStatusResponse()

    with caplog.at_level("WARNING", logger="call_tracker.tracking"):
        result = asyncio.run(tracker.track_http_call("GET", "http://svc/api", lambda: response))

    assert result is response
    assert sink.kinds() == [SinkEntryKind.EVENT, SinkEntryKind.DEPENDENCY, SinkEntryKind.EVENT]
    assert sink.entries[1].call.result_code is None
    assert sink.entries[2].name == "[CALLED] GET /api"
    assert "result_code_unavailable" in caplog.messages


class ExceptionRejectingSink(InMemorySink):
    def emit_exception(self, error):
        raise RuntimeError("sink down")


def test_strict_sink_failure_chains_work_failure() -> None:
    sink = ExceptionRejectingSink()
    tracker = TrackingService(sink, raise_sink_errors=True)
    error = InvalidOperation("boom")

    def work() -> None:
        raise error

    with pytest.raises(RuntimeError, match="sink down") as excinfo:
        asyncio.run(tracker.track_call("DoThing", "Internal", work))

    assert excinfo.value.__context__ is error
    assert sink.kinds() == [SinkEntryKind.EVENT]
