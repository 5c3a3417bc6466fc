import asyncio
import base64
import json
from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from flowbot.commands import CommandRegistry, Param, word
from flowbot.errors import EntryDecodeError, NoCommandMatch, StreamTransportError
from flowbot.stream import HttpStreamSource, StreamListener, stream_url


def _line(content: Any, flow: str = "flow-a", event: str = "message") -> str:
    return json.dumps({"event": event, "content": content, "flow": flow, "id": 1, "user": 5})


async def _lines(*lines: str) -> AsyncIterator[str]:
    for line in lines:
        yield line


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str]] = []

    def __call__(self, outcome, entry) -> None:
        self.calls.append((outcome.handler_type, outcome.content, entry.flow))


def _registry(recorder: _Recorder) -> CommandRegistry:
    ping = word("ping").on("default", recorder).on("error", recorder)
    scale = word("scale", params=[Param("count", type="int", required=True)])
    scale.on("params", recorder).on("params_wrong_type", recorder)
    return CommandRegistry([ping, scale])


async def test_dispatches_entries_to_bound_handlers() -> None:
    recorder = _Recorder()
    listener = StreamListener(_registry(recorder))
    await listener.listen(_lines(_line("ping"), _line("scale 3", flow="flow-b"), _line("scale x")))
    assert recorder.calls == [
        ("default", "ping", "flow-a"),
        ("params", "scale 3", "flow-b"),
        ("params_wrong_type", "scale x", "flow-a"),
    ]
    assert listener.is_running is False


async def test_async_handlers_are_awaited() -> None:
    seen: list[str] = []

    async def handler(outcome, entry) -> None:
        await asyncio.sleep(0)
        seen.append(outcome.pattern)

    listener = StreamListener(CommandRegistry([word("ping").on("default", handler)]))
    await listener.listen(_lines(_line("ping")))
    assert seen == ["ping"]


async def test_decode_errors_and_unmatched_content_go_to_error_queue() -> None:
    recorder = _Recorder()
    errors: asyncio.Queue[Exception] = asyncio.Queue()
    listener = StreamListener(_registry(recorder), errors)

    await listener.listen(_lines("{not json", _line("hello"), _line("ping")))

    assert recorder.calls == [("default", "ping", "flow-a")]
    first = errors.get_nowait()
    second = errors.get_nowait()
    assert isinstance(first, EntryDecodeError)
    assert first.line == "{not json"
    assert isinstance(second, NoCommandMatch)
    assert errors.empty()


async def test_classifications_are_not_errors_and_missing_handler_is_noop() -> None:
    errors: asyncio.Queue[Exception] = asyncio.Queue()
    registry = CommandRegistry([word("scale", params=[Param("count", required=True)])])
    listener = StreamListener(registry, errors)

    outcome = await listener.handle_line(_line("scale"))
    assert outcome is not None
    assert outcome.handler_type == "params_missing"
    assert errors.empty()


async def test_trailing_content_uses_error_handler_not_queue() -> None:
    recorder = _Recorder()
    errors: asyncio.Queue[Exception] = asyncio.Queue()
    listener = StreamListener(_registry(recorder), errors)
    await listener.listen(_lines(_line("ping pong")))
    assert recorder.calls == [("error", "pong", "flow-a")]
    assert errors.empty()


async def test_blank_lines_and_other_events_are_skipped() -> None:
    recorder = _Recorder()
    errors: asyncio.Queue[Exception] = asyncio.Queue()
    listener = StreamListener(_registry(recorder), errors)
    await listener.listen(
        _lines("", "  ", _line({"status": "away"}, event="activity.user"), _line("ping"))
    )
    assert recorder.calls == [("default", "ping", "flow-a")]
    assert errors.empty()


async def test_own_user_entries_are_not_dispatched() -> None:
    recorder = _Recorder()
    errors: asyncio.Queue[Exception] = asyncio.Queue()
    listener = StreamListener(_registry(recorder), errors, user="5")
    other = json.dumps({"event": "message", "content": "ping", "flow": "flow-b", "user": 9})

    await listener.listen(_lines(_line("ping"), _line("unknown"), other))

    assert recorder.calls == [("default", "ping", "flow-b")]
    assert errors.empty()


async def test_handler_failure_is_reported_and_loop_continues() -> None:
    errors: asyncio.Queue[Exception] = asyncio.Queue()
    seen: list[str] = []

    def boom(outcome, entry) -> None:
        raise RuntimeError("boom")

    registry = CommandRegistry(
        [word("fail").on("default", boom), word("ping").on("default", lambda o, e: seen.append(o.pattern))]
    )
    listener = StreamListener(registry, errors)
    await listener.listen(_lines(_line("fail"), _line("ping")))

    assert seen == ["ping"]
    error = errors.get_nowait()
    assert isinstance(error, RuntimeError)


async def test_full_error_queue_drops_without_blocking() -> None:
    errors: asyncio.Queue[Exception] = asyncio.Queue(maxsize=1)
    listener = StreamListener(CommandRegistry(), errors)
    await listener.listen(_lines(_line("a"), _line("b"), _line("c")))
    assert errors.qsize() == 1
    assert listener.dropped_errors == 2


async def test_transport_failure_ends_listen() -> None:
    recorder = _Recorder()

    async def broken() -> AsyncIterator[str]:
        yield _line("ping")
        raise ConnectionResetError("peer went away")

    listener = StreamListener(_registry(recorder))
    with pytest.raises(StreamTransportError):
        await listener.listen(broken())
    assert recorder.calls == [("default", "ping", "flow-a")]
    assert listener.is_running is False


async def test_stop_is_observed_between_reads() -> None:
    seen: list[str] = []
    listener: StreamListener

    def stop_after(outcome, entry) -> None:
        seen.append(outcome.pattern)
        listener.stop()

    listener = StreamListener(CommandRegistry([word("ping").on("default", stop_after)]))
    await listener.listen(_lines(_line("ping"), _line("ping"), _line("ping")))
    assert seen == ["ping"]


def test_stream_url_filters() -> None:
    assert stream_url(["acme/main", "acme/ops"], active=True) == (
        "https://stream.flowdock.com/flows?filter=acme/main,acme/ops&active=true"
    )
    assert stream_url(["acme/main"], base_url="http://localhost/flows") == (
        "http://localhost/flows?filter=acme/main"
    )


async def test_http_source_feeds_listener() -> None:
    seen_headers: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen_headers.update(request.headers)
        body = "\n".join([_line("ping"), "", _line("scale 4")]) + "\n"
        return httpx.Response(200, text=body)

    recorder = _Recorder()
    source = HttpStreamSource(
        stream_url(["acme/main"]),
        "secret",
        transport=httpx.MockTransport(handler),
    )
    await StreamListener(_registry(recorder)).listen(source)

    assert seen_headers["authorization"] == "Basic " + base64.b64encode(b"secret").decode()
    assert [call[0] for call in recorder.calls] == ["default", "params"]


async def test_http_source_error_status_is_fatal() -> None:
    source = HttpStreamSource(
        "https://stream.example/flows",
        "bad-token",
        transport=httpx.MockTransport(lambda request: httpx.Response(401)),
    )
    with pytest.raises(StreamTransportError):
        await StreamListener(CommandRegistry()).listen(source)


async def test_http_source_connection_error_is_fatal() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    source = HttpStreamSource("https://stream.example/flows", "t", transport=httpx.MockTransport(handler))
    with pytest.raises(StreamTransportError):
        await StreamListener(CommandRegistry()).listen(source)
