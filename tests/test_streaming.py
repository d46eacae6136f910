"""Tests for SSE stream decoder."""

import json

import httpx
import pytest

from mistral_client._streaming import LineDecoder, iter_sse_events, aiter_sse_events
from mistral_client.exceptions import MistralError, StreamDecodeError


def _chunks(*lines: str):
    """Yield each line as a separate byte chunk."""
    for line in lines:
        yield line.encode()


class _Recorder:
    """Byte-chunk iterable that records how many chunks were pulled."""

    def __init__(self, chunks: list[bytes]):
        self._chunks = chunks
        self.reads = 0

    def __iter__(self):
        for c in self._chunks:
            self.reads += 1
            yield c


async def _achunks(*lines: str):
    for line in lines:
        yield line.encode()


def test_ordering():
    events = list(iter_sse_events(_chunks(
        'data: {"n":1}\n\n',
        'data: {"n":2}\n\n',
        'data: {"n":3}\n\n',
        "data: [DONE]\n\n",
    )))
    assert events == [{"n": 1}, {"n": 2}, {"n": 3}]


def test_done_terminates_without_further_reads():
    stream = _Recorder([
        b'data: {"a":1}\n',
        b"data: [DONE]\n",
        b'data: {"a":2}\n',
    ])
    events = list(iter_sse_events(stream))
    assert events == [{"a": 1}]
    assert stream.reads == 2


def test_non_data_lines_ignored():
    events = list(iter_sse_events(_chunks(
        "\n",
        "event: message\n",
        ": comment\n",
        "id: 42\n",
        "retry: 1000\n",
        'data: {"x":true}\n',
        "\n",
    )))
    assert events == [{"x": True}]


def test_prefix_is_case_sensitive_and_anchored():
    events = list(iter_sse_events(_chunks(
        'DATA: {"a":1}\n',
        ' data: {"a":2}\n',
        'data: {"a":3}\n',
    )))
    assert events == [{"a": 3}]


def test_eof_without_sentinel():
    events = list(iter_sse_events(_chunks('data: {"x":1}\n')))
    assert events == [{"x": 1}]


def test_partial_last_line_at_eof():
    events = list(iter_sse_events(_chunks('data: {"x":1}\n', 'data: {"x":2}')))
    assert events == [{"x": 1}, {"x": 2}]


def test_malformed_payload_fails_fast():
    gen = iter_sse_events(_chunks(
        'data: {"x":1}\n',
        "data: not-json\n",
        'data: {"x":3}\n',
    ))
    assert next(gen) == {"x": 1}
    with pytest.raises(StreamDecodeError) as excinfo:
        next(gen)
    assert isinstance(excinfo.value, json.JSONDecodeError)
    assert isinstance(excinfo.value, MistralError)
    assert isinstance(excinfo.value.__cause__, json.JSONDecodeError)
    with pytest.raises(StopIteration):
        next(gen)


def test_whitespace_around_payload():
    events = list(iter_sse_events(_chunks('data:    {"y":2}   \n')))
    assert events == [{"y": 2}]


def test_trim_removes_tabs_and_nul_padding():
    events = list(iter_sse_events(_chunks('data:\t{"y":2}\x00\x0b\n', "data:\x00[DONE]\x00\n")))
    assert events == [{"y": 2}]


def test_trim_keeps_unicode_spaces():
    assert list(iter_sse_events(_chunks('data: "a\xa0"\n'))) == ["a\xa0"]
    # a non-breaking space outside the JSON value is not trimmed, so it is invalid JSON
    with pytest.raises(StreamDecodeError):
        list(iter_sse_events(_chunks('data: {"y":2}\xa0\n')))


def test_no_space_after_prefix():
    events = list(iter_sse_events(_chunks('data:{"y":3}\n')))
    assert events == [{"y": 3}]


def test_crlf_line_endings():
    events = list(iter_sse_events(_chunks('data: {"a":1}\r\n', "\r\n", "data: [DONE]\r\n")))
    assert events == [{"a": 1}]


def test_redecode_is_identical():
    body = b'data: {"n":1}\n\ndata: [1,2]\n\ndata: "s"\n\ndata: [DONE]\n\n'
    first = list(iter_sse_events([body]))
    second = list(iter_sse_events([body]))
    assert first == second == [{"n": 1}, [1, 2], "s"]


def test_json_null_is_yielded():
    events = list(iter_sse_events(_chunks("data: null\n", "data: [DONE]\n")))
    assert events == [None]


def test_chunks_split_mid_line_and_mid_character():
    whole = 'data: {"text":"héllo ✓"}\ndata: [DONE]\n'.encode()
    cut = whole.index("✓".encode()) + 1
    pieces = [whole[:5], whole[5:cut], whole[cut:]]
    assert list(iter_sse_events(pieces)) == list(iter_sse_events([whole])) == [{"text": "héllo ✓"}]


def test_str_chunks_accepted():
    events = list(iter_sse_events(['data: {"a":', '1}\n', "data: [DONE]\n"]))
    assert events == [{"a": 1}]


def test_empty_stream():
    assert list(iter_sse_events(iter([]))) == []


def test_stream_error_propagates_unchanged():
    def broken():
        yield b'data: {"a":1}\n'
        raise httpx.ReadError("connection reset")

    gen = iter_sse_events(broken())
    assert next(gen) == {"a": 1}
    with pytest.raises(httpx.ReadError):
        next(gen)


def test_early_stop_does_not_read_rest():
    stream = _Recorder([b'data: {"n":1}\n', b'data: {"n":2}\n', b'data: {"n":3}\n'])
    for event in iter_sse_events(stream):
        assert event == {"n": 1}
        break
    assert stream.reads == 1


def test_httpx_response_source():
    resp = httpx.Response(200, content=b'data: {"id":"1"}\n\ndata: [DONE]\n\n')
    assert list(iter_sse_events(resp)) == [{"id": "1"}]


def test_line_decoder_keeps_newlines_and_flushes_tail():
    decoder = LineDecoder()
    assert decoder.feed(b"a\nb") == ["a\n"]
    assert decoder.feed(b"c\n\n") == ["bc\n", "\n"]
    assert decoder.feed(b"tail") == []
    assert decoder.flush() == ["tail"]
    assert decoder.flush() == []


@pytest.mark.asyncio
async def test_async_ordering_and_sentinel():
    events = [
        e async for e in aiter_sse_events(_achunks(
            ": keep-alive\n",
            'data: {"n":1}\n',
            'data: {"n":2}\n',
            "data: [DONE]\n",
            'data: {"n":3}\n',
        ))
    ]
    assert events == [{"n": 1}, {"n": 2}]


@pytest.mark.asyncio
async def test_async_malformed_payload():
    gen = aiter_sse_events(_achunks('data: {"x":1}\n', "data: {bad\n"))
    assert await gen.__anext__() == {"x": 1}
    with pytest.raises(StreamDecodeError):
        await gen.__anext__()


@pytest.mark.asyncio
async def test_async_eof_without_sentinel():
    events = [e async for e in aiter_sse_events(_achunks('data: {"x":1}'))]
    assert events == [{"x": 1}]
