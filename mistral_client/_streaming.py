"""SSE stream decoder for httpx responses and raw chunk iterables."""

from __future__ import annotations

import codecs
import json
import logging
from typing import Any, AsyncGenerator, AsyncIterable, Generator, Iterable, Union

import httpx

from .exceptions import StreamDecodeError

logger = logging.getLogger(__name__)

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"
# ASCII whitespace and NUL only; other Unicode spaces stay in the payload
PAYLOAD_TRIM = " \t\n\r\x0b\x00"

Chunk = Union[bytes, str]
SyncStream = Union[httpx.Response, Iterable[Chunk]]
AsyncStream = Union[httpx.Response, AsyncIterable[Chunk]]

# Markers returned by _parse_line; JSON ``null`` is a real value.
_SKIP = object()
_DONE = object()


class LineDecoder:
    """Incrementally split byte or text chunks into ``\\n``-terminated lines.

    Bytes are decoded as UTF-8 with an incremental decoder, so a multi-byte
    character split across two chunks comes out whole. Lines keep their
    trailing newline. Only ``\\n`` ends a line.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._buffer = ""

    def feed(self, chunk: Chunk) -> list[str]:
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        self._buffer += chunk
        lines = self._buffer.split("\n")
        self._buffer = lines.pop()
        return [line + "\n" for line in lines]

    def flush(self) -> list[str]:
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        return [tail] if tail else []


def _parse_line(line: str) -> Any:
    if not line.startswith(DATA_PREFIX):
        return _SKIP
    payload = line[len(DATA_PREFIX):].strip(PAYLOAD_TRIM)
    if payload == DONE_SENTINEL:
        return _DONE
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise StreamDecodeError(e.msg, e.doc, e.pos) from e


def _iter_chunks(stream: SyncStream) -> Iterable[Chunk]:
    if isinstance(stream, httpx.Response):
        return stream.iter_bytes()
    return stream


def _aiter_chunks(stream: AsyncStream) -> AsyncIterable[Chunk]:
    if isinstance(stream, httpx.Response):
        return stream.aiter_bytes()
    return stream


def iter_sse_events(stream: SyncStream) -> Generator[Any, None, None]:
    """Yield parsed ``data:`` payloads from an SSE stream until ``[DONE]`` or EOF.

    ``stream`` is a streaming ``httpx.Response`` or any iterable of bytes/str
    chunks. The stream is never closed here; stopping iteration early simply
    stops reading from it.

    Raises:
        StreamDecodeError: A ``data:`` payload is not valid JSON.
    """
    decoder = LineDecoder()
    for chunk in _iter_chunks(stream):
        for line in decoder.feed(chunk):
            value = _parse_line(line)
            if value is _DONE:
                logger.debug("SSE stream terminated by sentinel")
                return
            if value is not _SKIP:
                yield value
    for line in decoder.flush():
        value = _parse_line(line)
        if value is _DONE:
            logger.debug("SSE stream terminated by sentinel")
            return
        if value is not _SKIP:
            yield value
    logger.debug("SSE stream ended without sentinel")


async def aiter_sse_events(stream: AsyncStream) -> AsyncGenerator[Any, None]:
    """Async counterpart of :func:`iter_sse_events`."""
    decoder = LineDecoder()
    async for chunk in _aiter_chunks(stream):
        for line in decoder.feed(chunk):
            value = _parse_line(line)
            if value is _DONE:
                logger.debug("SSE stream terminated by sentinel")
                return
            if value is not _SKIP:
                yield value
    for line in decoder.flush():
        value = _parse_line(line)
        if value is _DONE:
            logger.debug("SSE stream terminated by sentinel")
            return
        if value is not _SKIP:
            yield value
    logger.debug("SSE stream ended without sentinel")
