"""
Lazy event sequences over a source of byte chunks.

The pipeline is pull-based: a chunk is requested from the source only when
the consumer asks for the next event and the buffered lines are exhausted.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator

from sse_stream._events import EventAssembler, Reconnect, ServerSentEvent
from sse_stream._fields import parse_field
from sse_stream._lines import BytesLike, LineDecoder

logger = logging.getLogger(__name__)

RetryCallback = Callable[[int], None]


class _StreamState:
    """Decoder, assembler and retry bookkeeping shared by both stream flavours."""

    def __init__(self, on_retry: RetryCallback | None) -> None:
        self.lines = LineDecoder()
        self.assembler = EventAssembler()
        self.retry: int | None = None
        self._on_retry = on_retry

    def handle(self, lines: Iterator[str]) -> Iterator[ServerSentEvent]:
        for line in lines:
            result = self.assembler.feed(parse_field(line))
            if result is None:
                continue
            if isinstance(result, Reconnect):
                self.retry = result.retry
                if self._on_retry is not None:
                    self._on_retry(result.retry)
                continue
            yield result


class EventStream:
    """
    Single-pass iterator of ServerSentEvent over an iterable of byte chunks.

    Errors raised by the chunk source (transport errors) and ``DecodeError``
    end the iteration by propagating to the consumer.

    Usage:
        for event in EventStream(response.iter_bytes()):
            ...
    """

    def __init__(
        self,
        chunks: Iterable[BytesLike],
        *,
        on_retry: RetryCallback | None = None,
    ) -> None:
        self._chunks = chunks
        self._state = _StreamState(on_retry)
        self._iterator = self._iter_events()

    @property
    def retry(self) -> int | None:
        """Last reconnection interval (ms) announced by the server."""
        return self._state.retry

    @property
    def last_event_id(self) -> str | None:
        return self._state.assembler.last_event_id

    def __iter__(self) -> EventStream:
        return self

    def __next__(self) -> ServerSentEvent:
        return next(self._iterator)

    def __enter__(self) -> EventStream:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._iterator.close()

    def _iter_events(self) -> Iterator[ServerSentEvent]:
        state = self._state
        for chunk in self._chunks:
            yield from state.handle(state.lines.decode(chunk))
        yield from state.handle(state.lines.flush())
        if state.assembler.data:
            logger.debug("Event stream ended with an undispatched block; discarding it")


class AsyncEventStream:
    """
    Async version of EventStream over an async iterable of byte chunks.

    Usage:
        async for event in AsyncEventStream(response.aiter_bytes()):
            ...
    """

    def __init__(
        self,
        chunks: AsyncIterable[BytesLike],
        *,
        on_retry: RetryCallback | None = None,
    ) -> None:
        self._chunks = chunks
        self._state = _StreamState(on_retry)
        self._iterator = self._aiter_events()

    @property
    def retry(self) -> int | None:
        """Last reconnection interval (ms) announced by the server."""
        return self._state.retry

    @property
    def last_event_id(self) -> str | None:
        return self._state.assembler.last_event_id

    def __aiter__(self) -> AsyncEventStream:
        return self

    async def __anext__(self) -> ServerSentEvent:
        return await self._iterator.__anext__()

    async def __aenter__(self) -> AsyncEventStream:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._iterator.aclose()

    async def _aiter_events(self) -> AsyncIterator[ServerSentEvent]:
        state = self._state
        async for chunk in self._chunks:
            for event in state.handle(state.lines.decode(chunk)):
                yield event
        for event in state.handle(state.lines.flush()):
            yield event
        if state.assembler.data:
            logger.debug("Event stream ended with an undispatched block; discarding it")
