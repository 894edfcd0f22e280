from __future__ import annotations

from sse_stream._errors import DecodeError, EventSourceError, SSEError
from sse_stream._events import EventAssembler, Reconnect, ServerSentEvent
from sse_stream._fields import Field, parse_field
from sse_stream._http import (
    MIME_EVENT_STREAM,
    aconnect_sse,
    adebug_event_hooks,
    aiter_events,
    connect_sse,
    debug_event_hooks,
    iter_events,
    raise_for_event_stream,
    sse_headers,
)
from sse_stream._lines import LineDecoder
from sse_stream._stream import AsyncEventStream, EventStream

__all__ = [
    "MIME_EVENT_STREAM",
    "AsyncEventStream",
    "DecodeError",
    "EventAssembler",
    "EventSourceError",
    "EventStream",
    "Field",
    "LineDecoder",
    "Reconnect",
    "SSEError",
    "ServerSentEvent",
    "aconnect_sse",
    "adebug_event_hooks",
    "aiter_events",
    "connect_sse",
    "debug_event_hooks",
    "iter_events",
    "parse_field",
    "raise_for_event_stream",
    "sse_headers",
]

__version__ = "0.1.0"
