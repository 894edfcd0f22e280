from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from sse_stream._fields import (
    Comment,
    Data,
    DispatchMarker,
    EventType,
    Field,
    Id,
    Ignored,
    Retry,
)

logger = logging.getLogger(__name__)

DEFAULT_EVENT_TYPE = "message"


@dataclass(frozen=True, slots=True)
class ServerSentEvent:
    """
    A dispatched Server-Sent Event.

    ``last_event_id`` is the stream's last event ID at dispatch time, which
    may come from an earlier block.
    """

    event_type: str = DEFAULT_EVENT_TYPE
    data: str = ""
    last_event_id: str | None = None

    def json(self) -> Any:
        """Decode ``data`` as JSON (the usual payload of LLM streaming APIs)."""
        return json.loads(self.data)


@dataclass(frozen=True, slots=True)
class Reconnect:
    """Reconnection interval suggested by the server through ``retry:``."""

    retry: int

    @property
    def delay(self) -> timedelta:
        try:
            return timedelta(milliseconds=self.retry)
        except OverflowError:
            return timedelta.max


@dataclass(slots=True)
class EventAssembler:
    """
    Accumulates fields and dispatches an event on each blank line.

    ``event_type`` and ``data`` belong to the current block and are reset at
    every dispatch decision. ``last_event_id`` outlives blocks and only
    changes when an ``id:`` field is committed.
    """

    event_type: str | None = None
    data: list[str] = field(default_factory=list)
    pending_id: str | None = None
    _last_event_id: str | None = field(default=None, init=False, repr=False)

    @property
    def last_event_id(self) -> str | None:
        return self._last_event_id

    def feed(self, item: Field) -> ServerSentEvent | Reconnect | None:
        """
        Apply one field to the in-progress block.

        Returns:
            A ``ServerSentEvent`` when a blank line closes a block with data,
            a ``Reconnect`` for a ``retry:`` field, otherwise None.
        """
        if isinstance(item, Comment):
            return None
        if isinstance(item, Ignored):
            logger.debug("Ignoring SSE field %r", item.name)
            return None
        if isinstance(item, EventType):
            self.event_type = item.value
            return None
        if isinstance(item, Data):
            self.data.append(item.value)
            return None
        if isinstance(item, Id):
            self.pending_id = item.value
            return None
        if isinstance(item, Retry):
            logger.debug("SSE retry interval set to %sms", item.milliseconds)
            return Reconnect(retry=item.milliseconds)
        if isinstance(item, DispatchMarker):
            return self.dispatch()
        raise TypeError(f"Unsupported field: {item!r}")

    def dispatch(self) -> ServerSentEvent | None:
        # El id se confirma aunque el bloque no tenga datos.
        if self.pending_id is not None:
            self._last_event_id = self.pending_id
            self.pending_id = None

        if not self.data:
            if self.event_type is not None:
                logger.debug("Discarding SSE block without data (event=%r)", self.event_type)
            self.event_type = None
            return None

        event = ServerSentEvent(
            event_type=self.event_type or DEFAULT_EVENT_TYPE,
            data="\n".join(self.data),
            last_event_id=self._last_event_id,
        )
        self.event_type = None
        self.data = []
        return event
