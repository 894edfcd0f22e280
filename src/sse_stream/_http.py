from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Callable, Iterator

import httpx

from sse_stream._errors import EventSourceError
from sse_stream._stream import AsyncEventStream, EventStream, RetryCallback

MIME_EVENT_STREAM = "text/event-stream"
ENV_HTTP_DEBUG = "SSE_STREAM_HTTP_DEBUG"

EventHooksDict = dict[str, list[Callable[..., Any]]]


def _debug_enabled() -> bool:
    return os.getenv(ENV_HTTP_DEBUG, "").lower() in {"1", "true", "yes", "on"}


def _redact_headers(headers: dict[str, Any]) -> dict[str, Any]:
    out = dict(headers)
    for k in ("authorization", "Authorization"):
        if k in out:
            out[k] = "Bearer ***REDACTED***"
    return out


def _log_request(request: httpx.Request) -> None:
    if not _debug_enabled():
        return
    logging.warning("HTTPX REQUEST %s %s", request.method, request.url)
    logging.warning("HTTPX REQUEST headers=%s", _redact_headers(dict(request.headers)))


def _log_response(response: httpx.Response) -> None:
    if not _debug_enabled():
        return
    req = response.request
    logging.warning("HTTPX RESPONSE %s %s -> %s", req.method, req.url, response.status_code)
    logging.warning("HTTPX RESPONSE headers=%s", dict(response.headers))


async def _log_request_async(request: httpx.Request) -> None:
    _log_request(request)


async def _log_response_async(response: httpx.Response) -> None:
    _log_response(response)


def debug_event_hooks() -> EventHooksDict:
    """
    Hooks para httpx.Client(event_hooks=...) que trazan requests y responses.

    Solo loguean cuando SSE_STREAM_HTTP_DEBUG está activo. El body nunca se
    lee: en un event stream eso consumiría los eventos.
    """
    return {"request": [_log_request], "response": [_log_response]}


def adebug_event_hooks() -> EventHooksDict:
    """Versión async de debug_event_hooks() para httpx.AsyncClient."""
    return {"request": [_log_request_async], "response": [_log_response_async]}


def sse_headers(
    *,
    last_event_id: str | None = None,
    headers: dict[str, str] | None = None,
) -> dict[str, str]:
    out: dict[str, str] = dict(headers or {})
    out["Accept"] = MIME_EVENT_STREAM
    out["Cache-Control"] = "no-cache"
    if last_event_id is not None:
        out["Last-Event-ID"] = last_event_id
    return out


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def raise_for_event_stream(resp: httpx.Response) -> None:
    """
    Verifica que la respuesta sea un event stream y levanta EventSourceError si no.

    Requiere status 200 y Content-Type text/event-stream (los parámetros como
    charset se ignoran).
    """
    content_type = resp.headers.get("content-type")

    if resp.status_code != 200:
        body_text: str | None = None
        try:
            body_text = resp.text
        except httpx.ResponseNotRead:
            body_text = None
        raise EventSourceError(
            message=f"expecting status code 200, found: {resp.status_code}",
            status_code=resp.status_code,
            content_type=content_type,
            body=body_text,
        )

    if content_type is None:
        raise EventSourceError(
            message=f"expecting {MIME_EVENT_STREAM!r} content type, found none",
            status_code=resp.status_code,
        )

    if _media_type(content_type) != MIME_EVENT_STREAM:
        raise EventSourceError(
            message=f"expecting {MIME_EVENT_STREAM!r}, found: {content_type!r}",
            status_code=resp.status_code,
            content_type=content_type,
        )


def iter_events(
    resp: httpx.Response,
    *,
    check: bool = False,
    on_retry: RetryCallback | None = None,
) -> EventStream:
    """
    Convierte el body de una respuesta httpx en un EventStream.

    Uso:
        with client.stream("GET", url) as r:
            for event in iter_events(r, check=True):
                ...
    """
    if check:
        raise_for_event_stream(resp)
    return EventStream(resp.iter_bytes(), on_retry=on_retry)


def aiter_events(
    resp: httpx.Response,
    *,
    check: bool = False,
    on_retry: RetryCallback | None = None,
) -> AsyncEventStream:
    """
    Versión async de iter_events().

    Uso:
        async with client.stream("GET", url) as r:
            async for event in aiter_events(r, check=True):
                ...
    """
    if check:
        raise_for_event_stream(resp)
    return AsyncEventStream(resp.aiter_bytes(), on_retry=on_retry)


@contextmanager
def connect_sse(
    client: httpx.Client,
    method: str,
    url: str,
    *,
    last_event_id: str | None = None,
    **kwargs: Any,
) -> Iterator[httpx.Response]:
    """
    Abre un request streaming con los headers de SSE y retorna la respuesta.

    Los kwargs restantes se pasan tal cual a httpx.Client.stream.
    """
    headers = sse_headers(last_event_id=last_event_id, headers=kwargs.pop("headers", None))
    with client.stream(method, url, headers=headers, **kwargs) as resp:
        yield resp


@asynccontextmanager
async def aconnect_sse(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    last_event_id: str | None = None,
    **kwargs: Any,
) -> AsyncIterator[httpx.Response]:
    """Versión async de connect_sse()."""
    headers = sse_headers(last_event_id=last_event_id, headers=kwargs.pop("headers", None))
    async with client.stream(method, url, headers=headers, **kwargs) as resp:
        yield resp
