import os
import time

import dotenv
import httpx

from sse_stream import EventStream, connect_sse, iter_events

dotenv.load_dotenv()

url = os.getenv("SSE_STREAM_LIVE_URL", "https://sse.test-free.online/api/story")

# Reconexión manual: la librería solo informa retry y last_event_id.
last_event_id: str | None = None
retry_ms = 3000

with httpx.Client(timeout=None) as client:
    for attempt in range(3):
        stream: EventStream | None = None
        try:
            with connect_sse(client, "GET", url, last_event_id=last_event_id) as r:
                stream = iter_events(r, check=True)
                for event in stream:
                    print(f"[{event.event_type}] id={event.last_event_id} {event.data}")
        except httpx.TransportError as e:
            print(f"Conexión perdida ({e!r}), reintentando en {retry_ms}ms")
        finally:
            # Incluye ids confirmados en bloques sin datos.
            if stream is not None:
                if stream.last_event_id is not None:
                    last_event_id = stream.last_event_id
                if stream.retry is not None:
                    retry_ms = stream.retry
        time.sleep(retry_ms / 1000)
