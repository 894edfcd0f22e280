import os

import dotenv
import httpx

from sse_stream import connect_sse, iter_events

dotenv.load_dotenv()

url = os.getenv("SSE_STREAM_LIVE_URL", "https://sse.test-free.online/api/story")

with httpx.Client(timeout=None) as client:
    with connect_sse(client, "GET", url) as r:
        for event in iter_events(r, check=True):
            if event.event_type == "message":
                print(event.data, end=" ", flush=True)
print()
