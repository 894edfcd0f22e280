import os

import pytest
from dotenv import find_dotenv, load_dotenv

# Cargar .env lo más temprano posible (antes de pytest_collection_modifyitems)
load_dotenv(find_dotenv(usecwd=True))

ENV_LIVE_URL = "SSE_STREAM_LIVE_URL"


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    live_url = os.getenv(ENV_LIVE_URL)
    for item in items:
        if "integration" in item.keywords and not live_url:
            item.add_marker(pytest.mark.skip(reason=f"Falta {ENV_LIVE_URL} en entorno/.env"))


@pytest.fixture
def live_url() -> str:
    return os.environ[ENV_LIVE_URL]
