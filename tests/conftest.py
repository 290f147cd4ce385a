import json
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx
import pytest

from restwire.execution.error_handler import ErrorClassifier
from restwire.execution.http_client import ServiceClient
from restwire.transport.decoders import BodyDecoder

BASE_URL = "http://testserver"


@dataclass
class FastSettings:
    APP_NAME: str = "restwire-test"
    APP_VERSION: str = "0.0.1"
    MAX_CONNECTIONS: int = 2
    HTTP_TIMEOUT_CONNECT: float = 1.0
    HTTP_TIMEOUT_READ: float = 1.0
    HTTP_TIMEOUT_WRITE: float = 1.0
    HTTP_TIMEOUT_POOL: float = 1.0
    BODY_DECODER: str = "lenient"
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_MIN_WAIT: float = 0.01
    RETRY_MAX_WAIT: float = 0.05


def make_response(status_code: int, body: Any = None) -> httpx.Response:
    """Ответ mock-сервера: статус + необязательное JSON-тело."""
    if body is None:
        return httpx.Response(status_code)
    return httpx.Response(
        status_code,
        content=json.dumps(body).encode(),
        headers={"Content-Type": "application/json"},
    )


@pytest.fixture
def settings() -> FastSettings:
    return FastSettings()


@pytest.fixture
def classifier() -> ErrorClassifier:
    return ErrorClassifier()


@pytest.fixture
def service_client(classifier) -> Callable[..., ServiceClient]:
    """Собирает ServiceClient поверх httpx.MockTransport."""
    clients = []

    def _build(
        handler: Callable[[httpx.Request], httpx.Response],
        decoder: Optional[BodyDecoder] = None,
    ) -> ServiceClient:
        http = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(handler))
        client = ServiceClient(BASE_URL, classifier, decoder=decoder, client=http)
        clients.append(client)
        return client

    yield _build
    for c in clients:
        c.close()
