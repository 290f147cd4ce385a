import asyncio
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from restwire.core.exceptions import ConversionError, HttpError, NetworkError
from restwire.execution.executor import RequestExecutor, is_retryable_failure

from tests.conftest import make_response


def test_is_retryable_failure():
    assert is_retryable_failure(HttpError(500, "boom")) is True
    assert is_retryable_failure(HttpError(503, "busy", retryable=True)) is True
    assert is_retryable_failure(HttpError(404, "nope", retryable=False)) is False
    assert is_retryable_failure(ValueError("bug")) is False


def test_unknown_retryable_is_retried(settings):
    executor = RequestExecutor(settings)
    # 500 (None) -> 500 (None) -> OK
    call = Mock(side_effect=[HttpError(500, "boom"), HttpError(500, "boom"), "ok"])

    assert executor.execute(call) == "ok"
    assert call.call_count == 3


def test_not_retryable_fails_fast(settings):
    executor = RequestExecutor(settings)
    call = Mock(side_effect=HttpError(404, "nope", retryable=False))

    with pytest.raises(HttpError) as exc_info:
        executor.execute(call)

    assert exc_info.value.status_code == 404
    assert call.call_count == 1


def test_attempts_are_bounded(settings):
    executor = RequestExecutor(settings)
    call = Mock(side_effect=NetworkError("refused"))

    with pytest.raises(NetworkError):
        executor.execute(call)

    assert call.call_count == settings.RETRY_MAX_ATTEMPTS


def test_non_service_errors_propagate_immediately(settings):
    executor = RequestExecutor(settings)
    call = Mock(side_effect=KeyError("bug"))

    with pytest.raises(KeyError):
        executor.execute(call)

    assert call.call_count == 1


def test_async_retry_flow(settings):
    executor = RequestExecutor(settings)
    call = AsyncMock(side_effect=[NetworkError("glitch"), "ok"])

    assert asyncio.run(executor.execute_async(call)) == "ok"
    assert call.call_count == 2


def test_async_bad_request_fails_fast(settings):
    executor = RequestExecutor(settings)
    call = AsyncMock(side_effect=HttpError(400, "bad", retryable=False))

    with pytest.raises(HttpError):
        asyncio.run(executor.execute_async(call))

    assert call.call_count == 1


def test_executor_with_service_client(settings, service_client):
    responses = iter([make_response(503), make_response(503), make_response(200, {"id": 1})])
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return next(responses)

    client = service_client(handler)
    result = RequestExecutor(settings).execute(lambda: client.get("/foo"))

    assert result == {"id": 1}
    assert len(calls) == 3


def test_executor_with_service_client_not_found(settings, service_client):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return make_response(404)

    client = service_client(handler)

    with pytest.raises(HttpError):
        RequestExecutor(settings).execute(lambda: client.get("/foo"))

    assert len(calls) == 1


def test_conversion_error_is_not_retried(settings, service_client):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.method)
        return httpx.Response(200, content=b"{broken", headers={"Content-Type": "application/json"})

    client = service_client(handler)

    with pytest.raises(ConversionError) as exc_info:
        RequestExecutor(settings).execute(lambda: client.post("/orders", json={"a": 1}))

    assert exc_info.value.retryable is False
    assert calls == ["POST"]
