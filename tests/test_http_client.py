import asyncio

import httpx
import pytest

from restwire.core.exceptions import HttpError, NetworkError
from restwire.execution.error_handler import ErrorClassifier
from restwire.execution.http_client import AsyncServiceClient, HttpClientFactory, ServiceClient

from tests.conftest import make_response


def test_factory_applies_settings(settings):
    seen = []

    def handler(request):
        seen.append(request)
        return make_response(200, {"ok": True})

    factory = HttpClientFactory(settings, transport=httpx.MockTransport(handler))

    with factory.client("http://svc") as client:
        assert client.timeout.read == settings.HTTP_TIMEOUT_READ
        client.get("/ping")

    assert seen[0].url == "http://svc/ping"
    assert seen[0].headers["Accept"] == "application/json"
    assert seen[0].headers["User-Agent"] == "restwire-test/0.0.1"


def test_service_client_methods(settings):
    seen = []

    def handler(request):
        seen.append(request.method)
        if request.method == "DELETE":
            return httpx.Response(204)
        return make_response(200, {"method": request.method})

    factory = HttpClientFactory(settings, transport=httpx.MockTransport(handler))

    with ServiceClient("http://svc", ErrorClassifier(), client=factory.build("http://svc")) as client:
        assert client.post("/things", json={"a": 1}) == {"method": "POST"}
        assert client.put("/things/1", json={"a": 2}) == {"method": "PUT"}
        assert client.delete("/things/1") is None
        raw = client.get("/things/1", raw=True)
        assert isinstance(raw, httpx.Response)

    assert seen == ["POST", "PUT", "DELETE", "GET"]


def test_async_service_client(settings):
    def handler(request):
        if request.url.path == "/gone":
            return make_response(410)
        if request.url.path == "/missing":
            return make_response(404, {"timestamp": "123123123123", "message": "Not Found error Message"})
        if request.url.path == "/down":
            raise httpx.ConnectError("refused", request=request)
        if request.url.path == "/moved":
            return httpx.Response(302, headers={"Location": "/elsewhere"})
        if request.url.path == "/cached":
            return httpx.Response(304)
        if request.method == "DELETE":
            return httpx.Response(204)
        return make_response(200, {"ok": True})

    factory = HttpClientFactory(settings, async_transport=httpx.MockTransport(handler))

    async def scenario():
        async with factory.async_client("http://svc") as http:
            async with AsyncServiceClient("http://svc", ErrorClassifier(), client=http) as client:
                assert await client.post("/things", json={}) == {"ok": True}

                with pytest.raises(HttpError) as gone:
                    await client.get("/gone")
                assert gone.value.retryable is None

                with pytest.raises(HttpError) as missing:
                    await client.get("/missing")
                assert missing.value.retryable is False
                assert missing.value.message == "Not Found error Message"

                with pytest.raises(NetworkError):
                    await client.get("/down")

                assert await client.put("/things/1", json={}) == {"ok": True}
                assert await client.delete("/things/1") is None

                for path, status in (("/moved", 302), ("/cached", 304)):
                    with pytest.raises(HttpError) as not_2xx:
                        await client.get(path)
                    assert not_2xx.value.status_code == status
                    assert not_2xx.value.retryable is None

    asyncio.run(scenario())
