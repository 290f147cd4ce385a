import asyncio
import json
import logging

import httpx

from restwire.core.exceptions import HttpError
from restwire.execution.error_handler import ErrorClassifier
from restwire.execution.executor import RequestExecutor
from restwire.execution.http_client import AsyncServiceClient
from restwire.transport.decoders import get_decoder

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")


# --- Mocks ---
class MockSettings:
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_MIN_WAIT: float = 0.01
    RETRY_MAX_WAIT: float = 0.05


def make_client(handler, decoder_name: str = "lenient") -> AsyncServiceClient:
    http = httpx.AsyncClient(base_url="http://mock", transport=httpx.MockTransport(handler))
    classifier = ErrorClassifier(get_decoder(decoder_name))
    return AsyncServiceClient("http://mock", classifier, client=http)


async def expect_error(client: AsyncServiceClient, label: str, expected_retryable):
    try:
        await client.get("/foo")
        print(f"FAILED [{label}]: should have raised HttpError")
    except HttpError as e:
        if e.retryable is expected_retryable:
            print(f"SUCCESS [{label}]: {e} retryable={e.retryable}")
        else:
            print(f"FAILED [{label}]: retryable={e.retryable}, expected {expected_retryable}")
    finally:
        await client.aclose()


async def test_classification():
    print("\n--- Test 1: 404 / 400 / 410 classification ---")
    body = json.dumps({"timestamp": "123123123123", "message": "Not Found error Message"})
    for decoder_name in ("json", "model", "lenient"):
        client = make_client(lambda r: httpx.Response(404, content=body.encode()), decoder_name)
        await expect_error(client, f"404 extra field / {decoder_name}", False)

    await expect_error(make_client(lambda r: httpx.Response(400)), "400", False)
    await expect_error(make_client(lambda r: httpx.Response(410)), "410", None)


async def test_unknown_is_retried():
    print("\n--- Test 2: 503 (unknown) -> Retry ---")
    responses = iter([httpx.Response(503), httpx.Response(503), httpx.Response(200, json={"ok": True})])
    calls = []

    def handler(request):
        calls.append(request)
        return next(responses)

    client = make_client(handler)
    result = await RequestExecutor(MockSettings()).execute_async(lambda: client.get("/foo"))
    await client.aclose()

    if len(calls) == 3 and result == {"ok": True}:
        print("SUCCESS: 3 attempts made, eventually succeeded.")
    else:
        print(f"FAILED: Expected 3 calls, got {len(calls)}")


async def test_not_found_fail_fast():
    print("\n--- Test 3: 404 (not retryable) -> Fail Fast ---")
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(404)

    client = make_client(handler)
    try:
        await RequestExecutor(MockSettings()).execute_async(lambda: client.get("/foo"))
        print("FAILED: Should have raised HttpError")
    except HttpError:
        if len(calls) == 1:
            print("SUCCESS: Strictly 1 attempt (No retry on 404).")
        else:
            print(f"FAILED: Executed {len(calls)} times! Should be 1.")
    finally:
        await client.aclose()


async def main():
    await test_classification()
    await test_unknown_is_retried()
    await test_not_found_fail_fast()


if __name__ == "__main__":
    asyncio.run(main())
