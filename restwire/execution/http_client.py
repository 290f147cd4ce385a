import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncGenerator, Dict, Generator, Optional

import httpx

from restwire.config.headers import get_headers
from restwire.execution.error_handler import ErrorClassifier, is_success
from restwire.transport.decoders import BodyDecoder

logger = logging.getLogger(__name__)

# InvalidURL и StreamError не наследуют httpx.HTTPError
CLIENT_ERRORS = (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError)


class HttpClientFactory:
    """
    Фабрика HTTP-клиентов с поддержкой Dependency Injection.
    Таймауты, лимиты и заголовки берутся из settings.
    transport можно подменить (httpx.MockTransport в тестах).
    """

    def __init__(
        self,
        settings: Any,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.transport = transport
        self.async_transport = async_transport

    def _client_kwargs(self, base_url: str) -> Dict[str, Any]:
        timeout = httpx.Timeout(
            connect=self.settings.HTTP_TIMEOUT_CONNECT,
            read=self.settings.HTTP_TIMEOUT_READ,
            write=self.settings.HTTP_TIMEOUT_WRITE,
            pool=self.settings.HTTP_TIMEOUT_POOL,
        )
        limits = httpx.Limits(
            max_keepalive_connections=self.settings.MAX_CONNECTIONS,
            max_connections=self.settings.MAX_CONNECTIONS * 2
        )
        return dict(
            base_url=base_url,
            headers=get_headers(self.settings),
            timeout=timeout,
            limits=limits,
        )

    def build(self, base_url: str) -> httpx.Client:
        return httpx.Client(transport=self.transport, **self._client_kwargs(base_url))

    def build_async(self, base_url: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.async_transport, **self._client_kwargs(base_url))

    @contextmanager
    def client(self, base_url: str) -> Generator[httpx.Client, None, None]:
        try:
            with self.build(base_url) as client:
                yield client
        except Exception as e:
            logger.error(f"HTTP Client failed. Base URL: {base_url}. Error class: {e.__class__.__name__}")
            raise

    @asynccontextmanager
    async def async_client(self, base_url: str) -> AsyncGenerator[httpx.AsyncClient, None]:
        try:
            async with self.build_async(base_url) as client:
                yield client
        except Exception as e:
            logger.error(f"HTTP Client failed. Base URL: {base_url}. Error class: {e.__class__.__name__}")
            raise


def _decode_success(response: httpx.Response) -> Any:
    if not response.content:
        return None
    ctype = response.headers.get("Content-Type", "")
    if "json" in ctype:
        return response.json()
    return response.text


class ServiceClient:
    """
    Retrofit-style клиент сервиса.
    Не-2xx ответ -> HttpError (через классификатор),
    сбой транспорта -> NetworkError / ConversionError / UnexpectedError.
    Сырые исключения httpx наружу не уходят.
    """

    def __init__(
        self,
        base_url: str,
        classifier: ErrorClassifier,
        decoder: Optional[BodyDecoder] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url
        self.classifier = classifier
        self.decoder = decoder
        self._client = client or httpx.Client(base_url=base_url)

    def request(self, method: str, path: str, *, raw: bool = False, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method.upper(), path, **kwargs)
        except CLIENT_ERRORS as e:
            raise self.classifier.handle(e) from e

        if not is_success(response.status_code):
            raise self.classifier.classify(response, decoder=self.decoder)

        if raw:
            return response
        try:
            return _decode_success(response)
        except ValueError as e:
            raise self.classifier.handle(e) from e

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> Any:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ServiceClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class AsyncServiceClient:
    """То же, что ServiceClient, поверх httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str,
        classifier: ErrorClassifier,
        decoder: Optional[BodyDecoder] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url
        self.classifier = classifier
        self.decoder = decoder
        self._client = client or httpx.AsyncClient(base_url=base_url)

    async def request(self, method: str, path: str, *, raw: bool = False, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method.upper(), path, **kwargs)
        except CLIENT_ERRORS as e:
            raise self.classifier.handle(e) from e

        if not is_success(response.status_code):
            raise self.classifier.classify(response, decoder=self.decoder)

        if raw:
            return response
        try:
            return _decode_success(response)
        except ValueError as e:
            raise self.classifier.handle(e) from e

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncServiceClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
