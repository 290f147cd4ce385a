import logging
from typing import Any, Optional

import requests

from restwire.config.headers import get_headers
from restwire.execution.error_handler import ErrorClassifier, is_success
from restwire.transport.decoders import BodyDecoder

logger = logging.getLogger(__name__)


class SessionFetcher:
    """
    Транспортный слой на базе requests (синхронный).
    Контракт ошибок тот же, что у ServiceClient:
    не-2xx -> HttpError, сеть -> NetworkError.
    """

    def __init__(
        self,
        base_url: str,
        classifier: ErrorClassifier,
        settings: Any,
        decoder: Optional[BodyDecoder] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.classifier = classifier
        self.decoder = decoder
        self.timeout = (settings.HTTP_TIMEOUT_CONNECT, settings.HTTP_TIMEOUT_READ)
        self.session = session or requests.Session()
        self.session.headers.update(get_headers(settings))

    def request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = path if path.startswith("http") else f"{self.base_url}/{path.lstrip('/')}"
        kwargs.setdefault("timeout", self.timeout)

        try:
            logger.debug(f"{method.upper()} {url}")
            response = self.session.request(method.upper(), url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"HTTP Request failed: {e.__class__.__name__}")
            raise self.classifier.handle(e, url=url) from e

        if not is_success(response.status_code):
            raise self.classifier.classify(response, url=url, decoder=self.decoder)
        return response

    def get_json(self, path: str, **kwargs: Any) -> Any:
        response = self.request("GET", path, **kwargs)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise self.classifier.handle(e, url=response.url) from e

    def close(self) -> None:
        self.session.close()
