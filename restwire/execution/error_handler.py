import logging
from typing import Any, Dict, FrozenSet, Optional

import httpx
import requests

from restwire.core.exceptions import (
    ConversionError,
    HttpError,
    NetworkError,
    ServiceError,
    UnexpectedError,
)
from restwire.transport.decoders import BodyDecoder, LenientModelBodyDecoder

logger = logging.getLogger(__name__)

# Клиентские ошибки, про которые точно известно: повтор не поможет.
NON_RETRYABLE_STATUSES: FrozenSet[int] = frozenset({400, 404})


def is_success(status_code: int) -> bool:
    """Успех только 2xx: 1xx и 3xx тоже ошибка вызова."""
    return 200 <= status_code < 300


def _response_url(response: Any) -> Optional[str]:
    # httpx.Response.url падает с RuntimeError, если request не привязан
    try:
        url = response.url
    except RuntimeError:
        return None
    return str(url) if url else None


def _response_reason(response: Any) -> Optional[str]:
    reason = getattr(response, "reason_phrase", None) or getattr(response, "reason", None)
    if isinstance(reason, bytes):
        reason = reason.decode("latin-1")
    return reason or None


class ErrorClassifier:
    """
    Классификатор ошибок вызова сервиса.
    Stateless: один инстанс безопасно делить между потоками и клиентами.
    Внедряется в клиента явно (никаких глобальных синглтонов).

    Политика retryable:
      400, 404      -> False
      прочие статусы -> None (неизвестно, решает вызывающий код)
    """

    def __init__(self, decoder: Optional[BodyDecoder] = None):
        self.decoder = decoder or LenientModelBodyDecoder()

    def _decode_body(self, response: Any, decoder: BodyDecoder) -> Optional[Dict[str, Any]]:
        """Разбор тела НЕ должен ломать классификацию."""
        content = getattr(response, "content", b"") or b""
        try:
            return decoder.decode(content)
        except Exception as e:
            logger.debug(
                f"Failed to decode error body with '{decoder.name}' decoder "
                f"({e.__class__.__name__}). Falling back to empty body."
            )
            return None

    def classify(
        self,
        response: Any,
        url: Optional[str] = None,
        decoder: Optional[BodyDecoder] = None,
        cause: Optional[BaseException] = None,
    ) -> HttpError:
        """
        Превращает неуспешный ответ (httpx или requests) в HttpError.
        Всегда успешна.
        """
        status = int(response.status_code)
        body = self._decode_body(response, decoder or self.decoder)
        reason = _response_reason(response)

        message = None
        if body:
            message = body.get("message") or body.get("error")
        if not message:
            message = reason or f"HTTP {status}"

        retryable = False if status in NON_RETRYABLE_STATUSES else None

        error = HttpError(
            status_code=status,
            message=str(message),
            retryable=retryable,
            url=url or _response_url(response),
            reason=reason,
            response_body=body,
            headers=dict(getattr(response, "headers", None) or {}),
            cause=cause,
        )
        logger.debug(f"Classified HTTP {status} -> retryable={retryable}")
        return error

    def handle(self, exc: BaseException, url: Optional[str] = None) -> ServiceError:
        """
        Переводит исключение транспорта в таксономию ServiceError.
        Сырое исключение наружу не уходит, оно остается в .cause.
        """
        if isinstance(exc, ServiceError):
            return exc

        # 1. Ответ получен (raise_for_status)
        if isinstance(exc, (httpx.HTTPStatusError, requests.HTTPError)) and exc.response is not None:
            return self.classify(exc.response, url=url, cause=exc)

        # 2. Ответа нет: сеть / таймаут
        if isinstance(exc, (httpx.TransportError, requests.ConnectionError, requests.Timeout)):
            return NetworkError(f"Network failure: {exc.__class__.__name__}: {exc}", cause=exc)

        # 3. Тело успешного ответа не разобрано: повтор даст тот же результат
        if isinstance(exc, (httpx.DecodingError, ValueError)):
            return ConversionError(f"Failed to convert response: {exc}", retryable=False, cause=exc)

        return UnexpectedError(f"Unexpected failure: {exc.__class__.__name__}: {exc}", cause=exc)
