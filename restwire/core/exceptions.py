from typing import Any, Dict, Optional

from restwire.models.common import FailureKind, Retryability


class RestwireError(Exception):
    """Базовый класс ошибок."""
    pass


class ConfigError(RestwireError):
    """Отсутствующая или битая конфигурация."""
    pass


class ServiceError(RestwireError):
    """
    Неуспешный вызов удаленного сервиса.
    retryable трехзначный: True / False / None (неизвестно).
    Executor НЕ ретраит только retryable is False.
    """
    kind: FailureKind = FailureKind.UNEXPECTED

    def __init__(
        self,
        message: str,
        retryable: Optional[bool] = None,
        user_message: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.retryable = retryable
        self.user_message = user_message
        self.cause = cause
        super().__init__(message)

    @property
    def retryability(self) -> Retryability:
        return Retryability.from_flag(self.retryable)

    def _identity(self) -> tuple:
        return (type(self), self.kind, self.message, self.retryable)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServiceError):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


class HttpError(ServiceError):
    """
    Классифицированный HTTP-сбой: ответ получен, статус не 2xx.
    """
    kind = FailureKind.HTTP

    def __init__(
        self,
        status_code: int,
        message: str,
        retryable: Optional[bool] = None,
        url: Optional[str] = None,
        reason: Optional[str] = None,
        response_body: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        cause: Optional[BaseException] = None,
    ):
        self.status_code = status_code
        self.url = url
        self.reason = reason
        self.response_body = response_body
        self.headers = headers or {}
        super().__init__(message, retryable=retryable, user_message=message, cause=cause)

    def _identity(self) -> tuple:
        # dict не хешируется, поэтому тело сводим к отсортированным парам
        body = tuple(sorted((k, repr(v)) for k, v in (self.response_body or {}).items()))
        return super()._identity() + (self.status_code, self.url, body)

    def __str__(self) -> str:
        return f"Status: {self.status_code}, URL: {self.url}, Message: {self.message}"

    def __repr__(self) -> str:
        return (
            f"HttpError(status_code={self.status_code}, "
            f"retryable={self.retryable!r}, message={self.message!r})"
        )


class NetworkError(ServiceError):
    """Сетевые ошибки (Connect, Read, Timeout). Ответа нет."""
    kind = FailureKind.NETWORK


class ConversionError(ServiceError):
    """Успешный ответ, который не удалось разобрать."""
    kind = FailureKind.CONVERSION


class UnexpectedError(ServiceError):
    """Все, что не попало в другие категории."""
    kind = FailureKind.UNEXPECTED
