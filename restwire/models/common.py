from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    """Вид сбоя вызова сервиса"""
    HTTP = "http"               # Ответ получен, статус не 2xx
    NETWORK = "network"         # Connect / Read / Timeout
    CONVERSION = "conversion"   # 2xx, но тело не удалось разобрать
    UNEXPECTED = "unexpected"   # Все остальное


class Retryability(str, Enum):
    """
    Явное трехзначное состояние "можно ли повторить запрос".
    UNKNOWN != NOT_RETRYABLE: UNKNOWN значит "классификатор не решал".
    """
    RETRYABLE = "retryable"
    NOT_RETRYABLE = "not_retryable"
    UNKNOWN = "unknown"

    @classmethod
    def from_flag(cls, flag: Optional[bool]) -> "Retryability":
        if flag is None:
            return cls.UNKNOWN
        return cls.RETRYABLE if flag else cls.NOT_RETRYABLE

    def as_flag(self) -> Optional[bool]:
        if self is Retryability.UNKNOWN:
            return None
        return self is Retryability.RETRYABLE
