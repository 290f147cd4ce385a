from http import HTTPStatus
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ErrorResponseBody(BaseModel):
    """
    Ожидаемая схема тела ошибки (Spring-like).
    Все поля опциональны: сервер может прислать что угодно.
    Лишние поля игнорируются.
    """
    timestamp: Optional[str] = None
    status: Optional[HTTPStatus] = None
    error: Optional[str] = None
    exception: Optional[str] = None
    message: Optional[str] = None
    path: Optional[str] = None
    # Spring шлет сюда и строки, и объекты {"field": ..., "defaultMessage": ...}
    errors: List[Any] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @field_validator("timestamp", mode="before")
    @classmethod
    def coerce_timestamp(cls, v: Any) -> Any:
        # Epoch millis приходит и числом, и строкой
        if isinstance(v, (int, float)):
            return str(v)
        return v


class LenientErrorResponseBody(ErrorResponseBody):
    """
    Та же схема, но неизвестные значения enum читаются как None
    вместо ValidationError.
    """

    @field_validator("status", mode="before")
    @classmethod
    def unknown_status_as_none(cls, v: Any) -> Any:
        if v is None or isinstance(v, HTTPStatus):
            return v
        try:
            return HTTPStatus(int(v))
        except (TypeError, ValueError):
            return None
