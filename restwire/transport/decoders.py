import json
from typing import Any, Dict, Optional, Type

from restwire.core.exceptions import ConfigError
from restwire.models.error_body import ErrorResponseBody, LenientErrorResponseBody


class BodyDecoder:
    """
    Контракт декодера тела ответа.
    decode() возвращает dict или None (пустое тело).
    Ошибки разбора пробрасываются: решение принимает вызывающий код.
    """
    name = "base"

    def decode(self, content: bytes) -> Optional[Dict[str, Any]]:
        raise NotImplementedError


class JsonBodyDecoder(BodyDecoder):
    """Обычный JSON без схемы."""
    name = "json"

    def decode(self, content: bytes) -> Optional[Dict[str, Any]]:
        if not content or not content.strip():
            return None
        data = json.loads(content)
        if isinstance(data, dict):
            return data
        # Массив или скаляр: оборачиваем, чтобы форма ответа была одна
        return {"message": data if isinstance(data, str) else json.dumps(data)}


class ModelBodyDecoder(BodyDecoder):
    """
    Валидация через pydantic-схему ErrorResponseBody.
    Лишние поля игнорируются, неизвестный enum -> ValidationError.
    """
    name = "model"
    model: Type[ErrorResponseBody] = ErrorResponseBody

    def decode(self, content: bytes) -> Optional[Dict[str, Any]]:
        if not content or not content.strip():
            return None
        body = self.model.model_validate_json(content)
        return body.model_dump(mode="json", exclude_none=True)


class LenientModelBodyDecoder(ModelBodyDecoder):
    """Как ModelBodyDecoder, но неизвестный enum читается как None."""
    name = "lenient"
    model = LenientErrorResponseBody


_DECODERS: Dict[str, Type[BodyDecoder]] = {
    JsonBodyDecoder.name: JsonBodyDecoder,
    ModelBodyDecoder.name: ModelBodyDecoder,
    LenientModelBodyDecoder.name: LenientModelBodyDecoder,
}


def get_decoder(name: str) -> BodyDecoder:
    try:
        return _DECODERS[name]()
    except KeyError:
        raise ConfigError(f"Unknown body decoder: {name!r}. Known: {sorted(_DECODERS)}") from None
