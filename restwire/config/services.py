from __future__ import annotations

from pathlib import Path
from typing import Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from restwire.core.exceptions import ConfigError


class ServiceConfig(BaseModel):
    base_url: str
    decoder: Optional[Literal["json", "model", "lenient"]] = None

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be http(s): {v}")
        return v.rstrip("/")


def load_services_config(path: Union[str, Path]) -> Dict[str, ServiceConfig]:
    """
    Читает YAML вида:

        services:
          front50:
            base_url: http://front50:8080
            decoder: lenient
    """
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {p.resolve()}")

    data = yaml.safe_load(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ConfigError("Config must be a YAML mapping (top-level dict).")

    services = data.get("services") or {}
    if not isinstance(services, dict):
        raise ConfigError("'services' must be a mapping of name -> service config.")

    result: Dict[str, ServiceConfig] = {}
    for name, raw in services.items():
        try:
            result[str(name)] = ServiceConfig.model_validate(raw or {})
        except ValidationError as e:
            raise ConfigError(f"Invalid config for service '{name}': {e}") from e
    return result
