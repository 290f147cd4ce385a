from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- Basic Info ---
    APP_NAME: str = "restwire"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SERVICES_CONFIG_PATH: Path = BASE_DIR / "config" / "services.yaml"

    # --- HTTP Client Configuration ---
    MAX_CONNECTIONS: int = 10
    HTTP_TIMEOUT_CONNECT: float = 10.0
    HTTP_TIMEOUT_READ: float = 30.0
    HTTP_TIMEOUT_WRITE: float = 10.0
    HTTP_TIMEOUT_POOL: float = 5.0

    # Каким механизмом разбирать тело ошибки
    BODY_DECODER: Literal["json", "model", "lenient"] = "lenient"

    # --- Retry Policy Configuration ---
    # Ретраим все, кроме retryable=False (400, 404).
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_MIN_WAIT: float = 1.0
    RETRY_MAX_WAIT: float = 10.0

    model_config = SettingsConfigDict(
        env_prefix="RESTWIRE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
