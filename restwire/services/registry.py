import logging
import threading
from typing import Any, Dict, Optional

from restwire.config.services import ServiceConfig, load_services_config
from restwire.config.settings import get_settings
from restwire.core.exceptions import ConfigError
from restwire.execution.error_handler import ErrorClassifier
from restwire.execution.http_client import HttpClientFactory, ServiceClient
from restwire.transport.decoders import get_decoder

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """
    Реестр клиентов по имени сервиса.
    Один классификатор на все клиенты: он stateless.
    Клиенты создаются лениво (под локом) и живут до close().
    """

    def __init__(
        self,
        services: Dict[str, ServiceConfig],
        settings: Any,
        classifier: Optional[ErrorClassifier] = None,
        factory: Optional[HttpClientFactory] = None,
    ):
        self.services = services
        self.settings = settings
        self.classifier = classifier or ErrorClassifier(get_decoder(settings.BODY_DECODER))
        self.factory = factory or HttpClientFactory(settings)
        self._clients: Dict[str, ServiceClient] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Any = None, **kwargs: Any) -> "ServiceRegistry":
        settings = settings or get_settings()
        return cls(load_services_config(settings.SERVICES_CONFIG_PATH), settings, **kwargs)

    def client(self, name: str) -> ServiceClient:
        with self._lock:
            if name in self._clients:
                return self._clients[name]

            config = self.services.get(name)
            if config is None:
                raise ConfigError(f"Unknown service: {name!r}. Configured: {sorted(self.services)}")

            # Декодер сервиса перекрывает глобальный
            decoder = get_decoder(config.decoder) if config.decoder else None
            client = ServiceClient(
                config.base_url,
                self.classifier,
                decoder=decoder,
                client=self.factory.build(config.base_url),
            )
            logger.info(f"Created client for '{name}' -> {config.base_url}")
            self._clients[name] = client
            return client

    def close(self) -> None:
        with self._lock:
            for client in self._clients.values():
                client.close()
            self._clients.clear()
