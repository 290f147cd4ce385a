import logging
from typing import Any, Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

from restwire.core.exceptions import ServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_retryable_failure(e: BaseException) -> bool:
    """
    Стратегия Retry vs Fail Fast.
    retryable=False (400/404) -> падаем сразу.
    retryable=None/True       -> повторяем.
    Не-ServiceError           -> это баг вызывающего кода, не ретраим.
    """
    if not isinstance(e, ServiceError):
        return False
    return e.retryable is not False


class RequestExecutor:
    def __init__(self, settings: Any):
        self.settings = settings

    def _policy(self) -> dict:
        return dict(
            retry=retry_if_exception(is_retryable_failure),
            stop=stop_after_attempt(self.settings.RETRY_MAX_ATTEMPTS),
            wait=wait_random_exponential(
                multiplier=self.settings.RETRY_MIN_WAIT,
                max=self.settings.RETRY_MAX_WAIT
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True
        )

    def execute(self, call: Callable[[], T]) -> T:
        """
        Выполняет вызов с политикой Resilience.
        Исключение последней попытки уходит наружу как есть.
        """
        for attempt in Retrying(**self._policy()):
            with attempt:
                return call()

    async def execute_async(self, call: Callable[[], Awaitable[T]]) -> T:
        async for attempt in AsyncRetrying(**self._policy()):
            with attempt:
                return await call()
