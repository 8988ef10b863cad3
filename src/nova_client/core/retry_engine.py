"""
Retry engine для rate-limited запросов.

Машина состояний на каждый вызов:
    Attempting -> Success
    Attempting -> Retrying -> Attempting   (только RateLimitedError)
    Attempting -> Exhausted                (attempt == max_attempts)

Любая другая ошибка возвращается вызывающему с первой попытки.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, TypeVar

from .config import RetryConfig
from .context import RequestContext, RetryState
from .exceptions import MaxAttemptsExceededError, RateLimitedError
from .logging.logger import LoggerSink, as_sink

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRY_NOTICE = "Too many requests, retrying in {wait_ms}ms"


class RetryEngine:
    """
    Выполняет вызов под контрактом ограниченного числа попыток.

    Движок не хранит состояние между вызовами: счётчик попыток живёт
    в RetryState, который создаётся на входе в execute(). Один движок
    можно использовать из нескольких потоков одновременно.

    Examples:
        >>> engine = RetryEngine(RetryConfig(max_attempts=3), logger=sink)
        >>> groups = engine.execute(lambda: transport.get("/os-security-groups"))
    """

    def __init__(
        self,
        config: RetryConfig,
        logger: LoggerSink = None,
        sleep: Callable[[float], None] = time.sleep,
        async_sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            config: Конфигурация retry
            logger: Sink для retry-сообщений (None = ретраим молча)
            sleep: Функция ожидания (подменяется в тестах)
            async_sleep: Async функция ожидания
        """
        self.config = config
        self._sink = as_sink(logger)
        self._sleep = sleep
        self._async_sleep = async_sleep

    @property
    def max_attempts(self) -> int:
        return self.config.max_attempts

    def should_retry(self, error: Exception, state: RetryState) -> bool:
        """
        Решить нужен ли retry.

        Ретраим только RateLimitedError и только пока есть попытки.
        """
        if not isinstance(error, RateLimitedError):
            return False
        return state.attempt < self.config.max_attempts

    def get_wait_time(self, attempt: int, error: Optional[Exception] = None) -> float:
        """
        Вычислить время ожидания перед следующей попыткой.

        Args:
            attempt: Номер неудавшейся попытки (с 1)
            error: Ошибка (может нести Retry-After подсказку)

        Returns:
            Секунды для ожидания
        """
        # Приоритет 1: подсказка провайдера
        if self.config.respect_retry_after:
            retry_after = getattr(error, "retry_after", None)
            if retry_after is not None:
                return min(float(retry_after), self.config.retry_after_max)

        # Приоритет 2: своя функция backoff
        if self.config.backoff is not None:
            return max(0.0, float(self.config.backoff(attempt)))

        # Приоритет 3: exponential backoff (без jitter, неубывающий)
        wait = self.config.backoff_base * (self.config.backoff_factor ** (attempt - 1))
        return min(wait, self.config.backoff_max)

    def _on_failure(
        self,
        error: Exception,
        state: RetryState,
        context: Optional[RequestContext]
    ) -> float:
        """
        Обработать неудачную попытку.

        Returns:
            Сколько ждать перед следующей попыткой

        Raises:
            Исходную ошибку (не ретраим) или MaxAttemptsExceededError
        """
        state.last_error = error

        if not isinstance(error, RateLimitedError):
            raise error

        if not self.should_retry(error, state):
            url = context.url if context else error.url
            if self._sink:
                self._sink.error(
                    "Maximum number of attempts reached",
                    attempt=state.attempt,
                    max_attempts=self.config.max_attempts,
                    url=url,
                )
            raise MaxAttemptsExceededError(
                max_attempts=self.config.max_attempts,
                url=url,
                last_error=error,
            ) from error

        wait_time = self.get_wait_time(state.attempt, error)
        wait_ms = int(round(wait_time * 1000))

        if self._sink:
            self._sink.warning(
                RETRY_NOTICE.format(wait_ms=wait_ms),
                attempt=state.attempt,
                max_attempts=self.config.max_attempts,
                wait_ms=wait_ms,
                url=context.url if context else error.url,
            )
        else:
            logger.debug(f"Rate limited, retry {state.attempt}/{self.config.max_attempts} in {wait_ms}ms")

        return wait_time

    def execute(self, call: Callable[[], T], context: Optional[RequestContext] = None) -> T:
        """
        Выполнить вызов с ретраями.

        Args:
            call: Функция без аргументов, выполняющая одну попытку
            context: Контекст запроса (для сообщений)

        Returns:
            Результат первой успешной попытки
        """
        state = RetryState()
        while True:
            try:
                return call()
            except Exception as error:
                wait_time = self._on_failure(error, state, context)

            self._sleep(wait_time)
            state.attempt += 1

    async def async_execute(
        self,
        call: Callable[[], Awaitable[T]],
        context: Optional[RequestContext] = None
    ) -> T:
        """
        Асинхронная версия execute().

        Ожидание приостанавливает только текущую корутину.

        Examples:
            >>> data = await engine.async_execute(lambda: client.send_once(ctx))
        """
        state = RetryState()
        while True:
            try:
                return await call()
            except Exception as error:
                wait_time = self._on_failure(error, state, context)

            await self._async_sleep(wait_time)
            state.attempt += 1
