# src/nova_client/core/http_client.py
from typing import Any, Dict, Mapping, Optional
import time

import requests
from requests.adapters import BaseAdapter, HTTPAdapter
from requests.exceptions import RequestException

from .config import ClientConfig
from .context import RequestContext
from .error_handler import ErrorHandler
from .exceptions import ClassifiedError, FaultError
from .logging.filters import clear_correlation_id, set_correlation_id
from .logging.logger import LoggerSink, NovaClientLogger, as_sink
from .retry_engine import RetryEngine
from .session_manager import ThreadSafeSessionManager

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class HTTPClient:
    """
    Синхронный транспорт compute API: HTTP/JSON поверх requests.

    Каждая попытка проходит через ErrorHandler (классификация один раз,
    на границе транспорта), каждый запрос целиком - через RetryEngine.

    Features:
        - Thread-safe: каждый поток получает собственную сессию
        - Подключаемые transport adapters (например, симулятор сервиса)
        - Структурное логирование с correlation id
        - Immutable после инициализации

    Example:
        >>> config = ClientConfig.create("https://compute.example.com/v2/tenant", auth_token=token)
        >>> with HTTPClient(config) as http:
        ...     data = http.get("/os-floating-ips", resource_kind="floating ip")
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        base_url: Optional[str] = None,
        logger: LoggerSink = None,
        adapters: Optional[Mapping[str, BaseAdapter]] = None,
    ):
        """
        Args:
            config: ClientConfig instance
            base_url: Base URL (если config не передан)
            logger: Sink для логов и retry-сообщений; если None, строится
                из config.logging (None = без логов)
            adapters: {url prefix: adapter} для монтирования в каждую сессию
        """
        if config is None:
            config = ClientConfig(base_url=base_url)

        sink = as_sink(logger)
        owns_logger = False
        if sink is None and config.logging and config.logging.has_output:
            sink = NovaClientLogger(config.logging, name="nova_client.http")
            owns_logger = True

        object.__setattr__(self, '_config', config)
        object.__setattr__(self, '_logger', sink)
        object.__setattr__(self, '_owns_logger', owns_logger)
        object.__setattr__(self, '_adapters', dict(adapters or {}))
        object.__setattr__(self, '_retry_engine', RetryEngine(config.retry, logger=sink))
        object.__setattr__(
            self,
            '_session_manager',
            ThreadSafeSessionManager(session_factory=self._create_session)
        )
        object.__setattr__(self, '_initialized', True)

    def __setattr__(self, name, value):
        """Запретить изменение после init (immutability)."""
        if hasattr(self, '_initialized'):
            raise RuntimeError(
                f"Cannot modify '{name}' - HTTPClient is immutable. "
                f"Create new instance instead."
            )
        object.__setattr__(self, name, value)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _create_session(self) -> requests.Session:
        """Create configured session."""
        session = requests.Session()

        # Ретраи только через RetryEngine
        adapter = HTTPAdapter(max_retries=0)
        session.mount('http://', adapter)
        session.mount('https://', adapter)

        for prefix, custom in self._adapters.items():
            session.mount(prefix, custom)

        session.headers.update(DEFAULT_HEADERS)
        session.headers.update(self._config.headers)
        return session

    def close(self):
        """Закрывает сессии всех потоков и (свой) логгер."""
        self._session_manager.close_all()
        if self._owns_logger and self._logger is not None:
            self._logger.close()

    # ==================== Запросы ====================

    def _build_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        base = self._config.base_url
        if base:
            return f"{base}/{path.lstrip('/')}"
        return path

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        resource_kind: str = "resource",
        resource_id: Optional[str] = None,
    ) -> Any:
        """
        Выполнить запрос с retry и классификацией ошибок.

        Args:
            method: HTTP метод
            path: Путь относительно base_url или полный URL
            json: Тело запроса
            params: Query параметры
            resource_kind: Вид ресурса для сообщений об ошибках
            resource_id: Id/имя ресурса для сообщений об ошибках

        Returns:
            Декодированный JSON или None для пустого тела

        Raises:
            ClassifiedError: Классифицированная ошибка провайдера
        """
        context = RequestContext(
            method=method.upper(),
            url=self._build_url(path),
            resource_kind=resource_kind,
            resource_id=resource_id,
        )
        start_time = time.monotonic()

        if self._logger:
            set_correlation_id(context.request_id)
            self._logger.info(
                "Request started",
                method=context.method,
                url=context.url,
                max_attempts=self._config.retry.max_attempts,
            )

        try:
            result = self._retry_engine.execute(
                lambda: self._send_once(context, json, params),
                context,
            )
        except ClassifiedError as error:
            if self._logger:
                self._logger.error(
                    "Request failed",
                    method=context.method,
                    url=context.url,
                    error=str(error),
                    error_kind=error.kind.value,
                    duration_ms=round((time.monotonic() - start_time) * 1000, 2),
                )
            raise
        else:
            if self._logger:
                self._logger.info(
                    "Request completed",
                    method=context.method,
                    url=context.url,
                    duration_ms=round((time.monotonic() - start_time) * 1000, 2),
                )
            return result
        finally:
            if self._logger:
                clear_correlation_id()

    def _send_once(self, context: RequestContext, json: Any, params: Optional[Dict[str, Any]]) -> Any:
        """Одна попытка: отправить, классифицировать, декодировать."""
        try:
            response = self.session.request(
                method=context.method,
                url=context.url,
                json=json,
                params=params,
                headers={"X-Correlation-ID": context.request_id},
                timeout=self._config.timeout.as_tuple(),
                verify=self._config.verify_ssl,
            )
        except RequestException as e:
            raise ErrorHandler.classify_requests_exception(e, context.url) from e

        if response.status_code >= 400:
            raise ErrorHandler.classify_response(response, context)

        return self._decode(response, context)

    @staticmethod
    def _decode(response: requests.Response, context: RequestContext) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise FaultError(
                f"Invalid JSON in response: {response.text[:200]}",
                status_code=response.status_code,
                url=context.url,
            ) from None

    def get(self, path: str, **kwargs: Any) -> Any:
        """Выполняет GET запрос."""
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        """Выполняет POST запрос."""
        return self.request("POST", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        """Выполняет DELETE запрос."""
        return self.request("DELETE", path, **kwargs)

    # ==================== Свойства ====================

    @property
    def session(self) -> requests.Session:
        """Сессия текущего потока."""
        return self._session_manager.get_session()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def retry_engine(self) -> RetryEngine:
        return self._retry_engine

    @property
    def base_url(self) -> Optional[str]:
        return self._config.base_url
