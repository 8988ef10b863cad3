# src/nova_client/async_client.py
"""
Асинхронный транспорт compute API на базе httpx.

Тот же контракт, что у HTTPClient: классификация на границе транспорта,
ретраи только для rate limiting, ожидание приостанавливает лишь корутину.
"""

import time
from typing import Any, Dict, Optional

import httpx

from .core.config import ClientConfig
from .core.context import RequestContext
from .core.error_handler import ErrorHandler
from .core.exceptions import ClassifiedError, FaultError
from .core.http_client import DEFAULT_HEADERS
from .core.logging.logger import LoggerSink, NovaClientLogger, as_sink
from .core.retry_engine import RetryEngine


class AsyncHTTPClient:
    """
    Асинхронный HTTP клиент с retry для rate-limited ответов.

    Example:
        >>> async with AsyncHTTPClient(config) as client:
        ...     data = await client.get("/os-floating-ips", resource_kind="floating ip")

        >>> # Против симулятора сервиса
        >>> client = AsyncHTTPClient(config, transport=double.httpx_transport())
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        base_url: Optional[str] = None,
        logger: LoggerSink = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if config is None:
            config = ClientConfig(base_url=base_url)

        sink = as_sink(logger)
        self._owns_logger = False
        if sink is None and config.logging and config.logging.has_output:
            sink = NovaClientLogger(config.logging, name="nova_client.async")
            self._owns_logger = True

        self._config = config
        self._logger = sink
        self._transport = transport
        self._retry_engine = RetryEngine(config.retry, logger=sink)
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Lazy initialization of httpx client."""
        if self._client is None or self._client.is_closed:
            headers = dict(DEFAULT_HEADERS)
            headers.update(self._config.headers)
            self._client = httpx.AsyncClient(
                headers=headers,
                timeout=httpx.Timeout(
                    connect=self._config.timeout.connect,
                    read=self._config.timeout.read,
                    write=self._config.timeout.read,
                    pool=self._config.timeout.connect,
                ),
                verify=self._config.verify_ssl,
                transport=self._transport,
            )
        return self._client

    async def __aenter__(self) -> "AsyncHTTPClient":
        await self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close underlying httpx client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        if self._owns_logger and self._logger is not None:
            self._logger.close()

    def _build_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        base = self._config.base_url
        if base:
            return f"{base}/{path.lstrip('/')}"
        return path

    async def request(
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
            self._logger.info(
                "Request started",
                method=context.method,
                url=context.url,
                correlation_id=context.request_id,
            )

        try:
            result = await self._retry_engine.async_execute(
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
                    correlation_id=context.request_id,
                )
            raise

        if self._logger:
            self._logger.info(
                "Request completed",
                method=context.method,
                url=context.url,
                duration_ms=round((time.monotonic() - start_time) * 1000, 2),
                correlation_id=context.request_id,
            )
        return result

    async def _send_once(
        self,
        context: RequestContext,
        json: Any,
        params: Optional[Dict[str, Any]]
    ) -> Any:
        client = await self._get_client()
        try:
            response = await client.request(
                context.method,
                context.url,
                json=json,
                params=params,
                headers={"X-Correlation-ID": context.request_id},
            )
        except httpx.TimeoutException as e:
            raise FaultError(f"Request timeout: {e}", url=context.url) from e
        except httpx.HTTPError as e:
            raise FaultError(f"Request failed: {e}", url=context.url) from e

        if response.status_code >= 400:
            raise ErrorHandler.classify_response(response, context)

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

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> Optional[str]:
        return self._config.base_url
