"""
Система конфигурации для Nova Client.

Все конфиги immutable (frozen dataclasses) для потокобезопасности.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .logging import LoggingConfig

# Общий потолок попыток для клиента и ожиданий в тестах
MAX_SEND_ATTEMPTS = 3

AUTH_TOKEN_HEADER = "X-Auth-Token"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов.

    Args:
        connect: Таймаут подключения (сек)
        read: Таймаут чтения данных (сек)

    Examples:
        >>> TimeoutConfig(connect=5, read=30)
    """
    connect: float = 5
    read: float = 30

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.read <= 0:
            raise ValueError("read timeout must be positive")

    def as_tuple(self) -> Tuple[float, float]:
        """Вернуть как (connect, read) для requests."""
        return (self.connect, self.read)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RETRY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RetryConfig:
    """
    Конфигурация retry стратегии для rate-limited ответов.

    Args:
        max_attempts: Максимум попыток (включая первую), >= 1
        backoff_base: Базовая задержка (сек)
        backoff_factor: Множитель для exponential backoff
        backoff_max: Максимальная задержка (сек)
        backoff: Своя функция attempt -> секунды (заменяет exponential)
        respect_retry_after: Учитывать Retry-After подсказку провайдера
        retry_after_max: Максимум ждать из Retry-After (сек)

    Examples:
        >>> RetryConfig(max_attempts=3, backoff_base=0.5)
        >>> RetryConfig(backoff=lambda attempt: 0.0)  # для тестов
    """
    max_attempts: int = MAX_SEND_ATTEMPTS
    backoff_base: float = 1.0
    backoff_factor: float = 2.0
    backoff_max: float = 60.0
    backoff: Optional[Callable[[int], float]] = None

    respect_retry_after: bool = True
    retry_after_max: float = 300  # 5 минут

    def __post_init__(self):
        """Валидация."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.backoff_base < 0:
            raise ValueError("backoff_base must be non-negative")
        if self.backoff_factor < 1:
            raise ValueError("backoff_factor must be >= 1")
        if self.backoff_max < 0:
            raise ValueError("backoff_max must be non-negative")
        if self.retry_after_max < 0:
            raise ValueError("retry_after_max must be non-negative")
        if self.backoff is not None and not callable(self.backoff):
            raise ValueError("backoff must be callable")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ClientConfig:
    """
    Главная конфигурация клиента compute API.

    Args:
        base_url: URL compute endpoint (включая tenant, если нужен)
        headers: Дефолтные заголовки
        timeout: Конфигурация таймаутов
        retry: Конфигурация retry
        verify_ssl: Проверять SSL сертификаты
        logging: Конфигурация логирования (None = без логирования)

    Examples:
        >>> config = ClientConfig(base_url="https://compute.example.com/v2/tenant")
        >>> config = ClientConfig.create(base_url, auth_token="abc", max_attempts=5)
    """
    base_url: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    verify_ssl: bool = True
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Заморозить headers и нормализовать base_url."""
        if isinstance(self.headers, dict):
            object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))

        if self.base_url:
            normalized = self.base_url.rstrip('/')
            if normalized != self.base_url:
                object.__setattr__(self, 'base_url', normalized)

    @property
    def auth_token(self) -> Optional[str]:
        return self.headers.get(AUTH_TOKEN_HEADER)

    @classmethod
    def create(
        cls,
        base_url: Optional[str] = None,
        auth_token: Optional[str] = None,
        timeout: Union[float, Tuple[float, float], TimeoutConfig] = 30,
        max_attempts: int = MAX_SEND_ATTEMPTS,
        backoff: Optional[Callable[[int], float]] = None,
        verify_ssl: bool = True,
        headers: Optional[Dict[str, str]] = None,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'ClientConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            base_url: URL compute endpoint
            auth_token: Токен (уходит в X-Auth-Token)
            timeout: Таймаут (число, (connect, read) или TimeoutConfig)
            max_attempts: Максимум попыток на rate-limited запрос
            backoff: Своя функция backoff
            verify_ssl: Проверять SSL
            headers: Заголовки
            logging: Конфигурация логирования

        Returns:
            ClientConfig instance
        """
        if isinstance(timeout, TimeoutConfig):
            timeout_cfg = timeout
        elif isinstance(timeout, tuple):
            timeout_cfg = TimeoutConfig(connect=timeout[0], read=timeout[1])
        else:
            timeout_cfg = TimeoutConfig(connect=5, read=timeout)

        merged = dict(headers or {})
        if auth_token:
            merged[AUTH_TOKEN_HEADER] = auth_token

        return cls(
            base_url=base_url,
            headers=merged,
            timeout=timeout_cfg,
            retry=RetryConfig(max_attempts=max_attempts, backoff=backoff),
            verify_ssl=verify_ssl,
            logging=logging,
        )

    def with_retry(self, retry: RetryConfig) -> 'ClientConfig':
        """
        Создать новый конфиг с другим RetryConfig.

        Example:
            >>> fast = config.with_retry(RetryConfig(backoff=lambda attempt: 0))
        """
        return ClientConfig(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            retry=retry,
            verify_ssl=self.verify_ssl,
            logging=self.logging,
        )

    def with_headers(self, headers: Dict[str, str]) -> 'ClientConfig':
        """Создать новый конфиг с дополнительными заголовками."""
        merged = dict(self.headers)
        merged.update(headers)

        return ClientConfig(
            base_url=self.base_url,
            headers=merged,
            timeout=self.timeout,
            retry=self.retry,
            verify_ssl=self.verify_ssl,
            logging=self.logging,
        )
