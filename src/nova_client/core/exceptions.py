"""
Таксономия ошибок Nova Client.

Классификация (закрытый набор ErrorKind):
- RATE_LIMITED (retryable=True) - единственная ошибка, которую ретраим
- RESOURCE_EXHAUSTED, QUOTA_EXCEEDED, NOT_FOUND - терминальные, видны вызывающему
- FAULT - всё остальное (catch-all с сырым сообщением провайдера)
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Виды классифицированных ошибок."""
    RATE_LIMITED = "rate_limited"
    RESOURCE_EXHAUSTED = "resource_exhausted"
    QUOTA_EXCEEDED = "quota_exceeded"
    NOT_FOUND = "not_found"
    FAULT = "fault"


# Стабильные сообщения: вызывающий код и тесты матчат их по подстроке
MESSAGES = {
    ErrorKind.RATE_LIMITED: "Too many requests",
    ErrorKind.RESOURCE_EXHAUSTED: "Zero {resource_kind}s available",
    ErrorKind.QUOTA_EXCEEDED: "Maximum number of {resource_kind}s exceeded",
    ErrorKind.NOT_FOUND: "No such {resource_kind} {resource_id}",
    ErrorKind.FAULT: "{message}",
}


def format_message(kind: ErrorKind, **fields: Any) -> str:
    """
    Сформировать стабильное сообщение для вида ошибки.

    Args:
        kind: Вид ошибки
        **fields: Поля шаблона (resource_kind, resource_id, message)

    Returns:
        Отформатированное сообщение

    Examples:
        >>> format_message(ErrorKind.RESOURCE_EXHAUSTED, resource_kind="floating ip")
        'Zero floating ips available'
    """
    return MESSAGES[ErrorKind(kind)].format(**fields)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ClassifiedError(Exception):
    """
    Базовая классифицированная ошибка.

    Каждый подкласс фиксирует ровно один ErrorKind. Атрибуты задаются
    один раз в __init__ и доступны только на чтение.
    """

    kind: ErrorKind = ErrorKind.FAULT
    retryable: bool = False

    def __init__(self, message: str, url: Optional[str] = None):
        self._message = message
        self._url = url
        full_message = message
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)

    @property
    def message(self) -> str:
        """Сообщение без url."""
        return self._message

    @property
    def url(self) -> Optional[str]:
        """URL запроса (если известен)."""
        return self._url

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RETRYABLE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RateLimitedError(ClassifiedError):
    """
    Провайдер перегружен (413/429 с Retry-After).

    Args:
        retry_after: Подсказка провайдера в секундах (если была)
        url: URL
        message: Дополнительное сообщение
    """

    kind = ErrorKind.RATE_LIMITED
    retryable = True

    def __init__(
        self,
        retry_after: Optional[float] = None,
        url: Optional[str] = None,
        message: str = ""
    ):
        self._retry_after = retry_after

        msg = format_message(self.kind)
        if retry_after is not None:
            msg += f" (retry after {retry_after}s)"
        if message:
            msg += f": {message}"

        super().__init__(msg, url)

    @property
    def retry_after(self) -> Optional[float]:
        return self._retry_after

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ТЕРМИНАЛЬНЫЕ ОШИБКИ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ResourceExhaustedError(ClassifiedError):
    """
    Свободных единиц ресурса больше нет (например, floating IP).

    Отличается от квоты: лимит не достигнут, но провайдеру нечего выдать.
    """

    kind = ErrorKind.RESOURCE_EXHAUSTED

    def __init__(self, resource_kind: str = "resource", url: Optional[str] = None):
        self._resource_kind = resource_kind
        super().__init__(format_message(self.kind, resource_kind=resource_kind), url)

    @property
    def resource_kind(self) -> str:
        return self._resource_kind


class QuotaExceededError(ClassifiedError):
    """Достигнута жёсткая квота на ресурс."""

    kind = ErrorKind.QUOTA_EXCEEDED

    def __init__(self, resource_kind: str = "resource", url: Optional[str] = None):
        self._resource_kind = resource_kind
        super().__init__(format_message(self.kind, resource_kind=resource_kind), url)

    @property
    def resource_kind(self) -> str:
        return self._resource_kind


class NotFoundError(ClassifiedError):
    """
    Ресурс не найден.

    Args:
        resource_kind: Тип ресурса ("security group", "floating ip", ...)
        resource_id: Идентификатор или имя ресурса
        url: URL
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource_kind: str = "resource",
        resource_id: Optional[str] = None,
        url: Optional[str] = None
    ):
        self._resource_kind = resource_kind
        self._resource_id = resource_id
        msg = format_message(
            self.kind,
            resource_kind=resource_kind,
            resource_id=resource_id if resource_id is not None else "",
        ).rstrip()
        super().__init__(msg, url)

    @property
    def resource_kind(self) -> str:
        return self._resource_kind

    @property
    def resource_id(self) -> Optional[str]:
        return self._resource_id


class FaultError(ClassifiedError):
    """
    Всё, что не попало в остальные виды.

    Args:
        message: Сырое сообщение провайдера
        status_code: HTTP статус (если был ответ)
        url: URL
    """

    kind = ErrorKind.FAULT

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None
    ):
        self._status_code = status_code
        self._raw_message = message
        msg = format_message(self.kind, message=message)
        if status_code is not None:
            msg = f"HTTP {status_code}: {msg}"
        super().__init__(msg, url)

    @property
    def status_code(self) -> Optional[int]:
        return self._status_code

    @property
    def raw_message(self) -> str:
        """Сообщение провайдера без HTTP префикса."""
        return self._raw_message

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# СПЕЦИАЛЬНЫЕ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class MaxAttemptsExceededError(FaultError):
    """
    Исчерпаны все попытки для rate-limited запроса.

    Отдельная терминальная ошибка, не RateLimitedError.

    Args:
        max_attempts: Настроенный максимум попыток
        url: URL
        last_error: Последняя ошибка
    """

    def __init__(
        self,
        max_attempts: int,
        url: Optional[str] = None,
        last_error: Optional[Exception] = None
    ):
        self._max_attempts = max_attempts
        self._last_error = last_error

        msg = f"Maximum number of attempts ({max_attempts}) reached sending request"
        if url:
            msg += f" to {url}"
        if last_error:
            msg += f". Last error: {last_error}"

        super().__init__(msg)

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def last_error(self) -> Optional[Exception]:
        return self._last_error


class ConfigurationError(FaultError):
    """Ошибка конфигурации."""

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ПРЕДИКАТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _is_kind(err: Optional[BaseException], kind: ErrorKind) -> bool:
    return isinstance(err, ClassifiedError) and err.kind is kind


def is_not_found(err: Optional[BaseException]) -> bool:
    """
    True если ошибка - NotFound.

    Examples:
        >>> try:
        ...     compute.security_group_by_name("web")
        ... except ClassifiedError as e:
        ...     if is_not_found(e):
        ...         compute.create_security_group("web", "web tier")
    """
    return _is_kind(err, ErrorKind.NOT_FOUND)


def is_rate_limited(err: Optional[BaseException]) -> bool:
    """True если ошибка - RateLimited."""
    return _is_kind(err, ErrorKind.RATE_LIMITED)


def is_resource_exhausted(err: Optional[BaseException]) -> bool:
    return _is_kind(err, ErrorKind.RESOURCE_EXHAUSTED)


def is_quota_exceeded(err: Optional[BaseException]) -> bool:
    return _is_kind(err, ErrorKind.QUOTA_EXCEEDED)


def is_fault(err: Optional[BaseException]) -> bool:
    return _is_kind(err, ErrorKind.FAULT)
