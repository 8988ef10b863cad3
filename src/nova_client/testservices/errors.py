"""
Wire-level ошибки симулятора compute сервиса.

ServerError - то, что провайдер отдал бы по HTTP: статус, fault body
{"<faultCode>": {"message", "code", "retryAfter"}} и Retry-After заголовок.
"""

from typing import Any, Dict, Optional, Union

from ..core.exceptions import (
    ClassifiedError,
    FaultError,
    NotFoundError,
    QuotaExceededError,
    RateLimitedError,
    ResourceExhaustedError,
)


class ServerError(Exception):
    """
    Ошибка провайдера в wire-формате.

    Args:
        status: HTTP статус
        code: Fault code ("overLimit", "itemNotFound", ...)
        message: Сообщение провайдера
        retry_after: Значение Retry-After (None = без подсказки)

    Examples:
        >>> err = ServerError(413, "overLimit", "This request was rate-limited.", retry_after=0)
        >>> err.body()
        {'overLimit': {'message': 'This request was rate-limited.', 'code': 413, 'retryAfter': '0'}}
    """

    def __init__(
        self,
        status: int,
        code: str,
        message: str,
        retry_after: Optional[Union[int, float, str]] = None
    ):
        self.status = status
        self.code = code
        self.message = message
        self.retry_after = retry_after
        super().__init__(f"{status} {code}: {message}")

    def body(self) -> Dict[str, Any]:
        """Fault body провайдера."""
        detail: Dict[str, Any] = {"message": self.message, "code": self.status}
        if self.retry_after is not None:
            detail["retryAfter"] = str(self.retry_after)
        return {self.code: detail}

    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.retry_after is not None:
            headers["Retry-After"] = str(self.retry_after)
        return headers

    @classmethod
    def from_classified(cls, error: ClassifiedError) -> "ServerError":
        """
        Wire-эквивалент клиентской ClassifiedError.

        Обратная классификация на клиенте даёт ошибку того же вида.
        """
        if isinstance(error, RateLimitedError):
            retry_after = error.retry_after if error.retry_after is not None else 0
            return rate_limit_exceeded(retry_after=retry_after)
        if isinstance(error, ResourceExhaustedError):
            return cls(404, "itemNotFound", f"{error.message}.")
        if isinstance(error, QuotaExceededError):
            return cls(413, "overLimit", error.message)
        if isinstance(error, NotFoundError):
            return cls(404, "itemNotFound", error.message)
        if isinstance(error, FaultError):
            status = error.status_code or 500
            return cls(status, "computeFault", error.raw_message)
        return cls(500, "computeFault", str(error))

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ГОТОВЫЕ ОШИБКИ ПРОВАЙДЕРА
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def rate_limit_exceeded(retry_after: Union[int, float, str] = 0) -> ServerError:
    """413 с Retry-After: провайдер просит повторить позже."""
    return ServerError(413, "overLimit", "This request was rate-limited.", retry_after=retry_after)


def not_found(resource_kind: str, resource_id: Any) -> ServerError:
    return ServerError(404, "itemNotFound", f"{resource_kind} {resource_id} not found.")


def bad_request(message: str) -> ServerError:
    return ServerError(400, "badRequest", message)


def no_more_floating_ips() -> ServerError:
    """404: сеть floating IP исчерпана."""
    return ServerError(404, "itemNotFound", "Zero floating ips available.")


def ip_limit_exceeded() -> ServerError:
    """413 без Retry-After: квота floating IP исчерпана, повтор не поможет."""
    return ServerError(413, "overLimit", "Maximum number of floating ips exceeded")
