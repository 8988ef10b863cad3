# src/nova_client/core/error_handler.py

import json
import logging
import math
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional, Tuple

import requests
from requests.exceptions import (
    ConnectionError as RequestsConnectionError,
)
from requests.exceptions import (
    RequestException,
    Timeout,
)

from .context import RequestContext
from .exceptions import (
    ClassifiedError,
    FaultError,
    NotFoundError,
    QuotaExceededError,
    RateLimitedError,
    ResourceExhaustedError,
)

logger = logging.getLogger(__name__)

# Нормальные значения: "60" или "Wed, 21 Oct 2015 07:28:00 GMT"
MAX_RETRY_AFTER_LENGTH = 100
MAX_RETRY_AFTER_SECONDS = 86400 * 365

# Только сообщение целиком: id или имя ресурса в тексте 404 не считается
_EXHAUSTED_RE = re.compile(r"(zero|no more) \S.* available\.?", re.IGNORECASE)
_QUOTA_RE = re.compile(r"quota|maximum number", re.IGNORECASE)


def parse_retry_after(value: Any) -> Optional[float]:
    """
    Распарсить Retry-After с валидацией против malicious input.

    Args:
        value: Значение заголовка или поля retryAfter (секунды или HTTP-date)

    Returns:
        Секунды или None
    """
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        return None

    value = value.strip()
    if len(value) > MAX_RETRY_AFTER_LENGTH:
        logger.warning(
            f"Retry-After value too long ({len(value)} chars), ignoring. "
            f"Value: {value[:50]}..."
        )
        return None

    try:
        seconds = float(value)
    except ValueError:
        try:
            retry_date = parsedate_to_datetime(value)
            delta = (retry_date - datetime.now(timezone.utc)).total_seconds()
            return max(0.0, delta)
        except (ValueError, TypeError, OverflowError) as e:
            logger.debug(f"Failed to parse Retry-After '{value}': {e}")
            return None

    if not math.isfinite(seconds) or seconds < 0 or seconds > MAX_RETRY_AFTER_SECONDS:
        logger.warning(f"Retry-After seconds value out of reasonable range: {seconds}")
        return None
    return seconds


def parse_fault_body(text: str) -> Tuple[Optional[str], str, Optional[Any]]:
    """
    Разобрать тело ошибки провайдера.

    Формат: {"<faultCode>": {"message": "...", "code": 413, "retryAfter": "2"}}

    Returns:
        (fault_code, message, retry_after_raw); для нераспознанного тела
        fault_code=None, а message - сырой текст (обрезанный)
    """
    raw = (text or "").strip()
    try:
        body = json.loads(raw) if raw else None
    except ValueError:
        body = None

    if isinstance(body, dict) and len(body) == 1:
        fault_code, detail = next(iter(body.items()))
        if isinstance(detail, dict) and "message" in detail:
            return fault_code, str(detail["message"]), detail.get("retryAfter")

    return None, raw[:200], None


class ErrorHandler:
    """Классифицирует ответы и исключения транспорта в ClassifiedError"""

    @staticmethod
    def classify_response(
        response: Any,
        context: Optional[RequestContext] = None
    ) -> ClassifiedError:
        """
        Классифицировать неуспешный HTTP ответ.

        Работает с любым объектом, у которого есть status_code, headers и text
        (requests.Response и httpx.Response).

        Args:
            response: Ответ с кодом ошибки
            context: Контекст запроса (вид и id ресурса для сообщения)

        Returns:
            Ровно один вариант ClassifiedError
        """
        status_code = response.status_code
        url = context.url if context else str(getattr(response, "url", "") or "") or None
        resource_kind = context.resource_kind if context else "resource"
        resource_id = context.resource_id if context else None

        fault_code, message, body_retry_after = parse_fault_body(response.text)

        header_value = response.headers.get("Retry-After")
        retry_after = parse_retry_after(header_value)
        if retry_after is None:
            retry_after = parse_retry_after(body_retry_after)
        has_hint = header_value is not None or body_retry_after is not None

        if status_code == 429 or (status_code == 413 and has_hint):
            return RateLimitedError(retry_after=retry_after, url=url, message=message)

        if status_code == 413 or (status_code == 403 and _QUOTA_RE.search(message)):
            return QuotaExceededError(resource_kind, url=url)

        if status_code == 404:
            if _EXHAUSTED_RE.fullmatch(message.strip()):
                return ResourceExhaustedError(resource_kind, url=url)
            return NotFoundError(resource_kind, resource_id, url=url)

        return FaultError(message or f"{fault_code or 'unexpected'} error", status_code=status_code, url=url)

    @staticmethod
    def classify_requests_exception(error: Exception, url: Optional[str] = None) -> ClassifiedError:
        """
        Конвертировать requests.exceptions в ClassifiedError.

        Таймауты и сетевые ошибки не ретраятся: ретраим только rate limiting.

        Examples:
            >>> err = ErrorHandler.classify_requests_exception(requests.exceptions.Timeout(), url)
            >>> assert isinstance(err, FaultError)
        """
        if isinstance(error, ClassifiedError):
            return error

        if isinstance(error, requests.exceptions.HTTPError) and error.response is not None:
            return ErrorHandler.classify_response(error.response)

        if isinstance(error, Timeout):
            return FaultError(f"Request timeout: {error}", url=url)

        if isinstance(error, RequestsConnectionError):
            return FaultError(f"Connection error: {error}", url=url)

        if isinstance(error, RequestException):
            return FaultError(f"Request failed: {error}", url=url)

        return FaultError(f"Unexpected error: {error}", url=url)
