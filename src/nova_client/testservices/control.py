"""
Control points: именованные хуки для инъекции ошибок в симулятор.

Хук вызывается синхронно перед операцией с тем же именем. Если он вернул
ошибку, операция не выполняется и ошибка уходит клиенту.
"""

import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, Union

from ..core.exceptions import ClassifiedError
from .errors import ServerError

InjectedError = Union[ServerError, ClassifiedError]
ErrorFactory = Union[InjectedError, Callable[[], InjectedError]]
ControlProcessor = Callable[..., Optional[InjectedError]]


def _as_server_error(error: InjectedError) -> ServerError:
    if isinstance(error, ServerError):
        return error
    if isinstance(error, ClassifiedError):
        return ServerError.from_classified(error)
    raise TypeError(f"Control point returned unsupported error type: {type(error).__name__}")


class ServiceControl:
    """
    Реестр control points одного экземпляра симулятора.

    Реестр принадлежит экземпляру: несколько симуляторов в одном процессе
    не влияют друг на друга.

    Examples:
        >>> service.register_control_point("add_floating_ip", fail_always(no_more_floating_ips))
        >>> service.register_control_point("add_floating_ip", None)  # снять хук
    """

    def __init__(self):
        self._control_points: Dict[str, ControlProcessor] = {}
        self._control_lock = threading.Lock()

    def register_control_point(self, name: str, processor: Optional[ControlProcessor]) -> None:
        """
        Установить хук для операции (заменяет прежний).

        processor=None снимает хук; повторное снятие ничего не делает.
        """
        with self._control_lock:
            if processor is None:
                self._control_points.pop(name, None)
            else:
                self._control_points[name] = processor

    def control_point(self, name: str) -> Optional[ControlProcessor]:
        """Текущий хук для операции (или None)."""
        with self._control_lock:
            return self._control_points.get(name)

    def process_control_point(self, name: str, *args: Any) -> None:
        """
        Вызвать хук операции, если он установлен.

        Raises:
            ServerError: Хук вернул ошибку
        """
        processor = self.control_point(name)
        if processor is None:
            return

        error = processor(self, *args)
        if error is not None:
            raise _as_server_error(error)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ГОТОВЫЕ ПРОЦЕССОРЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class FailingProcessor:
    """
    Процессор "упасть первые N вызовов".

    Состояние (счётчики) живёт в самом процессоре, а не в сервисе.

    Attributes:
        calls: Сколько раз процессор вызывался
        failures: Сколько раз он вернул ошибку
    """

    def __init__(self, error: ErrorFactory, times: Optional[int] = None):
        if times is not None and times < 0:
            raise ValueError("times must be non-negative")
        self._error = error
        self.times = times
        self.calls = 0
        self.failures = 0

    def _make_error(self) -> InjectedError:
        if isinstance(self._error, (ServerError, ClassifiedError)):
            return self._error
        return self._error()

    def __call__(self, service: ServiceControl, *args: Any) -> Optional[InjectedError]:
        self.calls += 1
        if self.times is not None and self.failures >= self.times:
            return None
        self.failures += 1
        return self._make_error()


def fail_times(n: int, error: ErrorFactory) -> FailingProcessor:
    """
    Первые n вызовов падают с error, дальше операция проходит.

    Example:
        >>> hook = fail_times(2, rate_limit_exceeded)
        >>> service.register_control_point("remove_security_group", hook)
        >>> compute.delete_security_group(group.id)
        >>> hook.calls
        3
    """
    return FailingProcessor(error, times=n)


def fail_always(error: ErrorFactory) -> FailingProcessor:
    """Каждый вызов падает с error."""
    return FailingProcessor(error)


@contextmanager
def control_point(
    service: ServiceControl,
    name: str,
    processor: Optional[ControlProcessor]
) -> Iterator[Optional[ControlProcessor]]:
    """
    Хук на время блока; после блока хук снимается.

    Example:
        >>> with control_point(service, "add_floating_ip", fail_always(ip_limit_exceeded)):
        ...     with pytest.raises(QuotaExceededError):
        ...         compute.allocate_floating_ip()
    """
    service.register_control_point(name, processor)
    try:
        yield processor
    finally:
        service.register_control_point(name, None)
