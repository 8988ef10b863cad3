"""Per-request context and per-call retry state."""

from dataclasses import dataclass, field
from typing import Optional
import time
import uuid


@dataclass(frozen=True)
class RequestContext:
    """Describes one logical request for classification and logging.

    Attributes:
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        resource_kind: Human name of the resource ("security group", "floating ip")
        resource_id: Id or name of the resource the request targets
        request_id: Correlation id sent as X-Correlation-ID

    Example:
        >>> ctx = RequestContext('DELETE', url, resource_kind='security group', resource_id='7')
    """

    method: str
    url: str
    resource_kind: str = "resource"
    resource_id: Optional[str] = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass
class RetryState:
    """State of one retrying call.

    Created at call entry and discarded at call exit; never shared
    between calls, so concurrent calls cannot interfere.
    """

    attempt: int = 1
    started_at: float = field(default_factory=time.monotonic)
    last_error: Optional[Exception] = None

    @property
    def elapsed(self) -> float:
        """Seconds since the call started."""
        return time.monotonic() - self.started_at
