"""Classification of failures that are worth retrying."""

from collections.abc import Iterable
from dataclasses import dataclass, field

import httpx

from golf_scheduler.domain.errors import BackendRequestError

DEFAULT_TRANSIENT_SIGNATURES: tuple[str, ...] = (
    "network request failed",
    "network error",
    "failed to fetch",
    "timeout",
    "timed out",
    "econnreset",
    "econnrefused",
    "connection reset",
    "connection refused",
    "socket hang up",
    "service unavailable",
)

NO_RESPONSE_STATUS = 0
_RETRYABLE_STATUSES = frozenset({NO_RESPONSE_STATUS, 502, 503, 504})


@dataclass(frozen=True)
class TransientErrorClassifier:
    """Decide whether a failed request may succeed if attempted again."""

    signatures: tuple[str, ...] = field(default=DEFAULT_TRANSIENT_SIGNATURES)

    @classmethod
    def from_signatures(cls, signatures: Iterable[str]) -> "TransientErrorClassifier":
        """Build a classifier from an allow-list of message fragments."""
        cleaned = tuple(s.strip().lower() for s in signatures if s.strip())
        return cls(signatures=cleaned or DEFAULT_TRANSIENT_SIGNATURES)

    def is_retryable(
        self, error: BaseException | str, http_status: int | None = None
    ) -> bool:
        """Return True for network-layer failures and gateway-class statuses."""
        status = http_status if http_status is not None else status_code_of(error)
        if status is not None and status in _RETRYABLE_STATUSES:
            return True
        message = str(error).lower()
        return any(signature.lower() in message for signature in self.signatures)


def status_code_of(error: BaseException | str) -> int | None:
    """Extract an HTTP status from an exception, if available."""
    if isinstance(error, BackendRequestError):
        return error.http_status
    if isinstance(error, httpx.TransportError):
        return NO_RESPONSE_STATUS
    response = getattr(error, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None
