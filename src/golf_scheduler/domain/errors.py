"""Errors raised by backend adapters."""


class BackendRequestError(RuntimeError):
    """Raised when a backend request fails.

    ``http_status`` is ``0`` when no response was received and ``None`` when
    the failure carries no HTTP status (for example a GraphQL error array).
    """

    def __init__(self, message: str, http_status: int | None = None) -> None:
        super().__init__(message)
        self.http_status = http_status
