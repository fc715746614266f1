"""Domain models for session responses."""

from dataclasses import dataclass
from enum import StrEnum


class ResponseStatus(StrEnum):
    """Attendance answer for a session."""

    IN = "IN"
    OUT = "OUT"
    UNDECIDED = "UNDECIDED"


class TransportType(StrEnum):
    """How a player gets around the course."""

    WALKING = "WALKING"
    RIDING = "RIDING"


@dataclass(frozen=True)
class ResponseUser:
    """Identity attached to a response."""

    id: str
    nickname: str


@dataclass(frozen=True)
class Response:
    """One user's standing answer for one session."""

    id: str | None
    session_id: str
    user: ResponseUser
    status: ResponseStatus
    note: str | None = None
    transport: TransportType | None = None


@dataclass(frozen=True)
class OptimisticEntry:
    """Provisional response fields shown before the backend confirms them."""

    status: ResponseStatus
    note: str
    transport: TransportType


@dataclass(frozen=True)
class SubmitResponsePayload:
    """Full field set sent with a submit mutation."""

    user_id: str
    status: ResponseStatus
    note: str
    transport: TransportType

    def as_entry(self) -> OptimisticEntry:
        """Return the overlay entry that mirrors this payload."""
        return OptimisticEntry(
            status=self.status, note=self.note, transport=self.transport
        )


@dataclass(frozen=True)
class MutationResult:
    """Tagged outcome of a response mutation."""

    success: bool
    response: Response | None = None
    error: str | None = None

    @classmethod
    def ok(cls, response: Response | None = None) -> "MutationResult":
        return cls(success=True, response=response)

    @classmethod
    def failed(cls, error: str) -> "MutationResult":
        return cls(success=False, error=error)
