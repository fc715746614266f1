"""Domain models for golf sessions."""

from dataclasses import dataclass, field
from datetime import datetime

from golf_scheduler.domain.responses import Response, ResponseUser


@dataclass(frozen=True)
class SessionTag:
    """Tag attached to a session, used to scope its roster."""

    id: str
    name: str
    color: str | None = None


@dataclass(frozen=True)
class GolfSession:
    """Represents a scheduled outing with its current responses."""

    id: str
    title: str
    date: datetime
    created_by: ResponseUser
    description: str | None = None
    responses: list[Response] = field(default_factory=list)
    tags: list[SessionTag] = field(default_factory=list)


@dataclass(frozen=True)
class RosterUser:
    """A user that may answer sessions."""

    id: str
    name: str
    nickname: str
    tag_ids: list[str] = field(default_factory=list)
    phone: str | None = None
    is_admin: bool = False


@dataclass(frozen=True)
class SessionDraft:
    """Editable fields of a session."""

    title: str
    date: datetime
    created_by_id: str
    description: str | None = None
    tag_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UserDraft:
    """Editable fields of a user."""

    name: str
    nickname: str
    phone: str | None = None


@dataclass(frozen=True)
class SessionResult:
    """Tagged outcome of a session create, update or archive."""

    success: bool
    session: GolfSession | None = None
    error: str | None = None

    @classmethod
    def ok(cls, session: GolfSession | None = None) -> "SessionResult":
        return cls(success=True, session=session)

    @classmethod
    def failed(cls, error: str) -> "SessionResult":
        return cls(success=False, error=error)


@dataclass(frozen=True)
class UserResult:
    """Tagged outcome of a user create, update or delete."""

    success: bool
    user: RosterUser | None = None
    error: str | None = None

    @classmethod
    def ok(cls, user: RosterUser | None = None) -> "UserResult":
        return cls(success=True, user=user)

    @classmethod
    def failed(cls, error: str) -> "UserResult":
        return cls(success=False, error=error)
