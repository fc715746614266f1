"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field, replace
from datetime import date

import pytest

from golf_scheduler.config import Settings
from golf_scheduler.domain.responses import (
    Response,
    ResponseStatus,
    ResponseUser,
    SubmitResponsePayload,
    TransportType,
)
from golf_scheduler.domain.sessions import (
    GolfSession,
    RosterUser,
    SessionDraft,
    SessionTag,
    UserDraft,
)
from golf_scheduler.services.dispatcher import MutationDispatcher
from golf_scheduler.services.overlay import OptimisticOverlay
from golf_scheduler.services.repository import ResponseRepository
from golf_scheduler.services.responses import ResponseApi, ResponseGateway
from golf_scheduler.services.retry import ResilientRequestExecutor
from golf_scheduler.services.sessions import SessionApi
from golf_scheduler.services.submissions import SubmissionTracker
from golf_scheduler.services.users import UserApi

SESSION_ID = "session-1"


def make_response(
    user_id: str,
    status: ResponseStatus = ResponseStatus.IN,
    note: str | None = None,
    transport: TransportType | None = None,
    nickname: str | None = None,
) -> Response:
    return Response(
        id=f"resp-{user_id}",
        session_id=SESSION_ID,
        user=ResponseUser(id=user_id, nickname=nickname or user_id.title()),
        status=status,
        note=note,
        transport=transport,
    )


@dataclass
class RecordingSleep:
    """Sleep replacement that records requested delays."""

    delays: list[float] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@dataclass
class FakeResponseApi(ResponseApi):
    """In-memory response API that records calls."""

    submitted: list[SubmitResponsePayload] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    submit_errors: list[Exception] = field(default_factory=list)
    delete_errors: list[Exception] = field(default_factory=list)
    gate: asyncio.Event | None = None

    async def submit_response(
        self, session_id: str, payload: SubmitResponsePayload
    ) -> Response:
        self.submitted.append(payload)
        if self.gate is not None:
            await self.gate.wait()
        if self.submit_errors:
            raise self.submit_errors.pop(0)
        return make_response(
            payload.user_id,
            status=payload.status,
            note=payload.note or None,
            transport=payload.transport,
        )

    async def delete_response(self, session_id: str, user_id: str) -> Response | None:
        self.deleted.append(user_id)
        if self.gate is not None:
            await self.gate.wait()
        if self.delete_errors:
            raise self.delete_errors.pop(0)
        return None


@dataclass
class FakeSessionApi(SessionApi):
    """In-memory session backend; queued errors fail the next call."""

    sessions: list[GolfSession] = field(default_factory=list)
    tags: list[SessionTag] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)
    calls: list[date] = field(default_factory=list)
    archived: list[tuple[str, str | None]] = field(default_factory=list)

    async def list_future_sessions(self, today: date) -> list[GolfSession]:
        self.calls.append(today)
        self._raise_queued()
        return list(self.sessions)

    async def create_session(self, draft: SessionDraft) -> GolfSession:
        self._raise_queued()
        created = GolfSession(
            id=f"session-{len(self.sessions) + 1}",
            title=draft.title,
            date=draft.date,
            description=draft.description,
            created_by=ResponseUser(id=draft.created_by_id, nickname="Ana"),
            tags=[tag for tag in self.tags if tag.id in draft.tag_ids],
        )
        self.sessions.append(created)
        return created

    async def update_session(self, session_id: str, draft: SessionDraft) -> GolfSession:
        self._raise_queued()
        current = next(s for s in self.sessions if s.id == session_id)
        updated = replace(
            current, title=draft.title, date=draft.date, description=draft.description
        )
        self.sessions = [updated if s.id == session_id else s for s in self.sessions]
        return updated

    async def archive_session(
        self, session_id: str, archived_by: str | None = None
    ) -> None:
        self._raise_queued()
        self.archived.append((session_id, archived_by))
        self.sessions = [s for s in self.sessions if s.id != session_id]

    async def list_tags(self) -> list[SessionTag]:
        self._raise_queued()
        return list(self.tags)

    def _raise_queued(self) -> None:
        if self.errors:
            raise self.errors.pop(0)


@dataclass
class FakeUserApi(UserApi):
    """In-memory user backend; queued errors fail the next call."""

    users: list[RosterUser] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)

    async def list_users(self) -> list[RosterUser]:
        self._raise_queued()
        return list(self.users)

    async def create_user(self, draft: UserDraft) -> RosterUser:
        self._raise_queued()
        created = RosterUser(
            id=f"user-{len(self.users) + 1}",
            name=draft.name,
            nickname=draft.nickname,
            phone=draft.phone,
        )
        self.users.append(created)
        return created

    async def update_user(self, user_id: str, draft: UserDraft) -> RosterUser:
        self._raise_queued()
        return RosterUser(
            id=user_id, name=draft.name, nickname=draft.nickname, phone=draft.phone
        )

    async def delete_user(self, user_id: str) -> None:
        self._raise_queued()
        self.deleted.append(user_id)

    def _raise_queued(self) -> None:
        if self.errors:
            raise self.errors.pop(0)



def build_dispatcher(
    api: FakeResponseApi,
    responses: list[Response] | None = None,
    settle_delay_seconds: float = 0.0,
) -> MutationDispatcher:
    repository = ResponseRepository(session_id=SESSION_ID)
    repository.load(responses or [])
    executor = ResilientRequestExecutor(sleep=RecordingSleep())
    return MutationDispatcher(
        session_id=SESSION_ID,
        gateway=ResponseGateway(api=api, executor=executor),
        overlay=OptimisticOverlay(repository),
        tracker=SubmissionTracker(),
        settle_delay_seconds=settle_delay_seconds,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        appsync_endpoint="https://example.appsync-api.us-east-1.amazonaws.com/graphql",
        appsync_api_key="api-key",
    )


@pytest.fixture
def response_api() -> FakeResponseApi:
    return FakeResponseApi()
