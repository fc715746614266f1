"""AppSync-backed session and response API."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time

from golf_scheduler.adapters import graphql_documents as documents
from golf_scheduler.adapters.appsync_models import (
    ResponsePayload,
    SessionPayload,
    SessionTagPayload,
    TagPayload,
    UserPayload,
    UserTagPayload,
)
from golf_scheduler.adapters.graphql_client import GraphQLClient
from golf_scheduler.domain.responses import (
    Response,
    ResponseUser,
    SubmitResponsePayload,
)
from golf_scheduler.domain.sessions import (
    GolfSession,
    RosterUser,
    SessionDraft,
    SessionTag,
    UserDraft,
)
from golf_scheduler.services.responses import ResponseApi

_UNKNOWN_NICKNAME = "Unknown"

_logger = logging.getLogger(__name__)


@dataclass
class AppSyncSessionApi(ResponseApi):
    """Sessions, users and response mutations over the AppSync GraphQL API."""

    client: GraphQLClient

    async def list_users(self) -> list[RosterUser]:
        """Return all users with the tags used to scope session rosters."""
        data = await self.client.request(documents.LIST_USERS)
        users = [UserPayload.model_validate(row) for row in data.get("listUsers") or []]
        tag_ids = await asyncio.gather(*(self._user_tag_ids(u.id) for u in users))
        return [
            _to_roster_user(user, tags)
            for user, tags in zip(users, tag_ids, strict=True)
        ]

    async def create_user(self, draft: UserDraft) -> RosterUser:
        """Create a non-admin user."""
        data = await self.client.request(
            documents.CREATE_USER,
            {
                "input": {
                    "name": draft.name,
                    "nickname": draft.nickname,
                    "phone": draft.phone or None,
                    "isAdmin": False,
                }
            },
        )
        row = data.get("createUser")
        if not row:
            raise RuntimeError("Backend returned no user for createUser")
        return _to_roster_user(UserPayload.model_validate(row), [])

    async def update_user(self, user_id: str, draft: UserDraft) -> RosterUser:
        data = await self.client.request(
            documents.UPDATE_USER,
            {
                "input": {
                    "id": user_id,
                    "name": draft.name,
                    "nickname": draft.nickname,
                    "phone": draft.phone or None,
                }
            },
        )
        row = data.get("updateUser")
        if not row:
            raise RuntimeError(f"User with ID {user_id} not found")
        return _to_roster_user(UserPayload.model_validate(row), [])

    async def delete_user(self, user_id: str) -> None:
        await self.client.request(documents.DELETE_USER, {"id": user_id})

    async def list_tags(self) -> list[SessionTag]:
        tags = await self._tags_by_id()
        return [
            SessionTag(id=tag.id, name=tag.name, color=tag.color)
            for tag in tags.values()
        ]

    async def list_future_sessions(self, today: date) -> list[GolfSession]:
        """Return non-archived sessions dated today or later, soonest first."""
        data = await self.client.request(
            documents.LIST_SESSIONS, {"includeArchived": False}
        )
        start_of_day = datetime.combine(today, time.min, tzinfo=UTC)
        rows = [
            SessionPayload.model_validate(row)
            for row in data.get("listGolfSessions") or []
        ]
        upcoming = [row for row in rows if _aware(row.date) >= start_of_day]
        if not upcoming:
            return []
        sessions = await self._complete(upcoming)
        return sorted(sessions, key=lambda session: session.date)

    async def create_session(self, draft: SessionDraft) -> GolfSession:
        """Create a session and attach its tags.

        Tag links are best effort: a failed link is logged and the session
        is still returned.
        """
        data = await self.client.request(
            documents.CREATE_SESSION,
            {
                "input": {
                    "title": draft.title,
                    "date": _iso(draft.date),
                    "description": draft.description or None,
                    "createdById": draft.created_by_id,
                }
            },
        )
        row = data.get("createGolfSession")
        if not row:
            raise RuntimeError("Backend returned no session for createGolfSession")
        created = SessionPayload.model_validate(row)
        if draft.tag_ids:
            try:
                await asyncio.gather(
                    *(self._add_tag(created.id, tag_id) for tag_id in draft.tag_ids)
                )
            except Exception:
                _logger.exception("Failed to add tags to session %s", created.id)
        [session] = await self._complete([created])
        return session

    async def update_session(self, session_id: str, draft: SessionDraft) -> GolfSession:
        """Update title, date and description; creator and tags are unchanged."""
        data = await self.client.request(
            documents.UPDATE_SESSION,
            {
                "input": {
                    "id": session_id,
                    "title": draft.title,
                    "date": _iso(draft.date),
                    "description": draft.description or None,
                }
            },
        )
        row = data.get("updateGolfSession")
        if not row:
            raise RuntimeError(f"Session with ID {session_id} not found")
        [session] = await self._complete([SessionPayload.model_validate(row)])
        return session

    async def archive_session(
        self, session_id: str, archived_by: str | None = None
    ) -> None:
        """Soft-delete a session; its responses are kept."""
        await self.client.request(
            documents.UPDATE_SESSION,
            {
                "input": {
                    "id": session_id,
                    "isArchived": True,
                    "archivedBy": archived_by or None,
                }
            },
        )

    async def get_responses(
        self, session_id: str, users: dict[str, UserPayload] | None = None
    ) -> list[Response]:
        """Return responses for a session whose users are known."""
        known = users if users is not None else await self._users_by_id()
        data = await self.client.request(
            documents.GET_RESPONSES_FOR_SESSION, {"golfSessionId": session_id}
        )
        responses = []
        for row in data.get("getResponsesForSession") or []:
            payload = ResponsePayload.model_validate(row)
            user = known.get(payload.user_id)
            if user is None:
                continue
            responses.append(_to_response(payload, user.nickname))
        return responses

    async def submit_response(
        self, session_id: str, payload: SubmitResponsePayload
    ) -> Response:
        """Upsert a response; empty notes are sent as null."""
        data = await self.client.request(
            documents.SUBMIT_RESPONSE,
            {
                "input": {
                    "userId": payload.user_id,
                    "golfSessionId": session_id,
                    "status": payload.status.value,
                    "note": payload.note or None,
                    "transport": payload.transport.value if payload.transport else None,
                }
            },
        )
        row = data.get("submitResponse")
        if not row:
            raise RuntimeError("Backend returned no response for submitResponse")
        echo = ResponsePayload.model_validate(row)
        users = await self._users_by_id()
        user = users.get(payload.user_id)
        return _to_response(echo, user.nickname if user else _UNKNOWN_NICKNAME)

    async def delete_response(self, session_id: str, user_id: str) -> Response | None:
        """Delete a user's response and return the removed row, if any."""
        data = await self.client.request(
            documents.DELETE_RESPONSE,
            {"userId": user_id, "golfSessionId": session_id},
        )
        row = data.get("deleteResponse")
        if not row:
            return None
        deleted = ResponsePayload.model_validate(row)
        users = await self._users_by_id()
        user = users.get(user_id)
        return _to_response(deleted, user.nickname if user else _UNKNOWN_NICKNAME)

    async def _complete(self, rows: list[SessionPayload]) -> list[GolfSession]:
        try:
            users = await self._users_by_id()
            tags = await self._tags_by_id()
        except Exception:
            _logger.exception("Error fetching users or tags for sessions")
            return [_fallback(row) for row in rows]
        return list(
            await asyncio.gather(*(self._assemble(row, users, tags) for row in rows))
        )

    async def _assemble(
        self,
        row: SessionPayload,
        users: dict[str, UserPayload],
        tags: dict[str, TagPayload],
    ) -> GolfSession:
        creator = users.get(row.created_by_id)
        created_by = ResponseUser(
            id=row.created_by_id,
            nickname=creator.nickname if creator else _UNKNOWN_NICKNAME,
        )
        try:
            responses = await self.get_responses(row.id, users)
            session_tags = await self._session_tags(row.id, tags)
        except Exception:
            _logger.exception("Error fetching related data for session %s", row.id)
            responses = []
            session_tags = []
        return GolfSession(
            id=row.id,
            title=row.title,
            date=_aware(row.date),
            description=row.description,
            created_by=created_by,
            responses=responses,
            tags=session_tags,
        )

    async def _add_tag(self, session_id: str, tag_id: str) -> None:
        await self.client.request(
            documents.ADD_TAG_TO_SESSION,
            {"input": {"sessionId": session_id, "tagId": tag_id}},
        )

    async def _session_tags(
        self, session_id: str, tags: dict[str, TagPayload]
    ) -> list[SessionTag]:
        data = await self.client.request(
            documents.GET_SESSION_TAGS, {"sessionId": session_id}
        )
        result = []
        for row in data.get("getSessionTags") or []:
            link = SessionTagPayload.model_validate(row)
            tag = tags.get(link.tag_id)
            if tag is not None:
                result.append(SessionTag(id=tag.id, name=tag.name, color=tag.color))
        return result

    async def _user_tag_ids(self, user_id: str) -> list[str]:
        try:
            data = await self.client.request(
                documents.GET_USER_TAGS, {"userId": user_id}
            )
        except Exception:
            _logger.warning("Failed to load tags for user %s", user_id)
            return []
        return [
            UserTagPayload.model_validate(row).tag_id
            for row in data.get("getUserTags") or []
        ]

    async def _users_by_id(self) -> dict[str, UserPayload]:
        data = await self.client.request(documents.LIST_USERS)
        users = [UserPayload.model_validate(row) for row in data.get("listUsers") or []]
        return {user.id: user for user in users}

    async def _tags_by_id(self) -> dict[str, TagPayload]:
        data = await self.client.request(documents.LIST_TAGS)
        tags = [TagPayload.model_validate(row) for row in data.get("listTags") or []]
        return {tag.id: tag for tag in tags}


def _to_response(payload: ResponsePayload, nickname: str) -> Response:
    return Response(
        id=payload.id,
        session_id=payload.golf_session_id,
        user=ResponseUser(id=payload.user_id, nickname=nickname),
        status=payload.status,
        note=payload.note,
        transport=payload.transport,
    )


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _iso(value: datetime) -> str:
    utc = _aware(value).astimezone(UTC)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _to_roster_user(payload: UserPayload, tag_ids: list[str]) -> RosterUser:
    return RosterUser(
        id=payload.id,
        name=payload.name,
        nickname=payload.nickname,
        tag_ids=tag_ids,
        phone=payload.phone,
        is_admin=payload.is_admin,
    )


def _fallback(row: SessionPayload) -> GolfSession:
    return GolfSession(
        id=row.id,
        title=row.title,
        date=_aware(row.date),
        description=row.description,
        created_by=ResponseUser(id=row.created_by_id, nickname=_UNKNOWN_NICKNAME),
    )
