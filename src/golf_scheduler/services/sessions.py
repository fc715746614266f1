"""Session feed holding one response repository per session."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol

from golf_scheduler.domain.sessions import (
    GolfSession,
    SessionDraft,
    SessionResult,
    SessionTag,
)
from golf_scheduler.services.repository import ResponseRepository
from golf_scheduler.services.responses import error_message
from golf_scheduler.services.retry import ResilientRequestExecutor
from golf_scheduler.services.roster import (
    ResponseCounts,
    find_upcoming_session_index,
    response_counts,
    sort_sessions_by_date,
)

_logger = logging.getLogger(__name__)


class SessionApi(Protocol):
    """Backend operations for sessions and their tags."""

    async def list_future_sessions(self, today: date) -> list[GolfSession]:
        """Return sessions dated today or later with their responses."""

    async def create_session(self, draft: SessionDraft) -> GolfSession:
        """Create a session, attach its tags and return it assembled."""

    async def update_session(self, session_id: str, draft: SessionDraft) -> GolfSession:
        """Update a session's details and return it assembled."""

    async def archive_session(
        self, session_id: str, archived_by: str | None = None
    ) -> None:
        """Archive a session so it leaves the feed."""

    async def list_tags(self) -> list[SessionTag]:
        """Return every tag a session can be scoped to."""


@dataclass
class SessionService:
    """Fetches upcoming sessions and seeds their response repositories."""

    api: SessionApi
    executor: ResilientRequestExecutor
    sessions: list[GolfSession] = field(default_factory=list)
    tags: list[SessionTag] = field(default_factory=list)
    error: str | None = None
    _repositories: dict[str, ResponseRepository] = field(
        default_factory=dict, init=False
    )

    async def refresh(self, today: date | None = None) -> list[GolfSession]:
        """Reload sessions; on failure keep the previous list and set ``error``.

        Repositories of sessions that left the feed are dropped.
        """
        self.error = None
        resolved_today = today or datetime.now(tz=UTC).date()
        try:
            fetched = await self.executor.execute(
                lambda: self.api.list_future_sessions(resolved_today),
                action="listGolfSessions",
            )
        except Exception as exc:
            _logger.exception("Error fetching sessions")
            self.error = error_message(exc, "Failed to fetch sessions")
            return self.sessions
        self.sessions = sort_sessions_by_date(fetched)
        live_ids = {session.id for session in self.sessions}
        for session_id in list(self._repositories):
            if session_id not in live_ids:
                del self._repositories[session_id]
        for session in self.sessions:
            self.repository_for(session.id).load(session.responses)
        return self.sessions

    async def refresh_tags(self) -> list[SessionTag]:
        self.error = None
        try:
            self.tags = await self.executor.execute(
                self.api.list_tags, action="listTags"
            )
        except Exception as exc:
            _logger.exception("Error fetching tags")
            self.error = error_message(exc, "Failed to fetch tags")
        return self.tags

    async def create_session(self, draft: SessionDraft) -> SessionResult:
        """Create a session and add it to the feed."""
        try:
            created = await self.executor.execute(
                lambda: self.api.create_session(draft), action="createGolfSession"
            )
        except Exception as exc:
            _logger.exception("Error creating session %r", draft.title)
            return self._failed(exc, "Failed to create session")
        self._store(created)
        return SessionResult.ok(created)

    async def update_session(
        self, session_id: str, draft: SessionDraft
    ) -> SessionResult:
        try:
            updated = await self.executor.execute(
                lambda: self.api.update_session(session_id, draft),
                action="updateGolfSession",
            )
        except Exception as exc:
            _logger.exception("Error updating session %s", session_id)
            return self._failed(exc, "Failed to update session")
        self._store(updated)
        return SessionResult.ok(updated)

    async def archive_session(
        self, session_id: str, archived_by: str | None = None
    ) -> SessionResult:
        """Archive a session and drop it from the feed."""
        try:
            await self.executor.execute(
                lambda: self.api.archive_session(session_id, archived_by),
                action="archiveGolfSession",
            )
        except Exception as exc:
            _logger.exception("Error archiving session %s", session_id)
            return self._failed(exc, "Failed to delete session")
        self.sessions = [s for s in self.sessions if s.id != session_id]
        self._repositories.pop(session_id, None)
        return SessionResult.ok()

    def get_session(self, session_id: str) -> GolfSession | None:
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None

    def repository_for(self, session_id: str) -> ResponseRepository:
        """Return the response repository for a session, creating it if needed."""
        repository = self._repositories.get(session_id)
        if repository is None:
            repository = ResponseRepository(session_id=session_id)
            self._repositories[session_id] = repository
        return repository

    def upcoming_index(self, now: datetime | None = None) -> int:
        return find_upcoming_session_index(
            self.sessions, now or datetime.now(tz=UTC)
        )

    def session_stats(self, session_id: str) -> ResponseCounts | None:
        """Count confirmed responses for a session."""
        if self.get_session(session_id) is None:
            return None
        return response_counts(self.repository_for(session_id).current_responses())

    def clear_error(self) -> None:
        self.error = None

    def _store(self, session: GolfSession) -> None:
        others = [s for s in self.sessions if s.id != session.id]
        self.sessions = sort_sessions_by_date([*others, session])
        self.repository_for(session.id).load(session.responses)

    def _failed(self, exc: Exception, fallback: str) -> SessionResult:
        message = error_message(exc, fallback)
        self.error = message
        return SessionResult.failed(message)
