"""User roster management."""

import logging
from dataclasses import dataclass, field, replace
from typing import Protocol

from golf_scheduler.domain.sessions import (
    GolfSession,
    RosterUser,
    UserDraft,
    UserResult,
)
from golf_scheduler.services.responses import error_message
from golf_scheduler.services.retry import ResilientRequestExecutor
from golf_scheduler.services.roster import filter_users_by_session_tags

_logger = logging.getLogger(__name__)


class UserApi(Protocol):
    """Backend operations for users."""

    async def list_users(self) -> list[RosterUser]:
        """Return all users with their tag ids."""

    async def create_user(self, draft: UserDraft) -> RosterUser:
        """Create and return a user."""

    async def update_user(self, user_id: str, draft: UserDraft) -> RosterUser:
        """Update and return a user."""

    async def delete_user(self, user_id: str) -> None:
        """Delete a user."""


@dataclass
class UserService:
    """Keeps the user list in step with the backend."""

    api: UserApi
    executor: ResilientRequestExecutor
    users: list[RosterUser] = field(default_factory=list)
    error: str | None = None

    async def refresh(self) -> list[RosterUser]:
        """Reload users; on failure keep the previous list and set ``error``."""
        self.error = None
        try:
            self.users = await self.executor.execute(
                self.api.list_users, action="listUsers"
            )
        except Exception as exc:
            _logger.exception("Error fetching users")
            self.error = error_message(exc, "Failed to fetch users")
        return self.users

    async def create_user(self, draft: UserDraft) -> UserResult:
        try:
            created = await self.executor.execute(
                lambda: self.api.create_user(draft), action="createUser"
            )
        except Exception as exc:
            _logger.exception("Error creating user %r", draft.nickname)
            return self._failed(exc, "Failed to create user")
        self.users = [*self.users, created]
        return UserResult.ok(created)

    async def update_user(self, user_id: str, draft: UserDraft) -> UserResult:
        """Update a user; known tag ids are kept since the mutation omits them."""
        try:
            updated = await self.executor.execute(
                lambda: self.api.update_user(user_id, draft), action="updateUser"
            )
        except Exception as exc:
            _logger.exception("Error updating user %s", user_id)
            return self._failed(exc, "Failed to update user")
        existing = self.get_user(user_id)
        if existing is not None and not updated.tag_ids:
            updated = replace(updated, tag_ids=existing.tag_ids)
        self.users = [updated if u.id == user_id else u for u in self.users]
        return UserResult.ok(updated)

    async def delete_user(self, user_id: str) -> UserResult:
        try:
            await self.executor.execute(
                lambda: self.api.delete_user(user_id), action="deleteUser"
            )
        except Exception as exc:
            _logger.exception("Error deleting user %s", user_id)
            return self._failed(exc, "Failed to delete user")
        self.users = [u for u in self.users if u.id != user_id]
        return UserResult.ok()

    def get_user(self, user_id: str) -> RosterUser | None:
        for user in self.users:
            if user.id == user_id:
                return user
        return None

    def roster_for(self, session: GolfSession) -> list[RosterUser]:
        """Return the users who may answer ``session``."""
        return filter_users_by_session_tags(self.users, session)

    def clear_error(self) -> None:
        self.error = None

    def _failed(self, exc: Exception, fallback: str) -> UserResult:
        message = error_message(exc, fallback)
        self.error = message
        return UserResult.failed(message)
