"""Response mutations routed through the resilient executor."""

import logging
from dataclasses import dataclass
from typing import Protocol

from golf_scheduler.domain.responses import (
    MutationResult,
    Response,
    SubmitResponsePayload,
)
from golf_scheduler.services.retry import ResilientRequestExecutor

_logger = logging.getLogger(__name__)


class ResponseApi(Protocol):
    """Backend operations for session responses."""

    async def submit_response(
        self, session_id: str, payload: SubmitResponsePayload
    ) -> Response:
        """Upsert the user's response and return the server echo."""

    async def delete_response(self, session_id: str, user_id: str) -> Response | None:
        """Delete the user's response and return the removed row, if any."""


@dataclass
class ResponseGateway:
    """Turns response API calls into tagged results."""

    api: ResponseApi
    executor: ResilientRequestExecutor

    async def submit_response(
        self, session_id: str, payload: SubmitResponsePayload
    ) -> MutationResult:
        """Submit the full response payload for a user."""
        try:
            response = await self.executor.execute(
                lambda: self.api.submit_response(session_id, payload),
                action="submitResponse",
            )
        except Exception as exc:
            _logger.warning(
                "Submit response failed: session=%s user=%s",
                session_id,
                payload.user_id,
            )
            return MutationResult.failed(
                error_message(exc, "Failed to submit response")
            )
        return MutationResult.ok(response)

    async def delete_response(self, session_id: str, user_id: str) -> MutationResult:
        """Remove a user's response from the session."""
        try:
            deleted = await self.executor.execute(
                lambda: self.api.delete_response(session_id, user_id),
                action="deleteResponse",
            )
        except Exception as exc:
            _logger.warning(
                "Delete response failed: session=%s user=%s", session_id, user_id
            )
            return MutationResult.failed(
                error_message(exc, "Failed to delete response")
            )
        return MutationResult.ok(deleted)


def error_message(exc: BaseException, fallback: str) -> str:
    """Return a human-readable message for an exception."""
    message = str(exc).strip()
    return message or fallback
