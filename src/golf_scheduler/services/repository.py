"""Confirmed server state for a session's responses."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from golf_scheduler.domain.responses import Response


@dataclass
class ResponseRepository:
    """Responses for one session as last received from the backend."""

    session_id: str
    _responses: list[Response] = field(default_factory=list, init=False)

    def load(self, responses: Iterable[Response]) -> None:
        """Replace the whole collection with a freshly fetched one."""
        self._responses = list(responses)

    def current_responses(self) -> list[Response]:
        """Return a snapshot of the confirmed responses."""
        return list(self._responses)

    def find(self, user_id: str) -> Response | None:
        """Return the confirmed response for a user, if present."""
        for response in self._responses:
            if response.user.id == user_id:
                return response
        return None

    def replace_for(self, user_id: str, response: Response) -> None:
        """Store the server echo for a user, dropping any previous record."""
        self._responses = [r for r in self._responses if r.user.id != user_id]
        self._responses.append(response)

    def remove_for(self, user_id: str) -> None:
        """Forget the user's confirmed response."""
        self._responses = [r for r in self._responses if r.user.id != user_id]
