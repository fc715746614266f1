"""Provisional response edits shown ahead of backend confirmation."""

from dataclasses import dataclass, field

from golf_scheduler.domain.responses import OptimisticEntry, Response, ResponseUser
from golf_scheduler.services.repository import ResponseRepository


@dataclass
class OptimisticOverlay:
    """Per-user optimistic entries layered over a response repository."""

    repository: ResponseRepository
    _entries: dict[str, OptimisticEntry] = field(default_factory=dict, init=False)

    def peek(self, user_id: str) -> OptimisticEntry | None:
        return self._entries.get(user_id)

    def set(self, user_id: str, entry: OptimisticEntry) -> None:
        """Store an entry, replacing any previous one for the user."""
        self._entries[user_id] = entry

    def clear(self, user_id: str, expected: OptimisticEntry | None = None) -> None:
        """Remove the user's entry.

        With ``expected`` the entry is removed only if it is still that exact
        object, so a late clear cannot erase a newer edit.
        """
        if expected is not None and self._entries.get(user_id) is not expected:
            return
        self._entries.pop(user_id, None)

    def entries(self) -> dict[str, OptimisticEntry]:
        return dict(self._entries)

    def read(self, user_id: str) -> Response | None:
        """Return the effective response: overlay entry over confirmed state."""
        confirmed = self.repository.find(user_id)
        entry = self._entries.get(user_id)
        if entry is None:
            return confirmed
        return merge_entry(entry, confirmed, user_id, self.repository.session_id)


def merge_entry(
    entry: OptimisticEntry,
    confirmed: Response | None,
    user_id: str,
    session_id: str,
) -> Response:
    """Lay an optimistic entry over a confirmed response."""
    return Response(
        id=confirmed.id if confirmed else None,
        session_id=confirmed.session_id if confirmed else session_id,
        user=confirmed.user if confirmed else ResponseUser(id=user_id, nickname=""),
        status=entry.status,
        note=entry.note,
        transport=entry.transport,
    )
