"""Tracking of users with a mutation in flight."""

from dataclasses import dataclass, field


@dataclass
class SubmissionTracker:
    """Marks users whose response is being submitted."""

    _pending: set[str] = field(default_factory=set, init=False)

    def mark(self, user_id: str) -> None:
        self._pending.add(user_id)

    def unmark(self, user_id: str) -> None:
        self._pending.discard(user_id)

    def is_submitting(self, user_id: str) -> bool:
        return user_id in self._pending
