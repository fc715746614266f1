"""Roster statistics and session ordering helpers."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from golf_scheduler.domain.responses import Response, ResponseStatus
from golf_scheduler.domain.sessions import GolfSession, RosterUser

_GROUPINGS = {
    8: "2 foursomes - Perfect!",
    6: "2 threesomes",
    4: "1 foursome",
    0: "No players yet",
}


@dataclass(frozen=True)
class ResponseCounts:
    """Tally of answers for a session."""

    in_count: int
    out_count: int
    undecided_count: int
    total: int


def response_counts(responses: Iterable[Response]) -> ResponseCounts:
    """Count responses by status."""
    items = list(responses)
    return ResponseCounts(
        in_count=sum(1 for r in items if r.status == ResponseStatus.IN),
        out_count=sum(1 for r in items if r.status == ResponseStatus.OUT),
        undecided_count=sum(1 for r in items if r.status == ResponseStatus.UNDECIDED),
        total=len(items),
    )


def grouping_text(in_count: int) -> str:
    """Describe how the confirmed players split into groups."""
    return _GROUPINGS.get(in_count, f"{in_count} players - need to organize groups")


def sort_sessions_by_date(sessions: Iterable[GolfSession]) -> list[GolfSession]:
    return sorted(sessions, key=lambda session: session.date)


def find_upcoming_session_index(sessions: list[GolfSession], now: datetime) -> int:
    """Return the index of the first session that has not started yet.

    Falls back to 0 when every session is in the past or the list is empty.
    """
    for index, session in enumerate(sessions):
        if session.date > now:
            return index
    return 0


def filter_users_by_session_tags(
    users: Iterable[RosterUser], session: GolfSession
) -> list[RosterUser]:
    """Return users who share at least one tag with the session.

    Sessions without tags are open to everyone.
    """
    if not session.tags:
        return list(users)
    session_tag_ids = {tag.id for tag in session.tags}
    return [
        user for user in users if session_tag_ids.intersection(user.tag_ids)
    ]
