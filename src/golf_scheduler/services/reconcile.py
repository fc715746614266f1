"""Pure helpers that decide payloads and overlay outcomes for mutations."""

from dataclasses import dataclass
from enum import StrEnum

from golf_scheduler.domain.responses import (
    MutationResult,
    OptimisticEntry,
    Response,
    ResponseStatus,
    SubmitResponsePayload,
    TransportType,
)

DEFAULT_STATUS = ResponseStatus.UNDECIDED
DEFAULT_TRANSPORT = TransportType.WALKING


class MutationKind(StrEnum):
    """Which edit produced a mutation."""

    STATUS = "status"
    NOTE = "note"
    TRANSPORT = "transport"
    TOGGLE_OFF = "toggle_off"


@dataclass(frozen=True)
class ResponseEdit:
    """Fields the user explicitly changed; ``None`` means keep current."""

    status: ResponseStatus | None = None
    note: str | None = None
    transport: TransportType | None = None


@dataclass(frozen=True)
class RepositoryDelta:
    """Change to apply to confirmed state; ``response=None`` removes it."""

    response: Response | None


@dataclass(frozen=True)
class Reconciliation:
    """Overlay and repository state after a mutation outcome."""

    overlay_entry: OptimisticEntry | None
    repository_delta: RepositoryDelta | None = None
    deferred_clear: bool = False


def merge_defaults(
    user_id: str, current: Response | None, edit: ResponseEdit
) -> SubmitResponsePayload:
    """Fill unchanged fields from the current effective response.

    The submit mutation replaces the whole record, so every field is sent.
    """
    status = edit.status or (current.status if current else DEFAULT_STATUS)
    if edit.note is not None:
        note = edit.note
    else:
        note = (current.note if current else None) or ""
    transport = (
        edit.transport or (current.transport if current else None) or DEFAULT_TRANSPORT
    )
    return SubmitResponsePayload(
        user_id=user_id, status=status, note=note, transport=transport
    )


def reconcile(
    kind: MutationKind,
    applied: OptimisticEntry | None,
    previous: OptimisticEntry | None,
    outcome: MutationResult,
) -> Reconciliation:
    """Map a mutation outcome to the next overlay entry and repository delta.

    ``applied`` is the entry written optimistically (``None`` for a toggle
    off), ``previous`` the entry that was present before the edit.
    """
    if kind is MutationKind.TOGGLE_OFF:
        if outcome.success:
            return Reconciliation(
                overlay_entry=None, repository_delta=RepositoryDelta(response=None)
            )
        return Reconciliation(overlay_entry=previous)

    if not outcome.success:
        return Reconciliation(overlay_entry=None)

    delta = (
        RepositoryDelta(response=outcome.response)
        if outcome.response is not None
        else None
    )
    if kind is MutationKind.TRANSPORT:
        return Reconciliation(
            overlay_entry=applied, repository_delta=delta, deferred_clear=True
        )
    return Reconciliation(overlay_entry=None, repository_delta=delta)
