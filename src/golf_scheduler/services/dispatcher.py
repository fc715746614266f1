"""Optimistic response edits reconciled against backend outcomes."""

import asyncio
import logging
from dataclasses import dataclass, field

from golf_scheduler.domain.responses import (
    MutationResult,
    OptimisticEntry,
    Response,
    ResponseStatus,
    SubmitResponsePayload,
    TransportType,
)
from golf_scheduler.services.overlay import OptimisticOverlay, merge_entry
from golf_scheduler.services.reconcile import (
    MutationKind,
    Reconciliation,
    ResponseEdit,
    merge_defaults,
    reconcile,
)
from golf_scheduler.services.repository import ResponseRepository
from golf_scheduler.services.responses import ResponseGateway, error_message
from golf_scheduler.services.roster import ResponseCounts, response_counts
from golf_scheduler.services.roster import grouping_text as describe_grouping
from golf_scheduler.services.submissions import SubmissionTracker

_logger = logging.getLogger(__name__)

_PendingSettle = tuple[asyncio.TimerHandle, OptimisticEntry]


@dataclass
class MutationDispatcher:
    """Status, note and transport edits for one session.

    Each edit writes an overlay entry, sends the mutation through the
    gateway and reconciles the overlay and repository with the outcome.
    Failures land in ``error``; nothing is raised to the caller.
    """

    session_id: str
    gateway: ResponseGateway
    overlay: OptimisticOverlay
    tracker: SubmissionTracker = field(default_factory=SubmissionTracker)
    settle_delay_seconds: float = 0.1
    error: str | None = None
    _closed: bool = field(default=False, init=False)
    _settle_handles: dict[str, _PendingSettle] = field(default_factory=dict, init=False)
    _live_entries: dict[str, list[OptimisticEntry]] = field(
        default_factory=dict, init=False
    )

    @property
    def repository(self) -> ResponseRepository:
        return self.overlay.repository

    def get_user_response(self, user_id: str) -> Response | None:
        """Return the overlay entry over confirmed state for a user."""
        return self.overlay.read(user_id)

    def is_submitting(self, user_id: str) -> bool:
        return self.tracker.is_submitting(user_id)

    def clear_error(self) -> None:
        self.error = None

    async def set_status(
        self, user_id: str, status: ResponseStatus | str
    ) -> MutationResult:
        """Set the user's status, or remove the response if it is unchanged."""
        self.tracker.mark(user_id)
        self.error = None
        try:
            requested = ResponseStatus(status)
            current = self.get_user_response(user_id)
            if current is not None and current.status == requested:
                return await self._toggle_off(user_id)
            payload = merge_defaults(user_id, current, ResponseEdit(status=requested))
            return await self._submit(MutationKind.STATUS, payload)
        except Exception as exc:
            return self._abort(user_id, exc, "Failed to update response")
        finally:
            self.tracker.unmark(user_id)

    async def set_note(self, user_id: str, note: str) -> MutationResult:
        """Save a note, keeping the current status and transport."""
        self.tracker.mark(user_id)
        self.error = None
        try:
            current = self.get_user_response(user_id)
            payload = merge_defaults(user_id, current, ResponseEdit(note=note.strip()))
            return await self._submit(MutationKind.NOTE, payload)
        except Exception as exc:
            return self._abort(user_id, exc, "Failed to update note")
        finally:
            self.tracker.unmark(user_id)

    async def set_transport(
        self, user_id: str, transport: TransportType | str
    ) -> MutationResult:
        """Change transport, keeping the current status and note."""
        self.tracker.mark(user_id)
        self.error = None
        try:
            requested = TransportType(transport)
            current = self.get_user_response(user_id)
            payload = merge_defaults(
                user_id, current, ResponseEdit(transport=requested)
            )
            return await self._submit(MutationKind.TRANSPORT, payload)
        except Exception as exc:
            return self._abort(user_id, exc, "Failed to update transport")
        finally:
            self.tracker.unmark(user_id)

    def response_stats(self) -> ResponseCounts:
        """Count responses as the interface shows them, overlay included."""
        return response_counts(self._effective_responses())

    def grouping_text(self) -> str:
        return describe_grouping(self.response_stats().in_count)

    def close(self) -> None:
        """Discard this dispatcher; late outcomes no longer touch state."""
        self._closed = True
        for handle, _entry in self._settle_handles.values():
            handle.cancel()
        self._settle_handles.clear()
        self._live_entries.clear()

    async def _submit(
        self, kind: MutationKind, payload: SubmitResponsePayload
    ) -> MutationResult:
        user_id = payload.user_id
        previous = self.overlay.peek(user_id)
        applied = payload.as_entry()
        self.overlay.set(user_id, applied)
        self._track(user_id, applied)
        try:
            outcome = await self.gateway.submit_response(self.session_id, payload)
        except BaseException:
            self._release(user_id, applied)
            self.overlay.clear(user_id, expected=applied)
            raise
        result = reconcile(kind, applied, previous, outcome)
        if not result.deferred_clear:
            self._release(user_id, applied)
        self._apply(user_id, outcome, result)
        return outcome

    async def _toggle_off(self, user_id: str) -> MutationResult:
        previous = self.overlay.peek(user_id)
        self.overlay.clear(user_id)
        outcome = await self.gateway.delete_response(self.session_id, user_id)
        # An entry whose mutation settled meanwhile has nothing left to clear it.
        restorable = previous if self._is_live(user_id, previous) else None
        self._apply(
            user_id,
            outcome,
            reconcile(MutationKind.TOGGLE_OFF, None, restorable, outcome),
        )
        return outcome

    def _apply(
        self, user_id: str, outcome: MutationResult, result: Reconciliation
    ) -> None:
        if self._closed:
            _logger.info(
                "Ignoring late outcome for closed session %s (user=%s)",
                self.session_id,
                user_id,
            )
            return
        if not outcome.success:
            self.error = outcome.error
        delta = result.repository_delta
        if delta is not None:
            if delta.response is None:
                self.repository.remove_for(user_id)
            else:
                self.repository.replace_for(user_id, delta.response)
        if result.deferred_clear and result.overlay_entry is not None:
            self._schedule_clear(user_id, result.overlay_entry)
        elif result.overlay_entry is None:
            self.overlay.clear(user_id)
        else:
            self.overlay.set(user_id, result.overlay_entry)

    def _schedule_clear(self, user_id: str, entry: OptimisticEntry) -> None:
        existing = self._settle_handles.pop(user_id, None)
        if existing is not None:
            handle, superseded = existing
            handle.cancel()
            self._release(user_id, superseded)
        if self.settle_delay_seconds <= 0:
            self._settle(user_id, entry)
            return
        loop = asyncio.get_running_loop()
        handle = loop.call_later(
            self.settle_delay_seconds, self._settle, user_id, entry
        )
        self._settle_handles[user_id] = (handle, entry)

    def _settle(self, user_id: str, entry: OptimisticEntry) -> None:
        pending = self._settle_handles.get(user_id)
        if pending is not None and pending[1] is entry:
            del self._settle_handles[user_id]
        self._release(user_id, entry)
        if not self._closed:
            self.overlay.clear(user_id, expected=entry)

    def _track(self, user_id: str, entry: OptimisticEntry) -> None:
        self._live_entries.setdefault(user_id, []).append(entry)

    def _release(self, user_id: str, entry: OptimisticEntry) -> None:
        live = self._live_entries.get(user_id, [])
        remaining = [item for item in live if item is not entry]
        if remaining:
            self._live_entries[user_id] = remaining
        else:
            self._live_entries.pop(user_id, None)

    def _is_live(self, user_id: str, entry: OptimisticEntry | None) -> bool:
        if entry is None:
            return False
        return any(item is entry for item in self._live_entries.get(user_id, []))

    def _abort(self, user_id: str, exc: Exception, fallback: str) -> MutationResult:
        _logger.exception(
            "Response edit failed: session=%s user=%s", self.session_id, user_id
        )
        message = error_message(exc, fallback)
        if not self._closed:
            self.error = message
        return MutationResult.failed(message)

    def _effective_responses(self) -> list[Response]:
        entries = self.overlay.entries()
        effective: list[Response] = []
        for response in self.repository.current_responses():
            entry = entries.pop(response.user.id, None)
            if entry is None:
                effective.append(response)
            else:
                effective.append(
                    merge_entry(entry, response, response.user.id, self.session_id)
                )
        for user_id, entry in entries.items():
            effective.append(merge_entry(entry, None, user_id, self.session_id))
        return effective
