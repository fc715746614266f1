"""Tests for the session feed."""

import asyncio
from datetime import UTC, date, datetime

from golf_scheduler.domain.errors import BackendRequestError
from golf_scheduler.domain.responses import ResponseStatus, ResponseUser
from golf_scheduler.domain.sessions import GolfSession, SessionDraft, SessionTag
from golf_scheduler.services.retry import ResilientRequestExecutor
from golf_scheduler.services.sessions import SessionService
from tests.conftest import FakeSessionApi, RecordingSleep, make_response


def _session(session_id: str, day: int) -> GolfSession:
    return GolfSession(
        id=session_id,
        title="Saturday scramble",
        date=datetime(2026, 10, day, 8, 0, tzinfo=UTC),
        created_by=ResponseUser(id="ana", nickname="Ana"),
        responses=[make_response("ana"), make_response("ben", ResponseStatus.OUT)],
    )


def test_refresh_sorts_and_seeds_repositories() -> None:
    api = FakeSessionApi(sessions=[_session("late", 30), _session("early", 20)])
    service = SessionService(api=api, executor=ResilientRequestExecutor())

    sessions = asyncio.run(service.refresh(today=date(2026, 10, 19)))

    assert [s.id for s in sessions] == ["early", "late"]
    assert api.calls == [date(2026, 10, 19)]
    repository = service.repository_for("early")
    assert repository.find("ben").status == ResponseStatus.OUT
    stats = service.session_stats("early")
    assert stats is not None
    assert stats.in_count == 1
    assert service.session_stats("missing") is None
    assert service.upcoming_index(datetime(2026, 10, 25, tzinfo=UTC)) == 1


def test_refresh_reseeds_same_repository_object() -> None:
    api = FakeSessionApi(sessions=[_session("early", 20)])
    service = SessionService(api=api, executor=ResilientRequestExecutor())
    repository = service.repository_for("early")

    asyncio.run(service.refresh(today=date(2026, 10, 19)))

    assert service.repository_for("early") is repository
    assert len(repository.current_responses()) == 2


def test_refresh_retries_cold_start_then_succeeds() -> None:
    sleep = RecordingSleep()
    api = FakeSessionApi(
        sessions=[_session("early", 20)],
        errors=[BackendRequestError("Backend returned HTTP 504", http_status=504)],
    )
    service = SessionService(api=api, executor=ResilientRequestExecutor(sleep=sleep))

    asyncio.run(service.refresh(today=date(2026, 10, 19)))

    assert len(api.calls) == 2
    assert sleep.delays == [1.5]
    assert service.error is None


def test_refresh_failure_keeps_previous_sessions() -> None:
    api = FakeSessionApi(sessions=[_session("early", 20)])
    service = SessionService(api=api, executor=ResilientRequestExecutor())
    asyncio.run(service.refresh(today=date(2026, 10, 19)))
    api.errors.append(BackendRequestError("Unauthorized", http_status=401))

    sessions = asyncio.run(service.refresh(today=date(2026, 10, 19)))

    assert [s.id for s in sessions] == ["early"]
    assert service.error == "Unauthorized"
    service.clear_error()
    assert service.error is None
    assert service.get_session("early") is not None


def test_refresh_drops_repositories_of_sessions_that_left_the_feed() -> None:
    api = FakeSessionApi(sessions=[_session("early", 20), _session("late", 30)])
    service = SessionService(api=api, executor=ResilientRequestExecutor())
    asyncio.run(service.refresh(today=date(2026, 10, 19)))
    stale = service.repository_for("early")
    api.sessions = [_session("late", 30)]

    asyncio.run(service.refresh(today=date(2026, 10, 21)))

    fresh = service.repository_for("early")
    assert fresh is not stale
    assert fresh.current_responses() == []
    assert len(service.repository_for("late").current_responses()) == 2


def test_create_session_adds_it_in_date_order() -> None:
    tag = SessionTag(id="t-1", name="Weekend")
    api = FakeSessionApi(sessions=[_session("late", 30)], tags=[tag])
    service = SessionService(api=api, executor=ResilientRequestExecutor())
    asyncio.run(service.refresh(today=date(2026, 10, 19)))
    draft = SessionDraft(
        title="Twilight nine",
        date=datetime(2026, 10, 22, 17, 0, tzinfo=UTC),
        created_by_id="ana",
        tag_ids=["t-1"],
    )

    result = asyncio.run(service.create_session(draft))

    assert result.success is True
    assert result.session is not None
    assert result.session.tags == [tag]
    assert [s.title for s in service.sessions] == ["Twilight nine", "Saturday scramble"]
    assert service.repository_for(result.session.id).current_responses() == []


def test_create_session_failure_sets_error() -> None:
    api = FakeSessionApi(errors=[BackendRequestError("Title is required", 400)])
    service = SessionService(api=api, executor=ResilientRequestExecutor())
    draft = SessionDraft(
        title="", date=datetime(2026, 10, 22, tzinfo=UTC), created_by_id="ana"
    )

    result = asyncio.run(service.create_session(draft))

    assert result.success is False
    assert result.error == "Title is required"
    assert service.error == "Title is required"
    assert service.sessions == []


def test_update_session_replaces_entry_and_resorts() -> None:
    api = FakeSessionApi(sessions=[_session("early", 20), _session("late", 30)])
    service = SessionService(api=api, executor=ResilientRequestExecutor())
    asyncio.run(service.refresh(today=date(2026, 10, 19)))
    draft = SessionDraft(
        title="Moved to Halloween",
        date=datetime(2026, 10, 31, 8, 0, tzinfo=UTC),
        created_by_id="ana",
    )

    result = asyncio.run(service.update_session("early", draft))

    assert result.success is True
    assert [s.id for s in service.sessions] == ["late", "early"]
    assert service.get_session("early").title == "Moved to Halloween"
    assert len(service.repository_for("early").current_responses()) == 2


def test_archive_session_removes_it_from_feed() -> None:
    api = FakeSessionApi(sessions=[_session("early", 20), _session("late", 30)])
    service = SessionService(api=api, executor=ResilientRequestExecutor())
    asyncio.run(service.refresh(today=date(2026, 10, 19)))
    repository = service.repository_for("early")

    result = asyncio.run(service.archive_session("early", archived_by="ana"))

    assert result.success is True
    assert api.archived == [("early", "ana")]
    assert [s.id for s in service.sessions] == ["late"]
    assert service.repository_for("early") is not repository


def test_archive_failure_keeps_session() -> None:
    api = FakeSessionApi(sessions=[_session("early", 20)])
    service = SessionService(api=api, executor=ResilientRequestExecutor())
    asyncio.run(service.refresh(today=date(2026, 10, 19)))
    api.errors.append(BackendRequestError("Forbidden", http_status=403))

    result = asyncio.run(service.archive_session("early"))

    assert result.success is False
    assert service.error == "Forbidden"
    assert service.get_session("early") is not None


def test_refresh_tags_loads_tag_list() -> None:
    tags = [SessionTag(id="t-1", name="Weekend", color="#0a0")]
    service = SessionService(
        api=FakeSessionApi(tags=tags), executor=ResilientRequestExecutor()
    )

    assert asyncio.run(service.refresh_tags()) == tags
    assert service.error is None
