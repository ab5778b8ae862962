import asyncio

import pytest

from app.domain.dto import SettingsUpdate, TeamInput, TeamStatusUpdate
from app.domain.errors import DomainValidationError, NotFoundError, ScoringLockedError
from app.domain.models import CompletionStatus, ProjectStatus, ScoreFields, ScoreStatus
from app.domain.use_cases import sessions as session_use_cases
from app.domain.use_cases import teams as team_use_cases
from app.domain.use_cases.scoreboard import ScoreBoardService
from app.repositories.stub import InMemorySessionedStore


def _setup() -> tuple[InMemorySessionedStore, ScoreBoardService, str]:
    store = InMemorySessionedStore()
    session = asyncio.run(session_use_cases.create_session(store=store))
    return store, ScoreBoardService(store=store), session.session_key


def _add_team(store: InMemorySessionedStore, session_key: str, name: str) -> str:
    team = asyncio.run(
        team_use_cases.create_team(
            store=store,
            session_key=session_key,
            data=TeamInput(team_name=name, project_name=f"{name} project", members_text="Ann\nBob"),
        )
    )
    return team.team_id


def _scores(value: int) -> dict[str, object]:
    return {f"c{index}": value for index in range(1, 11)}


@pytest.mark.unit
def test_board_defaults_missing_scores_to_partial_zero() -> None:
    store, service, session_key = _setup()
    _add_team(store, session_key, "Rockets")

    board = asyncio.run(service.get_board(session_key))

    assert board.scoring_locked is False
    assert board.show_partial is True
    assert len(board.teams) == 1
    entry = board.teams[0]
    assert entry.criteria == ScoreFields.empty()
    assert (entry.total, entry.status, entry.rank) == (0, CompletionStatus.PARTIAL, 1)
    assert entry.members == ("Ann", "Bob")
    assert entry.member_count == 2


@pytest.mark.unit
def test_board_ranks_teams_and_carries_display_flags() -> None:
    store, service, session_key = _setup()
    alpha = _add_team(store, session_key, "Alpha")
    beta = _add_team(store, session_key, "Beta")
    gamma = _add_team(store, session_key, "Gamma")
    asyncio.run(service.save_score(session_key, alpha, _scores(5)))
    asyncio.run(service.save_score(session_key, beta, _scores(7)))
    asyncio.run(service.save_score(session_key, gamma, _scores(6)))
    asyncio.run(store.save_settings(session_key=session_key, update=SettingsUpdate(show_partial=False)))

    board = asyncio.run(service.get_board(session_key))

    assert [(item.team_name, item.total, item.rank) for item in board.teams] == [
        ("Beta", 70, 1),
        ("Gamma", 60, 2),
        ("Alpha", 50, 3),
    ]
    assert board.show_partial is False
    assert all(item.status == CompletionStatus.COMPLETE for item in board.teams)


@pytest.mark.unit
def test_board_is_scoped_to_session() -> None:
    store, service, session_key = _setup()
    other_session = asyncio.run(session_use_cases.create_session(store=store)).session_key
    _add_team(store, session_key, "Rockets")
    _add_team(store, other_session, "Comets")

    board = asyncio.run(service.get_board(session_key))

    assert [item.team_name for item in board.teams] == ["Rockets"]


@pytest.mark.unit
def test_empty_session_has_empty_board() -> None:
    _, service, session_key = _setup()

    assert asyncio.run(service.get_board(session_key)).teams == []


@pytest.mark.unit
def test_save_score_creates_then_updates() -> None:
    store, service, session_key = _setup()
    team_id = _add_team(store, session_key, "Rockets")

    first = asyncio.run(service.save_score(session_key, team_id, {"c1": 8, "c6": "9"}))
    second = asyncio.run(service.save_score(session_key, team_id, {"c1": 10}))

    assert (first.business_subtotal, first.technical_subtotal, first.total) == (8, 9, 17)
    # A save replaces the whole record; omitted criteria become null.
    assert second.criteria == ScoreFields(c1=10)
    assert [created for _, _, created in store.score_writes] == [True, False]


@pytest.mark.unit
def test_save_score_rejected_when_locked_without_writing() -> None:
    store, service, session_key = _setup()
    team_id = _add_team(store, session_key, "Rockets")
    asyncio.run(store.save_settings(session_key=session_key, update=SettingsUpdate(scoring_locked=True)))

    with pytest.raises(ScoringLockedError):
        asyncio.run(service.save_score(session_key, team_id, _scores(5)))

    assert store.score_writes == []
    assert asyncio.run(service.get_board(session_key)).scoring_locked is True


@pytest.mark.unit
def test_locked_check_precedes_team_and_payload_checks() -> None:
    store, service, session_key = _setup()
    asyncio.run(store.save_settings(session_key=session_key, update=SettingsUpdate(scoring_locked=True)))

    with pytest.raises(ScoringLockedError):
        asyncio.run(service.save_score(session_key, "team_missing", {"c1": 99}))


@pytest.mark.unit
def test_save_score_for_unknown_team_is_not_found() -> None:
    store, service, session_key = _setup()

    with pytest.raises(NotFoundError):
        asyncio.run(service.save_score(session_key, "team_missing", _scores(5)))
    assert store.score_writes == []


@pytest.mark.unit
def test_invalid_score_payload_writes_nothing() -> None:
    store, service, session_key = _setup()
    team_id = _add_team(store, session_key, "Rockets")
    asyncio.run(service.save_score(session_key, team_id, _scores(5)))

    with pytest.raises(DomainValidationError) as exc_info:
        asyncio.run(service.save_score(session_key, team_id, {"c1": 11, "c2": 0}))

    assert exc_info.value.errors == ["c1 must be an integer 1-10 or null", "c2 must be an integer 1-10 or null"]
    assert len(store.score_writes) == 1
    assert asyncio.run(service.get_team_score(session_key, team_id)).total == 50


@pytest.mark.unit
def test_team_from_other_session_is_not_visible() -> None:
    store, service, session_key = _setup()
    other_session = asyncio.run(session_use_cases.create_session(store=store)).session_key
    team_id = _add_team(store, other_session, "Comets")

    with pytest.raises(NotFoundError):
        asyncio.run(service.get_team_score(session_key, team_id))


@pytest.mark.unit
def test_update_team_status_changes_only_given_fields() -> None:
    store, service, session_key = _setup()
    team_id = _add_team(store, session_key, "Rockets")

    result = asyncio.run(service.update_team_status(session_key, team_id, TeamStatusUpdate(project_status="Testing")))
    assert (result.project_status, result.score_status) == (ProjectStatus.TESTING, ScoreStatus.IN_PROGRESS)

    result = asyncio.run(service.update_team_status(session_key, team_id, TeamStatusUpdate(score_status="Complete")))
    assert (result.project_status, result.score_status) == (ProjectStatus.TESTING, ScoreStatus.COMPLETE)


@pytest.mark.unit
def test_score_status_flag_is_independent_of_completion() -> None:
    store, service, session_key = _setup()
    team_id = _add_team(store, session_key, "Rockets")
    asyncio.run(service.update_team_status(session_key, team_id, TeamStatusUpdate(score_status="Complete")))

    entry = asyncio.run(service.get_board(session_key)).teams[0]

    assert entry.score_status == ScoreStatus.COMPLETE
    assert entry.status == CompletionStatus.PARTIAL


@pytest.mark.unit
def test_update_status_for_unknown_team_is_not_found() -> None:
    _, service, session_key = _setup()

    with pytest.raises(NotFoundError):
        asyncio.run(service.update_team_status(session_key, "team_missing", TeamStatusUpdate(project_status="Coding")))


@pytest.mark.unit
def test_board_fails_whole_when_a_score_lookup_fails() -> None:
    store, service, session_key = _setup()
    _add_team(store, session_key, "Rockets")
    _add_team(store, session_key, "Comets")

    async def _failing_get_score(*, session_key: str, team_id: str):
        raise RuntimeError("store unavailable")

    store.get_score = _failing_get_score  # type: ignore[method-assign]

    with pytest.raises(RuntimeError, match="store unavailable"):
        asyncio.run(service.get_board(session_key))
