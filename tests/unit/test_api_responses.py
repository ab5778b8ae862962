from dataclasses import replace

from pydantic import ValidationError
import pytest

from app.api.handlers.scores import board_team_response
from app.api.http_app import build_app
from app.domain.dto import BoardEntry
from app.domain.models import ScoreFields, TeamSnapshot
from app.domain.use_cases.scoreboard import build_board_entry


def _unranked_entry() -> BoardEntry:
    team = TeamSnapshot(
        team_id="team_1",
        session_key="abcde",
        team_name="Rockets",
        project_name="Launcher",
        members_text="Ann",
    )
    return build_board_entry(team, ScoreFields(c1=5))


@pytest.mark.unit
def test_board_response_requires_a_rank() -> None:
    with pytest.raises(ValidationError):
        board_team_response(_unranked_entry())


@pytest.mark.unit
def test_board_response_uses_assigned_rank() -> None:
    response = board_team_response(replace(_unranked_entry(), rank=3))

    assert response.rank == 3
    assert response.model_dump(by_alias=True)["businessSubtotal"] == 5


@pytest.mark.unit
def test_openapi_documents_every_taxonomy_status() -> None:
    schema = build_app(role="api", run_id="unit-openapi").openapi()

    responses = schema["paths"]["/api/scores/{team_id}"]["put"]["responses"]

    assert {"400", "403", "404", "409", "500"} <= set(responses)
