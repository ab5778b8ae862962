from __future__ import annotations

from fastapi.testclient import TestClient

SESSION_HEADER = "X-Session-Key"


def seed_session(*, client: TestClient) -> dict[str, str]:
    response = client.post("/api/sessions")
    assert response.status_code == 201
    return {SESSION_HEADER: response.json()["sessionKey"]}


def seed_team(
    *,
    client: TestClient,
    headers: dict[str, str],
    team_name: str,
    members_text: str = "Ann\nBob",
) -> str:
    response = client.post(
        "/api/teams",
        headers=headers,
        json={
            "teamName": team_name,
            "projectName": f"{team_name} project",
            "membersText": members_text,
            "description": f"{team_name} builds things",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["teamId"]


def uniform_scores(value: int) -> dict[str, int]:
    return {f"c{index}": value for index in range(1, 11)}
