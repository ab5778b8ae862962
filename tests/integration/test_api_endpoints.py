from fastapi.testclient import TestClient
import pytest

from app.api.http_app import build_app
from app.services.bootstrap import build_runtime_container
from app.settings import RuntimeSettings
from tests.integration.api_seed import SESSION_HEADER, seed_session, seed_team, uniform_scores


def _client(settings: RuntimeSettings | None = None) -> TestClient:
    container = build_runtime_container(settings or RuntimeSettings())
    app = build_app(role="api", run_id="integration-api", api_deps=container.api_deps)
    return TestClient(app)


@pytest.mark.integration
def test_system_endpoints_are_available() -> None:
    with _client() as client:
        health = client.get("/health")
        ready = client.get("/ready")

    assert health.status_code == 200
    assert health.json() == {"status": "ok", "role": "api", "mode": "api"}
    assert ready.json()["store"] == "InMemorySessionedStore"


@pytest.mark.integration
def test_ready_reports_unavailable_without_dependencies() -> None:
    app = build_app(role="api", run_id="integration-api")
    with TestClient(app) as client:
        assert client.get("/ready").json()["store"] == "unavailable"
        assert client.get("/api/teams", headers={SESSION_HEADER: "abcde"}).status_code == 503


@pytest.mark.integration
def test_session_create_and_join_set_cookie() -> None:
    with _client() as client:
        created = client.post("/api/sessions")
        session_key = created.json()["sessionKey"]

        assert created.status_code == 201
        assert created.cookies.get("vt_session") == session_key

        joined = client.get(f"/api/sessions/{session_key.upper()}")
        assert joined.status_code == 200
        assert joined.json()["sessionKey"] == session_key

        # The cookie alone identifies the session.
        assert client.get("/api/settings").status_code == 200


@pytest.mark.integration
def test_session_key_errors() -> None:
    with _client() as client:
        bad_format = client.get("/api/sessions/xyz")
        missing = client.get("/api/teams")
        unknown = client.get("/api/teams", headers={SESSION_HEADER: "00000"})

    assert bad_format.status_code == 400
    assert bad_format.json() == {"errors": ["Session key must be a 5-character hex string"]}
    assert missing.status_code == 400
    assert missing.json() == {"errors": ["Session key is required"]}
    assert unknown.status_code == 404
    assert unknown.json() == {"errors": ["Session not found"]}


@pytest.mark.integration
def test_board_shape_and_ranking() -> None:
    with _client() as client:
        headers = seed_session(client=client)
        alpha = seed_team(client=client, headers=headers, team_name="Alpha")
        beta = seed_team(client=client, headers=headers, team_name="Beta")
        seed_team(client=client, headers=headers, team_name="Gamma")

        assert client.put(f"/api/scores/{alpha}", headers=headers, json=uniform_scores(8)).status_code == 200
        assert client.put(f"/api/scores/{beta}", headers=headers, json=uniform_scores(8)).status_code == 200

        response = client.get("/api/scores", headers=headers)

    assert response.status_code == 200
    board = response.json()
    assert board["scoringLocked"] is False
    assert board["showPartial"] is True
    assert [(team["teamName"], team["rank"]) for team in board["teams"]] == [("Alpha", 1), ("Beta", 1), ("Gamma", 3)]
    alpha_entry = board["teams"][0]
    assert alpha_entry["businessSubtotal"] == 40
    assert alpha_entry["technicalSubtotal"] == 40
    assert alpha_entry["total"] == 80
    assert alpha_entry["status"] == "Complete"
    assert alpha_entry["members"] == ["Ann", "Bob"]
    assert alpha_entry["memberCount"] == 2
    assert alpha_entry["projectStatus"] == "Planning"
    assert alpha_entry["scoreStatus"] == "In Progress"
    gamma_entry = board["teams"][2]
    assert gamma_entry["c1"] is None
    assert gamma_entry["status"] == "Partial"


@pytest.mark.integration
def test_score_validation_lists_every_bad_field() -> None:
    with _client() as client:
        headers = seed_session(client=client)
        team_id = seed_team(client=client, headers=headers, team_name="Rockets")

        response = client.put(f"/api/scores/{team_id}", headers=headers, json={"c1": 0, "c5": "x", "c9": 4.5})

    assert response.status_code == 400
    assert response.json() == {
        "errors": [
            "c1 must be an integer 1-10 or null",
            "c5 must be an integer 1-10 or null",
            "c9 must be an integer 1-10 or null",
        ]
    }


@pytest.mark.integration
def test_locked_scoring_rejects_writes() -> None:
    with _client() as client:
        headers = seed_session(client=client)
        team_id = seed_team(client=client, headers=headers, team_name="Rockets")
        client.put("/api/settings", headers=headers, json={"scoringLocked": True})

        locked = client.put(f"/api/scores/{team_id}", headers=headers, json=uniform_scores(5))
        score = client.get(f"/api/scores/{team_id}", headers=headers)

    assert locked.status_code == 403
    assert locked.json() == {"errors": ["Scoring is locked"]}
    assert score.json()["total"] == 0


@pytest.mark.integration
def test_unknown_team_score_is_not_found() -> None:
    with _client() as client:
        headers = seed_session(client=client)
        response = client.get("/api/scores/team_missing", headers=headers)

    assert response.status_code == 404
    assert response.json() == {"errors": ["Team not found"]}


@pytest.mark.integration
def test_team_status_patch() -> None:
    with _client() as client:
        headers = seed_session(client=client)
        team_id = seed_team(client=client, headers=headers, team_name="Rockets")

        updated = client.patch(f"/api/scores/{team_id}/status", headers=headers, json={"projectStatus": "Deployed"})
        invalid = client.patch(f"/api/scores/{team_id}/status", headers=headers, json={})

    assert updated.status_code == 200
    assert updated.json() == {"teamId": team_id, "projectStatus": "Deployed", "scoreStatus": "In Progress"}
    assert invalid.status_code == 400
    assert invalid.json() == {"errors": ["projectStatus or scoreStatus is required"]}


@pytest.mark.integration
def test_team_crud_and_cascade_delete() -> None:
    with _client() as client:
        headers = seed_session(client=client)
        team_id = seed_team(client=client, headers=headers, team_name="Rockets")
        client.put(f"/api/scores/{team_id}", headers=headers, json=uniform_scores(6))

        duplicate = client.post(
            "/api/teams",
            headers=headers,
            json={"teamName": "Rockets", "projectName": "Other", "membersText": "Cleo"},
        )
        renamed = client.put(
            f"/api/teams/{team_id}",
            headers=headers,
            json={"teamName": "Rockets 2", "projectName": "Launcher", "membersText": "Ann\nBob\nCleo"},
        )
        deleted = client.delete(f"/api/teams/{team_id}", headers=headers)
        deleted_again = client.delete(f"/api/teams/{team_id}", headers=headers)
        board = client.get("/api/scores", headers=headers)

    assert duplicate.status_code == 400
    assert duplicate.json() == {"errors": ["teamName must be unique"]}
    assert renamed.status_code == 200
    assert renamed.json()["memberCount"] == 3
    assert deleted.json() == {"success": True}
    assert deleted_again.status_code == 404
    assert board.json()["teams"] == []


@pytest.mark.integration
def test_team_limit_comes_from_runtime_settings() -> None:
    with _client(RuntimeSettings(max_teams_per_session=1)) as client:
        headers = seed_session(client=client)
        seed_team(client=client, headers=headers, team_name="Solo")

        response = client.post(
            "/api/teams",
            headers=headers,
            json={"teamName": "Second", "projectName": "P", "membersText": "Ann"},
        )

    assert response.status_code == 400
    assert response.json() == {"errors": ["Maximum 1 teams allowed"]}


@pytest.mark.integration
def test_sessions_are_isolated() -> None:
    with _client() as client:
        first = seed_session(client=client)
        second = seed_session(client=client)
        team_id = seed_team(client=client, headers=first, team_name="Rockets")

        foreign = client.get(f"/api/scores/{team_id}", headers=second)
        teams = client.get("/api/teams", headers=second)

    assert foreign.status_code == 404
    assert teams.json() == []


@pytest.mark.integration
def test_settings_roundtrip_and_validation() -> None:
    with _client() as client:
        headers = seed_session(client=client)

        defaults = client.get("/api/settings", headers=headers).json()
        updated = client.put(
            "/api/settings",
            headers=headers,
            json={"eventName": "Spring Jam", "countdownTarget": "2026-11-01T18:00", "tvRefreshSeconds": 30},
        )
        cleared = client.put("/api/settings", headers=headers, json={"countdownTarget": None})
        invalid = client.put("/api/settings", headers=headers, json={"tvRefreshSeconds": 500})

    assert defaults["eventName"] == "Hackathon"
    assert defaults["eventIcon"] == "⚡"
    assert defaults["tvRefreshSeconds"] == 15
    assert updated.json()["countdownTarget"] == "2026-11-01T18:00"
    assert cleared.json()["countdownTarget"] is None
    assert cleared.json()["eventName"] == "Spring Jam"
    assert invalid.status_code == 400
    assert invalid.json() == {"errors": ["tvRefreshSeconds must be integer 5-120"]}


@pytest.mark.integration
def test_rubric_read_and_replace() -> None:
    with _client() as client:
        headers = seed_session(client=client)

        rubric = client.get("/api/rubric", headers=headers).json()
        categories = [{"id": item["id"], "name": f"{item['name']}!", "guidance": ""} for item in rubric]
        updated = client.put("/api/rubric", headers=headers, json={"categories": categories})
        short = client.put("/api/rubric", headers=headers, json={"categories": categories[:3]})

    assert len(rubric) == 10
    assert rubric[0]["groupName"] == "Business"
    assert rubric[9]["groupName"] == "Technical"
    assert updated.status_code == 200
    assert all(item["name"].endswith("!") for item in updated.json())
    assert short.status_code == 400
    assert short.json() == {"errors": ["Must provide exactly 10 categories"]}


@pytest.mark.integration
def test_announcements_flow() -> None:
    with _client(RuntimeSettings(max_pinned_announcements=1)) as client:
        headers = seed_session(client=client)

        pinned = client.post(
            "/api/announcements",
            headers=headers,
            json={"title": "Lunch", "body": "Pizza at noon", "pinned": True},
        )
        draft = client.post(
            "/api/announcements",
            headers=headers,
            json={"title": "Awards", "body": "TBD", "published": False},
        )
        over_limit = client.post(
            "/api/announcements",
            headers=headers,
            json={"title": "Wifi", "body": "guest/guest", "pinned": True},
        )
        published_only = client.get("/api/announcements", headers=headers, params={"published": "true"})
        everything = client.get("/api/announcements", headers=headers)
        edited = client.put(
            f"/api/announcements/{draft.json()['id']}",
            headers=headers,
            json={"published": True},
        )
        removed = client.delete(f"/api/announcements/{pinned.json()['id']}", headers=headers)
        missing = client.delete(f"/api/announcements/{pinned.json()['id']}", headers=headers)

    assert pinned.status_code == 201
    assert pinned.json()["id"].startswith("ann_")
    assert over_limit.status_code == 400
    assert over_limit.json() == {"errors": ["Maximum 1 pinned announcements allowed. Unpin one first."]}
    assert [item["title"] for item in published_only.json()] == ["Lunch"]
    assert [item["title"] for item in everything.json()] == ["Lunch", "Awards"]
    assert edited.json()["published"] is True
    assert removed.json() == {"success": True}
    assert missing.status_code == 404


@pytest.mark.integration
def test_malformed_request_body_is_a_validation_error() -> None:
    with _client() as client:
        headers = seed_session(client=client)
        response = client.put("/api/settings", headers=headers, json={"scoringLocked": "sometimes"})

    assert response.status_code == 400
    assert response.json()["errors"]
