# Area: HTTP Tests
"""Tests for the FastAPI surface using the in-process TestClient."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from conftest import calibrate
from match_orchestrator.http_app import ROUTES, SERVICE_NAME, create_app


@pytest.fixture
def client(orchestrator):
    return TestClient(create_app(orchestrator, {"region": "eu-west"}))


def create_room(client, **body):
    response = client.post("/rooms", json=body)
    assert response.status_code == 201
    return response.json()


class TestHarness:

    def test_banner(self, client):
        body = client.get("/").json()
        assert body["message"] == f"{SERVICE_NAME} ready"
        assert "summary" in body

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["service"] == SERVICE_NAME
        assert body["status"] == "ok"
        assert body["region"] == "eu-west"
        assert body["details"] == {"routeCount": len(ROUTES)}

    def test_routes(self, client):
        body = client.get("/routes").json()
        assert len(body) == len(ROUTES)
        assert all(route["handledBy"] == SERVICE_NAME for route in body)

    def test_cors_headers(self, client):
        response = client.get("/health", headers={"Origin": "http://localhost:3000"})
        assert response.headers["access-control-allow-origin"] == "*"

    def test_cors_disabled(self, orchestrator):
        client = TestClient(create_app(orchestrator, {"enable_cors": False}))
        response = client.get("/health", headers={"Origin": "http://localhost:3000"})
        assert "access-control-allow-origin" not in response.headers

    def test_orchestrator_on_state(self, orchestrator):
        assert create_app(orchestrator).state.orchestrator is orchestrator


class TestRoomRoutes:

    def test_create_with_camel_case_body(self, client):
        room = create_room(client, hostHandle="alice", mode="endurance", puzzleId="pz-grignard-03")
        assert room["participants"][0]["handle"] == "alice"
        assert room["mode"] == "endurance"
        assert room["timerConfig"] == {"countdownSeconds": 6, "totalSeconds": 420}

    def test_create_without_body(self, client):
        response = client.post("/rooms")
        assert response.status_code == 201
        assert response.json()["participants"][0]["handle"] == "host"

    def test_create_sandbox_rejected(self, client):
        response = client.post("/rooms", json={"mode": "sandbox"})
        assert response.status_code == 400
        assert response.json() == {
            "error": "mode_not_permitted",
            "allowedModes": ["speedrun", "endurance"],
        }

    def test_create_unknown_puzzle(self, client):
        response = client.post("/rooms", json={"puzzleId": "pz-missing"})
        assert response.status_code == 404
        assert response.json() == {"error": "puzzle_not_found", "puzzleId": "pz-missing"}

    def test_join_status_codes(self, client):
        room = create_room(client, hostHandle="alice")
        first = client.post(f"/rooms/{room['id']}/join", json={"handle": "bob"})
        repeat = client.post(f"/rooms/{room['id']}/join", json={"handle": "BOB"})
        assert first.status_code == 201
        assert repeat.status_code == 200
        assert len(repeat.json()["participants"]) == 2

    def test_join_requires_handle(self, client):
        room = create_room(client)
        response = client.post(f"/rooms/{room['id']}/join", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "handle_required"

    def test_join_unknown_room(self, client):
        response = client.post("/rooms/room_missing/join", json={"handle": "bob"})
        assert response.status_code == 404
        assert response.json() == {"error": "room_not_found", "roomId": "room_missing"}

    def test_ready_and_countdown(self, client):
        room = create_room(client, hostHandle="alice")
        host_id = room["participants"][0]["id"]

        ready = client.post(f"/rooms/{room['id']}/ready", json={"participantId": host_id})
        assert ready.status_code == 200
        assert ready.json()["status"] == "countdown"

        started = client.post(f"/rooms/{room['id']}/countdown", json={"action": "start"})
        assert started.json()["countdown"]["state"] == "running"

        reset = client.post(f"/rooms/{room['id']}/countdown", json={"action": "reset"})
        assert reset.json()["status"] == "lobby"

    def test_unknown_participant(self, client):
        room = create_room(client)
        response = client.post(f"/rooms/{room['id']}/ready", json={"participantId": "nobody"})
        assert response.status_code == 404
        assert response.json()["error"] == "participant_not_found"

    def test_invalid_countdown_action(self, client):
        room = create_room(client)
        response = client.post(f"/rooms/{room['id']}/countdown", json={"action": "pause"})
        assert response.status_code == 400
        assert response.json()["allowedActions"] == ["start", "reset"]

    def test_list_and_get(self, client):
        room = create_room(client)
        assert [r["id"] for r in client.get("/rooms").json()["rooms"]] == [room["id"]]
        assert client.get(f"/rooms/{room['id']}").json()["id"] == room["id"]
        assert client.get("/rooms/room_missing").status_code == 404


class TestPuzzleRoutes:

    def test_list(self, client):
        puzzles = client.get("/puzzles").json()["puzzles"]
        assert puzzles[0]["metadata"]["id"] == "pz-carbonyl-01"

    def test_get(self, client):
        body = client.get("/puzzles/pz-pericyclic-05").json()
        assert body["metadata"]["modeAvailability"] == ["endurance"]

    def test_get_unknown(self, client):
        assert client.get("/puzzles/pz-missing").status_code == 404


class TestMatchmakingRoutes:

    def test_enqueue_and_snapshot(self, client):
        response = client.post("/matchmaking/enqueue", json={"handle": "alice", "mode": "endurance"})
        assert response.status_code == 201
        body = response.json()
        assert body["ticket"]["status"] == "searching"
        assert body["dashboard"]["activeTicket"]["ticketId"] == body["ticket"]["ticketId"]

        snapshot = client.get("/matchmaking/snapshot").json()
        assert snapshot["queues"][1]["queueDepth"] == 1

    def test_enqueue_invalid_mode(self, client):
        response = client.post("/matchmaking/enqueue", json={"handle": "alice", "mode": "blitz"})
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_mode"

    def test_enqueue_requires_handle(self, client):
        response = client.post("/matchmaking/enqueue", json={"mode": "speedrun"})
        assert response.status_code == 400
        assert response.json()["error"] == "handle_required"

    def test_cancel(self, client):
        ticket = client.post("/matchmaking/enqueue", json={"handle": "alice"}).json()["ticket"]
        cancel_path = f"/matchmaking/tickets/{ticket['ticketId']}/cancel"
        assert client.post(cancel_path).json() == {"cancelled": True}
        again = client.post(cancel_path)
        assert again.status_code == 404
        assert again.json()["error"] == "ticket_not_found"

    def test_dashboard(self, client):
        body = client.get("/competitive/dashboard", params={"handle": "Alice"}).json()
        assert body["profile"]["handle"] == "alice"
        assert set(body) == {
            "generatedAt", "profile", "activeTicket", "activeTickets", "queues", "pendingMatches",
        }

    def test_dashboard_without_handle(self, client):
        assert client.get("/competitive/dashboard").json()["profile"] is None


class TestResultRoute:

    def test_rated_pairing_and_result(self, client, orchestrator):
        calibrate(orchestrator.profiles, "alice")
        calibrate(orchestrator.profiles, "bob")
        client.post("/matchmaking/enqueue", json={"handle": "alice", "mode": "speedrun"})
        body = client.post("/matchmaking/enqueue", json={"handle": "bob", "mode": "speedrun"}).json()
        room_id = body["dashboard"]["pendingMatches"][0]["roomId"]

        response = client.post(
            f"/competitive/matches/{room_id}/result",
            json={"winnerHandle": "alice", "loserHandle": "bob", "mode": "speedrun", "puzzleTier": "elite"},
        )

        assert response.status_code == 200
        result = response.json()
        assert result["roomId"] == room_id
        assert result["profiles"][0]["ladders"]["speedrun"]["rating"] > 1500
        assert client.get(f"/rooms/{room_id}").json()["status"] == "in_progress"

    def test_sandbox_result(self, client):
        response = client.post(
            "/competitive/matches/room_any/result",
            json={"winnerHandle": "alice", "loserHandle": "bob", "mode": "sandbox"},
        )
        assert response.status_code == 200
        for delta in response.json()["deltas"]:
            assert abs(delta["expectedDelta"]) <= 5

    def test_missing_handles(self, client):
        response = client.post("/competitive/matches/room_any/result", json={"winnerHandle": "alice"})
        assert response.status_code == 400
        assert response.json()["error"] == "winner_and_loser_required"

    def test_same_handles(self, client):
        response = client.post(
            "/competitive/matches/room_any/result",
            json={"winnerHandle": "alice", "loserHandle": "ALICE"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "distinct_handles_required"

    @pytest.mark.parametrize("body", [
        {"refereeConfidence": 2},
        {"refereeConfidence": -0.1},
        {"puzzleTier": "legendary"},
        {"timeRemainingSeconds": "soon"},
    ])
    def test_malformed_body(self, client, body):
        payload = {"winnerHandle": "alice", "loserHandle": "bob", **body}
        response = client.post("/competitive/matches/room_any/result", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_request"


class TestErrorHandling:

    def test_unexpected_error_is_500(self, orchestrator):
        broken = MagicMock(wraps=orchestrator)
        broken.list_rooms.side_effect = RuntimeError("disk on fire")
        client = TestClient(create_app(broken), raise_server_exceptions=False)

        response = client.get("/rooms")

        assert response.status_code == 500
        assert response.json() == {"error": "internal_error", "message": "Unexpected server error"}

    def test_analytics_events_filter(self, client):
        create_room(client, hostHandle="alice")
        client.post("/matchmaking/enqueue", json={"handle": "alice"})
        events = client.get("/analytics/events", params={"type": "room.created"}).json()["events"]
        assert [event["type"] for event in events] == ["room.created"]
        assert len(client.get("/analytics/events").json()["events"]) >= 1
