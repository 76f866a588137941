# Area: Orchestrator Tests
"""Tests for MatchOrchestrator end-to-end operations."""

import threading

import pytest

from conftest import calibrate
from match_orchestrator._shared.analytics import AnalyticsSink
from match_orchestrator._shared.modes import MatchMode
from match_orchestrator.errors import (
    DistinctHandlesRequiredError,
    HandleRequiredError,
    InvalidModeError,
    ModeNotPermittedError,
    PuzzleModeNotAvailableError,
    PuzzleNotFoundError,
    ResultHandlesRequiredError,
    RoomNotFoundError,
    TicketNotFoundError,
)
from match_orchestrator.orchestrator import MatchOrchestrator
from match_orchestrator.puzzle_catalog import BuiltinPuzzleCatalog


class TestConstruction:
    """Injected collaborators are used as given, even while empty."""

    def test_empty_analytics_sink_is_kept(self, clock):
        sink = AnalyticsSink(clock=clock, quiet=True)
        orchestrator = MatchOrchestrator(clock=clock, analytics=sink)

        room = orchestrator.create_room("alice")

        assert orchestrator.analytics is sink
        (event,) = sink.events("room.created")
        assert event["payload"]["roomId"] == room["id"]

    def test_empty_catalog_is_kept(self, clock):
        catalog = BuiltinPuzzleCatalog(entries=[])
        assert MatchOrchestrator(catalog=catalog, clock=clock).catalog is catalog

    def test_result_reaches_injected_sink(self, clock):
        sink = AnalyticsSink(clock=clock, quiet=True)
        orchestrator = MatchOrchestrator(clock=clock, analytics=sink)
        orchestrator.apply_match_result("room_x", "alice", "bob")
        assert len(sink.events("match.result_recorded")) == 1


class TestCreateRoom:
    """Tests for lobby room creation validation."""

    def test_defaults(self, orchestrator):
        room = orchestrator.create_room()
        assert room["mode"] == "speedrun"
        assert room["puzzleId"] == "pz-carbonyl-01"
        assert room["participants"][0]["handle"] == "host"
        assert room["participants"][0]["role"] == "host"
        assert room["participants"][0]["ready"] is False
        assert room["status"] == "lobby"
        assert room["countdown"] == {"state": "idle", "countdownSeconds": 5}
        assert room["timerConfig"] == {"countdownSeconds": 5, "totalSeconds": 300}
        assert room["websocketChannel"] == f"match:{room['id']}"
        assert room["puzzleMetadata"]["id"] == "pz-carbonyl-01"

    def test_timer_from_puzzle_preset(self, orchestrator):
        room = orchestrator.create_room("alice", "endurance", "pz-pericyclic-05")
        assert room["timerConfig"] == {"countdownSeconds": 8, "totalSeconds": 900}

    def test_host_user_id(self, orchestrator):
        room = orchestrator.create_room("alice", host_user_id="user-1")
        assert room["participants"][0]["id"] == "user-1"

    def test_unknown_mode_falls_back_to_speedrun(self, orchestrator):
        assert orchestrator.create_room("alice", "blitz")["mode"] == "speedrun"

    def test_sandbox_not_permitted(self, orchestrator):
        with pytest.raises(ModeNotPermittedError) as exc_info:
            orchestrator.create_room("alice", "sandbox")
        assert exc_info.value.to_dict() == {
            "error": "mode_not_permitted",
            "allowedModes": ["speedrun", "endurance"],
        }

    def test_unknown_puzzle(self, orchestrator):
        with pytest.raises(PuzzleNotFoundError):
            orchestrator.create_room("alice", "speedrun", "pz-missing")
        assert orchestrator.list_rooms() == []

    def test_puzzle_not_offered_in_mode(self, orchestrator):
        with pytest.raises(PuzzleModeNotAvailableError) as exc_info:
            orchestrator.create_room("alice", "endurance", "pz-photoredox-04")
        assert exc_info.value.details["allowedModes"] == ["speedrun"]

    def test_empty_catalog(self, clock):
        empty = MatchOrchestrator(catalog=BuiltinPuzzleCatalog(entries=[]), clock=clock)
        with pytest.raises(PuzzleNotFoundError):
            empty.create_room("alice")


class TestLobbyScenario:

    def test_ready_then_start(self, orchestrator, clock):
        room = orchestrator.create_room("alice", "speedrun")
        room, joined = orchestrator.join_room(room["id"], "bob")
        assert joined is True
        for participant in room["participants"]:
            room = orchestrator.toggle_ready(room["id"], participant["id"])
        assert room["status"] == "countdown"
        assert room["countdown"]["state"] == "pending"

        room = orchestrator.countdown(room["id"], "start")
        assert room["status"] == "in_progress"
        assert room["countdown"]["state"] == "running"
        assert room["countdown"]["expiresAt"] == "2023-11-14T22:13:25.000Z"

    def test_unready_reverts(self, orchestrator):
        room = orchestrator.create_room("alice")
        room, _ = orchestrator.join_room(room["id"], "bob")
        ids = [p["id"] for p in room["participants"]]
        for pid in ids:
            orchestrator.toggle_ready(room["id"], pid)
        room = orchestrator.toggle_ready(room["id"], ids[1])
        assert room["status"] == "lobby"
        assert room["countdown"]["state"] == "idle"

    def test_get_unknown_room(self, orchestrator):
        with pytest.raises(RoomNotFoundError):
            orchestrator.get_room("room_missing")


class TestMatchmaking:

    def test_enqueue_pairs_immediately(self, orchestrator):
        calibrate(orchestrator.profiles, "alice", 1500)
        calibrate(orchestrator.profiles, "bob", 1560)
        orchestrator.enqueue("alice", "speedrun")
        result = orchestrator.enqueue("bob", "speedrun")

        assert result["ticket"]["status"] == "matched"
        (pending,) = result["dashboard"]["pendingMatches"]
        room = orchestrator.get_room(pending["roomId"])
        assert sorted(p["handle"] for p in room["participants"]) == ["alice", "bob"]
        assert room["competitive"]["isRated"] is True

    def test_enqueue_default_mode(self, orchestrator):
        result = orchestrator.enqueue("alice")
        assert result["ticket"]["mode"] == "speedrun"

    def test_enqueue_validation(self, orchestrator):
        with pytest.raises(HandleRequiredError):
            orchestrator.enqueue(None, "blitz")
        with pytest.raises(InvalidModeError):
            orchestrator.enqueue("alice", "blitz")

    def test_cancel(self, orchestrator):
        ticket = orchestrator.enqueue("alice", "endurance")["ticket"]
        assert orchestrator.cancel_ticket(ticket["ticketId"]) == {"cancelled": True}
        with pytest.raises(TicketNotFoundError):
            orchestrator.cancel_ticket(ticket["ticketId"])

    def test_snapshot_runs_pass(self, orchestrator, clock):
        orchestrator.enqueue("alice", "sandbox")
        clock.advance(45)
        snapshot = orchestrator.snapshot()
        assert snapshot["pendingMatches"][0]["botFilled"] is True
        assert snapshot["queues"][2]["queueDepth"] == 0

    def test_run_matchmaking_returns_room_ids(self, orchestrator):
        calibrate(orchestrator.profiles, "alice")
        calibrate(orchestrator.profiles, "bob")
        orchestrator.queues.enqueue("alice", MatchMode.SPEEDRUN)
        orchestrator.queues.enqueue("bob", MatchMode.SPEEDRUN)
        (room_id,) = orchestrator.run_matchmaking()
        assert room_id.startswith("rated_")

    def test_concurrent_enqueues_never_double_claim(self, orchestrator):
        """Every ticket ends up in at most one room."""
        for index in range(40):
            calibrate(orchestrator.profiles, f"p{index}", 1500)

        def worker(start):
            for index in range(start, 40, 4):
                orchestrator.enqueue(f"p{index}", "speedrun")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        handles = [
            p["handle"]
            for room in orchestrator.list_rooms()
            for p in room["participants"]
        ]
        assert len(handles) == len(set(handles)) == 40


class TestApplyMatchResult:

    def test_result_on_matched_room(self, orchestrator, analytics, clock):
        calibrate(orchestrator.profiles, "alice")
        calibrate(orchestrator.profiles, "bob")
        orchestrator.enqueue("alice", "speedrun")
        pending = orchestrator.enqueue("bob", "speedrun")["dashboard"]["pendingMatches"][0]
        room_id = pending["roomId"]

        result = orchestrator.apply_match_result(
            room_id, "Alice", "Bob", mode="speedrun", time_remaining_seconds=120
        )

        assert result["roomId"] == room_id
        assert result["mode"] == "speedrun"
        assert [d["handle"] for d in result["deltas"]] == ["alice", "bob"]
        assert result["deltas"][0]["expectedDelta"] > 0 > result["deltas"][1]["expectedDelta"]
        assert [p["handle"] for p in result["profiles"]] == ["alice", "bob"]

        room = orchestrator.get_room(room_id)
        assert room["status"] == "in_progress"
        assert room["countdown"]["state"] == "running"
        assert room["competitive"]["expectedDeltas"] == result["deltas"]
        snapshot = orchestrator.snapshot()
        assert snapshot["pendingMatches"][0]["expectedDeltas"] == result["deltas"]

        (event,) = analytics.events("match.result_recorded")
        assert event["payload"] == {
            "roomId": room_id,
            "puzzleId": "pz_speed_alpha",
            "winnerHandle": "alice",
            "durationSeconds": 180,
        }

    def test_sandbox_result_scenario(self, orchestrator):
        result = orchestrator.apply_match_result("room_any", "alice", "bob", mode="sandbox")
        for delta in result["deltas"]:
            assert -5 <= delta["expectedDelta"] <= 5
        for profile in result["profiles"]:
            assert profile["ladders"]["sandbox"]["matchesPlayed"] == 1

    def test_unknown_room_still_rates(self, orchestrator, analytics):
        orchestrator.apply_match_result("room_missing", "alice", "bob", puzzle_id="pz-x")
        assert orchestrator.profiles.get("alice").ladder(MatchMode.SPEEDRUN).matches_played == 1
        (event,) = analytics.events("match.result_recorded")
        assert event["payload"]["puzzleId"] == "pz-x"
        assert event["payload"]["durationSeconds"] == 0

    def test_explicit_duration(self, orchestrator, analytics):
        room = orchestrator.create_room("alice")
        orchestrator.apply_match_result(room["id"], "alice", "bob", duration_seconds=42)
        assert analytics.events("match.result_recorded")[0]["payload"]["durationSeconds"] == 42

    @pytest.mark.parametrize("winner, loser", [(None, "bob"), ("alice", ""), ("  ", "bob")])
    def test_handles_required(self, orchestrator, winner, loser):
        with pytest.raises(ResultHandlesRequiredError):
            orchestrator.apply_match_result("room_x", winner, loser)

    def test_distinct_handles(self, orchestrator):
        with pytest.raises(DistinctHandlesRequiredError):
            orchestrator.apply_match_result("room_x", "Alice", "alice ")
        assert orchestrator.profiles.all() == []

    def test_invalid_mode(self, orchestrator):
        with pytest.raises(InvalidModeError):
            orchestrator.apply_match_result("room_x", "alice", "bob", mode="blitz")
        assert orchestrator.profiles.all() == []


class TestCatalogAndAnalytics:

    def test_list_puzzles(self, orchestrator):
        puzzles = orchestrator.list_puzzles()
        assert puzzles[0]["metadata"]["id"] == "pz-carbonyl-01"
        assert puzzles[0]["timerPreset"] == {"countdownSeconds": 5, "totalSeconds": 300}

    def test_get_puzzle_unknown(self, orchestrator):
        with pytest.raises(PuzzleNotFoundError):
            orchestrator.get_puzzle("pz-missing")

    def test_analytics_events(self, orchestrator):
        orchestrator.create_room("alice")
        assert [e["type"] for e in orchestrator.analytics_events()] == ["room.created"]
