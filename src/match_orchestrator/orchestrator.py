# Area: Orchestrator
"""
match_orchestrator.orchestrator — Match orchestrator
====================================================

Single owner of all mutable lobby state: the room registry, the
matchmaking queues and ticket index, and the profile store.

Every public method runs under one re-entrant lock, including the full
pairing pass and the room creation it performs, so a pass can never
interleave with an enqueue, a cancel, or another pass. Methods return
JSON-ready payloads rendered while the lock is still held.
"""

from __future__ import annotations

import logging
import random
import threading
from typing import Any, Dict, List, Optional, Tuple

from ._ladder.profiles import ProfileStore, normalize_handle, profile_payload
from ._ladder.rating import MatchContext
from ._ladder.records import Profile
from ._matchmaking.dashboard import build_dashboard
from ._matchmaking.queue_manager import QueueManager
from ._matchmaking.tickets import MatchmakingTicket, TicketRepository
from ._rooms.enums import ParticipantRole
from ._rooms.models import Room, build_participant
from ._rooms.registry import RoomRegistry
from ._shared.analytics import AnalyticsSink
from ._shared.clock import Clock, system_clock, to_iso
from ._shared.modes import LOBBY_MODES, MatchMode, parse_mode
from ._shared.store import KeyValueStore
from .errors import (
    DistinctHandlesRequiredError,
    HandleRequiredError,
    InvalidModeError,
    ModeNotPermittedError,
    PuzzleModeNotAvailableError,
    PuzzleNotFoundError,
    ResultHandlesRequiredError,
    TicketNotFoundError,
)
from .puzzle_catalog import BuiltinPuzzleCatalog, PuzzleLookup

logger = logging.getLogger("match_orchestrator.orchestrator")

DEFAULT_HOST_HANDLE = "host"


def _lobby_mode(value: Any) -> MatchMode:
    """Lobby creation treats a missing or unknown mode as speedrun."""
    try:
        return parse_mode(value)
    except InvalidModeError:
        return MatchMode.SPEEDRUN


class MatchOrchestrator:
    """
    Serialized entry point for every lobby, matchmaking, and ladder operation.

    Args:
        catalog: Puzzle lookup used to validate rooms (built-in catalog by default)
        clock: Epoch-seconds source shared by every component
        rng: Random source for hidden ratings and bot handles
        analytics: Event sink (a fresh sink by default)
        room_store / profile_store / ticket_store: Optional backing stores
    """

    def __init__(
        self,
        catalog: Optional[PuzzleLookup] = None,
        clock: Clock = system_clock,
        rng: Optional[random.Random] = None,
        analytics: Optional[AnalyticsSink] = None,
        room_store: Optional[KeyValueStore[Room]] = None,
        profile_store: Optional[KeyValueStore[Profile]] = None,
        ticket_store: Optional[KeyValueStore[MatchmakingTicket]] = None,
    ):
        self._lock = threading.RLock()
        self._clock = clock
        rng = rng or random.Random()
        self.catalog = catalog if catalog is not None else BuiltinPuzzleCatalog()
        self.analytics = analytics if analytics is not None else AnalyticsSink(clock=clock)
        self.profiles = ProfileStore(profile_store, clock=clock, rng=rng)
        self.rooms = RoomRegistry(room_store, clock=clock, analytics=self.analytics)
        self.queues = QueueManager(
            self.profiles,
            self.rooms,
            catalog=self.catalog,
            tickets=TicketRepository(ticket_store),
            clock=clock,
            rng=rng,
        )

    # ══════════════════════════════════════════════════════════
    # ROOMS
    # ══════════════════════════════════════════════════════════

    def create_room(
        self,
        host_handle: Optional[str] = None,
        mode: Optional[str] = None,
        puzzle_id: Optional[str] = None,
        host_user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a lobby room with a single host.

        Raises:
            ModeNotPermittedError: If the mode is not a lobby mode
            PuzzleNotFoundError: If the puzzle id is unknown
            PuzzleModeNotAvailableError: If the puzzle is not offered in the mode
        """
        with self._lock:
            requested_mode = _lobby_mode(mode)
            if requested_mode not in LOBBY_MODES:
                raise ModeNotPermittedError(
                    requested_mode.value, [lobby.value for lobby in LOBBY_MODES]
                )

            if puzzle_id and puzzle_id.strip():
                requested_puzzle = puzzle_id.strip()
            else:
                entries = self.catalog.list()
                if not entries:
                    raise PuzzleNotFoundError("")
                requested_puzzle = entries[0].id
            entry = self.catalog.get(requested_puzzle)
            if entry is None:
                raise PuzzleNotFoundError(requested_puzzle)
            if not entry.offers(requested_mode):
                raise PuzzleModeNotAvailableError(
                    entry.id, [offered.value for offered in entry.metadata.mode_availability]
                )

            handle = host_handle.strip() if host_handle and host_handle.strip() else DEFAULT_HOST_HANDLE
            room = self.rooms.create_room(
                puzzle_id=entry.id,
                mode=requested_mode,
                countdown_seconds=entry.timer_preset.countdown_seconds,
                total_seconds=entry.timer_preset.total_seconds,
                participants=[build_participant(handle, ParticipantRole.HOST, host_user_id)],
                puzzle_metadata=entry.metadata,
            )
            return room.to_payload()

    def join_room(
        self,
        room_id: str,
        handle: Optional[str],
        role: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Tuple[Dict[str, Any], bool]:
        """Join a room. Returns (room payload, joined) where joined is False on a repeat."""
        with self._lock:
            room, joined = self.rooms.join(room_id, handle, role=role, user_id=user_id)
            return room.to_payload(), joined

    def toggle_ready(
        self,
        room_id: str,
        participant_id: Optional[str] = None,
        ready: Optional[bool] = None,
    ) -> Dict[str, Any]:
        with self._lock:
            return self.rooms.toggle_ready(room_id, participant_id, ready).to_payload()

    def countdown(self, room_id: str, action: Optional[str] = None) -> Dict[str, Any]:
        with self._lock:
            return self.rooms.countdown(room_id, action).to_payload()

    def get_room(self, room_id: str) -> Dict[str, Any]:
        with self._lock:
            return self.rooms.get(room_id).to_payload()

    def list_rooms(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [room.to_payload() for room in self.rooms.list()]

    # ══════════════════════════════════════════════════════════
    # MATCHMAKING
    # ══════════════════════════════════════════════════════════

    def enqueue(
        self,
        handle: Optional[str],
        mode: Optional[str] = None,
        party_handles: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """
        Enqueue a player and immediately run a pairing pass.

        Returns:
            {"ticket": summary, "dashboard": dashboard for the handle}
        """
        with self._lock:
            if not handle or not handle.strip():
                raise HandleRequiredError("A handle is required to enqueue")
            parsed_mode = parse_mode(mode)
            ticket = self.queues.enqueue(handle, parsed_mode, party_handles)
            self.queues.run_pass()
            return {
                "ticket": self.queues.summarize(ticket),
                "dashboard": build_dashboard(self.queues, self.profiles, self._clock(), handle),
            }

    def cancel_ticket(self, ticket_id: str) -> Dict[str, Any]:
        """
        Raises:
            TicketNotFoundError: If the ticket is unknown or no longer searching
        """
        with self._lock:
            if not self.queues.cancel(ticket_id):
                raise TicketNotFoundError(ticket_id)
            return {"cancelled": True}

    def run_matchmaking(self) -> List[str]:
        """Run one pairing pass over every mode. Returns the ids of rooms opened."""
        with self._lock:
            return [room.id for room in self.queues.run_pass()]

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            self.queues.run_pass()
            return {
                "generatedAt": to_iso(self._clock()),
                "queues": self.queues.queue_snapshots(),
                "pendingMatches": self.queues.pending_matches(),
            }

    def dashboard(self, handle: Optional[str] = None) -> Dict[str, Any]:
        with self._lock:
            return build_dashboard(self.queues, self.profiles, self._clock(), handle)

    # ══════════════════════════════════════════════════════════
    # RESULTS
    # ══════════════════════════════════════════════════════════

    def apply_match_result(
        self,
        room_id: str,
        winner_handle: Optional[str],
        loser_handle: Optional[str],
        mode: Optional[str] = None,
        puzzle_tier: Optional[str] = None,
        referee_confidence: Optional[float] = None,
        time_remaining_seconds: Optional[float] = None,
        duration_seconds: Optional[float] = None,
        puzzle_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Apply a decided match to both ladders and patch the room.

        Ratings are updated even when room_id is unknown; only the room
        and pending-match patches are skipped then.

        Raises:
            ResultHandlesRequiredError: If either handle is missing
            DistinctHandlesRequiredError: If both handles name the same player
            InvalidModeError: If mode is not a known mode
        """
        with self._lock:
            if not winner_handle or not winner_handle.strip() or not loser_handle or not loser_handle.strip():
                raise ResultHandlesRequiredError("Both winnerHandle and loserHandle are required")
            winner = normalize_handle(winner_handle)
            loser = normalize_handle(loser_handle)
            if winner == loser:
                raise DistinctHandlesRequiredError("Winner and loser must be different players")
            parsed_mode = parse_mode(mode)

            context = MatchContext(
                mode=parsed_mode,
                puzzle_tier=puzzle_tier,
                referee_confidence=referee_confidence,
                time_remaining_seconds=time_remaining_seconds,
            )
            deltas = list(self.profiles.record_result(winner, loser, context))

            room = self.rooms.find(room_id)
            if room is None:
                logger.warning(f"Result for unknown room {room_id}; ladders updated, room patch skipped")
            self.rooms.apply_match_result(room_id, deltas)
            self.queues.record_result(room_id, deltas)

            if duration_seconds is not None:
                duration = duration_seconds
            elif room is not None:
                duration = max(0, room.total_seconds - (time_remaining_seconds or 0))
            else:
                duration = 0
            self.analytics.record_match_result(
                room_id,
                room.puzzle_id if room is not None else (puzzle_id or "unknown"),
                winner,
                duration,
            )

            return {
                "roomId": room_id,
                "mode": parsed_mode.value,
                "appliedAt": to_iso(self._clock()),
                "deltas": [delta.to_payload() for delta in deltas],
                "profiles": [
                    profile_payload(self.profiles.get_or_create(handle))
                    for handle in (winner, loser)
                ],
            }

    # ══════════════════════════════════════════════════════════
    # CATALOG AND ANALYTICS
    # ══════════════════════════════════════════════════════════

    def list_puzzles(self) -> List[Dict[str, Any]]:
        return [entry.to_payload() for entry in self.catalog.list()]

    def get_puzzle(self, puzzle_id: str) -> Dict[str, Any]:
        entry = self.catalog.get(puzzle_id)
        if entry is None:
            raise PuzzleNotFoundError(puzzle_id)
        return entry.to_payload()

    def analytics_events(self, event_type: Optional[str] = None) -> List[Dict[str, Any]]:
        with self._lock:
            return self.analytics.events(event_type)
