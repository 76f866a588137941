# Area: Matchmaking
"""
match_orchestrator._matchmaking.queue_manager — Matchmaking queues
==================================================================

Per-mode queues of searching tickets and the pairing pass that turns
compatible pairs into competitive rooms.

A pass over one mode:
  1. Back-fill a bot when the queue has stalled for 45s with no bot in it
  2. Sort searching tickets by ascending rating
  3. Greedy nearest-neighbor sweep: each unclaimed ticket pairs with the
     first later unclaimed ticket inside both tickets' spread caps
  4. Open a room per pair (rated unless sandbox)
  5. Drop every non-searching ticket from the live queue

The manager does no locking of its own; callers serialize access
(see MatchOrchestrator).
"""

from __future__ import annotations

import logging
import random
import uuid
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Any, Deque, Dict, List, Optional

from .._ladder.profiles import ProfileStore, normalize_handle
from .._ladder.rating import RatingDeltaPreview, build_rating_preview
from .._shared.clock import Clock, round_half_up, system_clock, to_iso
from .._shared.modes import MATCHMAKING_MODES, MatchMode
from .._rooms.enums import ParticipantRole
from .._rooms.models import CompetitiveContext, Room, build_participant
from .._rooms.registry import RoomRegistry
from ..errors import HandleRequiredError
from ..puzzle_catalog import PuzzleLookup
from .tickets import (
    MatchmakingTicket,
    TicketRepository,
    TicketStatus,
    ticket_spread_cap,
    ticket_summary,
)

logger = logging.getLogger("match_orchestrator.matchmaking")

MATCH_HISTORY_LIMIT = 12
SNAPSHOT_TICKET_LIMIT = 6

BOT_HANDLES = ["chem-bot-flux", "chem-bot-helix", "chem-bot-sol", "chem-bot-vial"]
BOT_WAIT_THRESHOLD = 45
BOT_HANDICAP = 60
BOT_DEVIATION = 65


@dataclass(frozen=True)
class QueuePreset:
    puzzle_id: str
    countdown_seconds: int
    total_seconds: int


QUEUE_PRESETS: Dict[MatchMode, QueuePreset] = {
    MatchMode.SPEEDRUN: QueuePreset("pz_speed_alpha", 5, 300),
    MatchMode.ENDURANCE: QueuePreset("pz_endurance_prime", 8, 900),
    MatchMode.SANDBOX: QueuePreset("pz_sandbox_queue", 5, 300),
}


@dataclass(frozen=True)
class PendingMatchPreview:
    room_id: str
    mode: MatchMode
    handles: List[str]
    rating_spread: int
    created_at: float
    expected_deltas: List[RatingDeltaPreview] = field(default_factory=list)
    bot_filled: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "roomId": self.room_id,
            "mode": self.mode.value,
            "handles": list(self.handles),
            "ratingSpread": self.rating_spread,
            "createdAt": to_iso(self.created_at),
            "expectedDeltas": [delta.to_payload() for delta in self.expected_deltas],
            "botFilled": self.bot_filled,
        }


class QueueManager:
    """
    Owns the per-mode queues, the ticket index, and recent pairings.

    Rooms are opened through the RoomRegistry; ticket ratings come from
    the ProfileStore.
    """

    def __init__(
        self,
        profiles: ProfileStore,
        rooms: RoomRegistry,
        catalog: Optional[PuzzleLookup] = None,
        tickets: Optional[TicketRepository] = None,
        clock: Clock = system_clock,
        rng: Optional[random.Random] = None,
        history_limit: int = MATCH_HISTORY_LIMIT,
    ):
        self._profiles = profiles
        self._rooms = rooms
        self._catalog = catalog
        self.tickets = tickets if tickets is not None else TicketRepository()
        self._clock = clock
        self._rng = rng or random.Random()
        self._queues: Dict[MatchMode, List[MatchmakingTicket]] = {
            mode: [] for mode in MATCHMAKING_MODES
        }
        self._recent: Deque[PendingMatchPreview] = deque(maxlen=history_limit)

    # ── Tickets ──────────────────────────────────────────────

    def _new_ticket_id(self) -> str:
        return f"ticket_{uuid.uuid4().hex[:16]}"

    def enqueue(
        self,
        handle: Optional[str],
        mode: MatchMode,
        party_handles: Optional[List[str]] = None,
    ) -> MatchmakingTicket:
        """
        Put a player in a mode's queue.

        Re-enqueueing a handle that already has a searching ticket in
        this mode returns that ticket unchanged.

        Raises:
            HandleRequiredError: If handle is missing or blank
        """
        if not handle or not handle.strip():
            raise HandleRequiredError("A handle is required to enqueue")
        key = normalize_handle(handle)
        existing = self.tickets.searching_for(key, mode)
        if existing is not None:
            return existing

        rating, deviation = self._profiles.matchmaking_snapshot(key, mode)
        ticket = MatchmakingTicket(
            ticket_id=self._new_ticket_id(),
            handle=key,
            mode=mode,
            rating=rating,
            deviation=deviation,
            joined_at=self._clock(),
            party_handles=list(party_handles or []),
        )
        self._queues[mode].append(ticket)
        self.tickets.add(ticket)
        logger.info(
            f"Enqueued {key} on {mode.value} at {rating} ({ticket.ticket_id})",
            extra={"ticket_id": ticket.ticket_id},
        )
        return ticket

    def cancel(self, ticket_id: str) -> bool:
        """
        Cancel a searching ticket.

        Returns:
            True if cancelled; False if unknown or no longer searching
        """
        ticket = self.tickets.get(ticket_id)
        if ticket is None or not ticket.searching:
            return False
        ticket.status = TicketStatus.EXPIRED
        self._queues[ticket.mode] = [
            entry for entry in self._queues[ticket.mode] if entry.ticket_id != ticket_id
        ]
        self.tickets.remove(ticket_id)
        logger.info(
            f"Cancelled {ticket_id} ({ticket.handle}, {ticket.mode.value})",
            extra={"ticket_id": ticket_id},
        )
        return True

    def searching(self, mode: MatchMode) -> List[MatchmakingTicket]:
        return [ticket for ticket in self._queues[mode] if ticket.searching]

    def active_tickets(self, handle: str) -> List[MatchmakingTicket]:
        """Searching tickets for a handle across all modes."""
        key = normalize_handle(handle)
        found = []
        for mode in MATCHMAKING_MODES:
            ticket = self.tickets.searching_for(key, mode)
            if ticket is not None:
                found.append(ticket)
        return found

    # ── Bot back-fill ────────────────────────────────────────

    def ensure_bot(self, mode: MatchMode) -> Optional[MatchmakingTicket]:
        """
        Inject one bot ticket into a stalled queue.

        A queue has stalled when it is non-empty, holds no bot, and its
        longest-waiting ticket has waited at least BOT_WAIT_THRESHOLD
        seconds. The bot sits BOT_HANDICAP points under the queue average.
        """
        queue = self.searching(mode)
        if not queue:
            return None
        now = self._clock()
        if any(ticket.is_bot for ticket in queue):
            return None
        longest_wait = max(now - ticket.joined_at for ticket in queue)
        if longest_wait < BOT_WAIT_THRESHOLD:
            return None

        average = sum(ticket.rating for ticket in queue) / len(queue)
        handle = f"{self._rng.choice(BOT_HANDLES)}-{mode.value}-{self._rng.randrange(1000)}"
        bot = MatchmakingTicket(
            ticket_id=self._new_ticket_id(),
            handle=handle,
            mode=mode,
            rating=round_half_up(average - BOT_HANDICAP),
            deviation=BOT_DEVIATION,
            joined_at=now,
            is_bot=True,
        )
        self._queues[mode].append(bot)
        self.tickets.add(bot)
        logger.info(
            f"Bot {handle} back-filled {mode.value} at {bot.rating} "
            f"(longest wait {longest_wait:.0f}s)"
        )
        return bot

    # ── Pairing pass ─────────────────────────────────────────

    def process_mode(self, mode: MatchMode) -> List[Room]:
        """Run one pairing pass over a mode's queue. Returns rooms opened."""
        self.ensure_bot(mode)
        queue = sorted(self.searching(mode), key=lambda ticket: ticket.rating)
        now = self._clock()
        claimed = set()
        opened: List[Room] = []

        for i, ticket in enumerate(queue):
            if ticket.ticket_id in claimed:
                continue
            spread_a = ticket_spread_cap(ticket, now)
            for candidate in queue[i + 1:]:
                if candidate.ticket_id in claimed:
                    continue
                allowed = min(spread_a, ticket_spread_cap(candidate, now))
                gap = abs(ticket.rating - candidate.rating)
                if gap > allowed:
                    continue
                claimed.update((ticket.ticket_id, candidate.ticket_id))
                for matched in (ticket, candidate):
                    matched.status = TicketStatus.MATCHED
                    matched.matched_at = now
                    self.tickets.remove(matched.ticket_id)
                opened.append(self._open_room(mode, ticket, candidate, gap, allowed))
                break

        self._queues[mode] = [entry for entry in self._queues[mode] if entry.searching]
        return opened

    def run_pass(self) -> List[Room]:
        """Run a pairing pass over every mode."""
        opened: List[Room] = []
        for mode in MATCHMAKING_MODES:
            opened.extend(self.process_mode(mode))
        return opened

    def _open_room(
        self,
        mode: MatchMode,
        low: MatchmakingTicket,
        high: MatchmakingTicket,
        rating_spread: int,
        allowed_spread: int,
    ) -> Room:
        preset = QUEUE_PRESETS[mode]
        entry = self._catalog.get(preset.puzzle_id) if self._catalog is not None else None
        expected = build_rating_preview(
            low.handle, low.rating, low.deviation,
            high.handle, high.rating, high.deviation,
            mode,
        )
        competitive = CompetitiveContext(
            is_rated=mode is not MatchMode.SANDBOX,
            expected_deltas=expected,
            queue_ticket_ids=[low.ticket_id, high.ticket_id],
            rating_spread=rating_spread,
            allowed_spread=allowed_spread,
            bot_filled=low.is_bot or high.is_bot,
        )
        room = self._rooms.create_room(
            puzzle_id=preset.puzzle_id,
            mode=mode,
            countdown_seconds=preset.countdown_seconds,
            total_seconds=preset.total_seconds,
            participants=[
                build_participant(low.handle, ParticipantRole.HOST),
                build_participant(high.handle, ParticipantRole.CHALLENGER),
            ],
            puzzle_metadata=entry.metadata if entry is not None else None,
            competitive=competitive,
            id_prefix="rated",
        )
        self._recent.appendleft(PendingMatchPreview(
            room_id=room.id,
            mode=mode,
            handles=[participant.handle for participant in room.participants],
            rating_spread=rating_spread,
            created_at=room.created_at,
            expected_deltas=expected,
            bot_filled=competitive.bot_filled,
        ))
        logger.info(
            f"Paired {low.handle} ({low.rating}) with {high.handle} ({high.rating}) "
            f"on {mode.value} → {room.id}",
            extra={"room_id": room.id},
        )
        return room

    # ── Results and reads ────────────────────────────────────

    def record_result(self, room_id: str, deltas: List[RatingDeltaPreview]) -> None:
        """Patch a finished room's pairing preview with the applied deltas."""
        for index, preview in enumerate(self._recent):
            if preview.room_id == room_id:
                self._recent[index] = replace(preview, expected_deltas=list(deltas))
                break

    def pending_matches(self, limit: int = MATCH_HISTORY_LIMIT) -> List[Dict[str, Any]]:
        """Most recent pairings, newest first."""
        return [preview.to_payload() for preview in list(self._recent)[:limit]]

    def queue_snapshots(self) -> List[Dict[str, Any]]:
        now = self._clock()
        snapshots = []
        for mode in MATCHMAKING_MODES:
            queue = self.searching(mode)
            depth = len(queue)
            soonest = sorted(queue, key=lambda ticket: ticket.joined_at)[:SNAPSHOT_TICKET_LIMIT]
            snapshots.append({
                "mode": mode.value,
                "queueDepth": depth,
                "averageRating": (
                    round_half_up(sum(ticket.rating for ticket in queue) / depth) if depth else 0
                ),
                "longestWaitSeconds": (
                    max(ticket.wait_seconds(now) for ticket in queue) if depth else 0
                ),
                "tickets": [ticket_summary(ticket, now) for ticket in soonest],
            })
        return snapshots

    def summarize(self, ticket: MatchmakingTicket) -> Dict[str, Any]:
        return ticket_summary(ticket, self._clock())

