# Area: Matchmaking
"""
match_orchestrator._matchmaking.tickets — Matchmaking tickets
=============================================================

Ticket records, the wait-time spread-cap policy, and the ticket
repository with its per-handle index of searching tickets.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .._shared.clock import round_half_up, to_iso
from .._shared.modes import MatchMode
from .._shared.store import BaseRepository, KeyValueStore


class TicketStatus(Enum):
    SEARCHING = "searching"
    MATCHED = "matched"
    EXPIRED = "expired"


@dataclass
class MatchmakingTicket:
    """A standing request to be paired in one mode's queue."""
    ticket_id: str
    handle: str
    mode: MatchMode
    rating: int
    deviation: float
    joined_at: float
    status: TicketStatus = TicketStatus.SEARCHING
    party_handles: List[str] = field(default_factory=list)
    is_bot: bool = False
    matched_at: Optional[float] = None

    @property
    def searching(self) -> bool:
        return self.status is TicketStatus.SEARCHING

    def wait_seconds(self, now: float) -> int:
        return int(round_half_up(now - self.joined_at))


# ══════════════════════════════════════════════════════════════
# SPREAD CAP POLICY
# ══════════════════════════════════════════════════════════════

SANDBOX_SPREAD = 400
BASE_SPREAD = 120

# (minimum wait seconds, spread) from widest to narrowest
SPREAD_STEPS: List[Tuple[int, int]] = [
    (90, 360),
    (60, 280),
    (30, 200),
]


def spread_cap(mode: MatchMode, wait_seconds: int) -> int:
    """
    Largest rating gap a ticket tolerates after waiting wait_seconds.

    Sandbox is flat; rated modes widen in steps and stop at 360.
    """
    if mode is MatchMode.SANDBOX:
        return SANDBOX_SPREAD
    for threshold, spread in SPREAD_STEPS:
        if wait_seconds >= threshold:
            return spread
    return BASE_SPREAD


def ticket_spread_cap(ticket: MatchmakingTicket, now: float) -> int:
    return spread_cap(ticket.mode, ticket.wait_seconds(now))


def ticket_summary(ticket: MatchmakingTicket, now: float) -> Dict[str, Any]:
    wait = ticket.wait_seconds(now)
    summary: Dict[str, Any] = {
        "ticketId": ticket.ticket_id,
        "handle": ticket.handle,
        "mode": ticket.mode.value,
        "rating": round_half_up(ticket.rating),
        "deviation": round_half_up(ticket.deviation),
        "joinedAt": to_iso(ticket.joined_at),
        "waitSeconds": wait,
        "spreadCap": spread_cap(ticket.mode, wait),
        "status": ticket.status.value,
        "isBot": ticket.is_bot,
    }
    if ticket.party_handles:
        summary["partyHandles"] = list(ticket.party_handles)
    return summary


class TicketRepository(BaseRepository[MatchmakingTicket]):
    """
    Repository for tickets by id.

    Also keeps an index of the searching ticket for each real
    (handle, mode) pair; bot tickets are never indexed.
    """

    def __init__(self, store: Optional[KeyValueStore[MatchmakingTicket]] = None):
        super().__init__(store)
        self._by_handle: Dict[Tuple[str, MatchMode], str] = {}

    def get(self, ticket_id: str) -> Optional[MatchmakingTicket]:
        return self._get(ticket_id)

    def add(self, ticket: MatchmakingTicket) -> None:
        self._put(ticket.ticket_id, ticket)
        if not ticket.is_bot:
            self._by_handle[(ticket.handle, ticket.mode)] = ticket.ticket_id

    def remove(self, ticket_id: str) -> None:
        ticket = self._get(ticket_id)
        if ticket is not None:
            self.release_handle(ticket)
            self._delete(ticket_id)

    def release_handle(self, ticket: MatchmakingTicket) -> None:
        """Drop the handle index entry if it still points at this ticket."""
        key = (ticket.handle, ticket.mode)
        if self._by_handle.get(key) == ticket.ticket_id:
            del self._by_handle[key]

    def searching_for(self, handle: str, mode: MatchMode) -> Optional[MatchmakingTicket]:
        ticket_id = self._by_handle.get((handle, mode))
        if ticket_id is None:
            return None
        ticket = self._get(ticket_id)
        if ticket is None or not ticket.searching:
            return None
        return ticket
