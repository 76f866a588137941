# Area: Matchmaking
"""
match_orchestrator._matchmaking.dashboard — Competitive dashboard
=================================================================

Read-only composition of a player's profile, their searching tickets,
per-mode queue snapshots, and recent pairings. Building a dashboard
runs a pairing pass first so that polling clients drive matchmaking.
"""

from typing import Any, Dict, Optional

from .._ladder.profiles import ProfileStore, profile_payload
from .._shared.clock import to_iso
from .queue_manager import QueueManager


def build_dashboard(
    queues: QueueManager,
    profiles: ProfileStore,
    now: float,
    handle: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the dashboard payload.

    Args:
        queues: Queue manager (a full pairing pass runs on it)
        profiles: Profile store (the handle's profile is created if missing)
        now: Epoch seconds stamped as generatedAt
        handle: Optional player handle; blank handles are ignored

    Returns:
        Dict with generatedAt, profile, activeTicket, activeTickets,
        queues, and pendingMatches
    """
    queues.run_pass()

    profile = None
    active_tickets = []
    if handle and handle.strip():
        profile = profile_payload(profiles.get_or_create(handle))
        active_tickets = [queues.summarize(ticket) for ticket in queues.active_tickets(handle)]

    return {
        "generatedAt": to_iso(now),
        "profile": profile,
        "activeTicket": active_tickets[0] if active_tickets else None,
        "activeTickets": active_tickets,
        "queues": queues.queue_snapshots(),
        "pendingMatches": queues.pending_matches(),
    }
