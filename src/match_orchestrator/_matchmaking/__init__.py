# Area: Matchmaking
"""
Matchmaking subsystem: tickets, spread caps, the pairing pass, and the
competitive dashboard.
"""

from .tickets import (
    MatchmakingTicket,
    TicketRepository,
    TicketStatus,
    spread_cap,
    ticket_summary,
)
from .queue_manager import (
    BOT_HANDICAP,
    BOT_WAIT_THRESHOLD,
    QUEUE_PRESETS,
    PendingMatchPreview,
    QueueManager,
)
from .dashboard import build_dashboard

__all__ = [
    "MatchmakingTicket",
    "TicketRepository",
    "TicketStatus",
    "spread_cap",
    "ticket_summary",
    "BOT_HANDICAP",
    "BOT_WAIT_THRESHOLD",
    "QUEUE_PRESETS",
    "PendingMatchPreview",
    "QueueManager",
    "build_dashboard",
]
