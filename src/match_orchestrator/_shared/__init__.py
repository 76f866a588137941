# Area: Shared
"""
Shared utilities used by rooms, matchmaking, and ladders.

This package contains:
- Logging configuration
- Store abstraction and base repository
- Clock helpers
- Analytics event sink
- Match modes
"""

from .logging_config import (
    setup_logging,
    resolve_level,
    log_domain_error,
    log_unexpected_error,
)
from .store import KeyValueStore, InMemoryStore, BaseRepository
from .clock import Clock, system_clock, to_iso, round_half_up, elapsed_seconds
from .analytics import AnalyticsSink
from .modes import MatchMode, MATCHMAKING_MODES, LOBBY_MODES, parse_mode

__all__ = [
    "setup_logging",
    "resolve_level",
    "log_domain_error",
    "log_unexpected_error",
    "KeyValueStore",
    "InMemoryStore",
    "BaseRepository",
    "Clock",
    "system_clock",
    "to_iso",
    "round_half_up",
    "elapsed_seconds",
    "AnalyticsSink",
    "MatchMode",
    "MATCHMAKING_MODES",
    "LOBBY_MODES",
    "parse_mode",
]
