"""
match_orchestrator — Puzzle lobby match orchestrator
====================================================

Room lifecycle, skill-based matchmaking with widening rating spreads
and bot back-fill, and per-mode competitive ladders.

Quick Start:
    from match_orchestrator import ServiceRunner
    ServiceRunner(config={"port": 4004}).run()

Embedding:
    from match_orchestrator import MatchOrchestrator, create_app
    orchestrator = MatchOrchestrator()
    app = create_app(orchestrator)      # FastAPI app

Direct use:
    orchestrator = MatchOrchestrator()
    room = orchestrator.create_room(host_handle="alice")
    orchestrator.join_room(room["id"], "bob")
    orchestrator.enqueue("carol", "speedrun")
    orchestrator.dashboard("carol")
"""

from .orchestrator import MatchOrchestrator
from .http_app import create_app
from .runner import ServiceRunner
from .puzzle_catalog import BuiltinPuzzleCatalog, PuzzleEntry, PuzzleLookup, PuzzleMetadata, TimerPreset
from ._shared.modes import MatchMode
from ._shared.analytics import AnalyticsSink
from .errors import (
    MatchOrchestratorError,
    ConfigError,
    NotFoundError,
    DomainValidationError,
    RoomNotFoundError,
    TicketNotFoundError,
    PuzzleNotFoundError,
    ParticipantNotFoundError,
)

__version__ = "1.0.0"

__all__ = [
    "MatchOrchestrator",
    "create_app",
    "ServiceRunner",
    "BuiltinPuzzleCatalog",
    "PuzzleEntry",
    "PuzzleLookup",
    "PuzzleMetadata",
    "TimerPreset",
    "MatchMode",
    "AnalyticsSink",
    "MatchOrchestratorError",
    "ConfigError",
    "NotFoundError",
    "DomainValidationError",
    "RoomNotFoundError",
    "TicketNotFoundError",
    "PuzzleNotFoundError",
    "ParticipantNotFoundError",
    "__version__",
]
