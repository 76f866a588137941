"""
match_orchestrator.errors — Custom exception classes
=====================================================

Defines the exception hierarchy for domain failures.
Each exception carries a machine-readable code, the HTTP status it
maps to, and a details dict that is echoed back to the caller.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional


class MatchOrchestratorError(Exception):
    """Base exception for all match orchestrator errors."""

    code = "orchestrator_error"
    http_status = 500

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.details: Dict[str, Any] = details
        super().__init__(message or self.code)

    def to_dict(self) -> Dict[str, Any]:
        """Render the error as a JSON-ready body."""
        return {"error": self.code, **self.details}


class ConfigError(ValueError):
    """Raised when service configuration is invalid."""
    pass


# ── Not found (404) ──────────────────────────────────────────


class NotFoundError(MatchOrchestratorError):
    """An addressed room, ticket, puzzle, or participant does not exist."""

    code = "not_found"
    http_status = 404


class RoomNotFoundError(NotFoundError):
    code = "room_not_found"

    def __init__(self, room_id: str):
        self.room_id = room_id
        super().__init__(f"Room '{room_id}' not found", roomId=room_id)


class TicketNotFoundError(NotFoundError):
    code = "ticket_not_found"

    def __init__(self, ticket_id: str):
        self.ticket_id = ticket_id
        super().__init__(f"Ticket '{ticket_id}' not found or not searching", ticketId=ticket_id)


class PuzzleNotFoundError(NotFoundError):
    code = "puzzle_not_found"

    def __init__(self, puzzle_id: str):
        self.puzzle_id = puzzle_id
        super().__init__(f"Puzzle '{puzzle_id}' not found", puzzleId=puzzle_id)


class ParticipantNotFoundError(NotFoundError):
    code = "participant_not_found"

    def __init__(self, room_id: str, participant_id: str):
        self.room_id = room_id
        self.participant_id = participant_id
        super().__init__(
            f"Participant '{participant_id}' is not in room '{room_id}'",
            roomId=room_id,
            participantId=participant_id,
        )


# ── Validation (400) ─────────────────────────────────────────


class DomainValidationError(MatchOrchestratorError):
    """A request was well-formed JSON but violates a domain rule."""

    code = "validation_failed"
    http_status = 400


class HandleRequiredError(DomainValidationError):
    code = "handle_required"


class ParticipantRequiredError(DomainValidationError):
    code = "participant_required"


class InvalidModeError(DomainValidationError):
    code = "invalid_mode"

    def __init__(self, mode: Any):
        super().__init__(f"Unknown match mode: {mode!r}", mode=mode)


class ModeNotPermittedError(DomainValidationError):
    code = "mode_not_permitted"

    def __init__(self, mode: str, allowed_modes: List[str]):
        super().__init__(
            f"Mode '{mode}' cannot be used for lobby rooms",
            allowedModes=allowed_modes,
        )


class PuzzleModeNotAvailableError(DomainValidationError):
    code = "puzzle_mode_not_available"

    def __init__(self, puzzle_id: str, allowed_modes: List[str]):
        super().__init__(
            f"Puzzle '{puzzle_id}' is not offered in the requested mode",
            allowedModes=allowed_modes,
        )


class InvalidRoleError(DomainValidationError):
    code = "invalid_role"

    def __init__(self, role: Any):
        super().__init__(
            f"Unknown participant role: {role!r}",
            allowedRoles=["host", "challenger", "spectator"],
        )


class InvalidCountdownActionError(DomainValidationError):
    code = "invalid_countdown_action"

    def __init__(self, action: Any):
        super().__init__(
            f"Countdown action must be 'start' or 'reset', got {action!r}",
            allowedActions=["start", "reset"],
        )


class ResultHandlesRequiredError(DomainValidationError):
    code = "winner_and_loser_required"


class DistinctHandlesRequiredError(DomainValidationError):
    code = "distinct_handles_required"
