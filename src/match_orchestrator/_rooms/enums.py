# Area: Rooms
"""
match_orchestrator._rooms.enums — Room lifecycle enums
======================================================

Defines the room status, countdown phases, participant roles, and the
events that drive countdown transitions.
"""

from enum import Enum


class RoomStatus(Enum):
    """
    Coarse room status shown to clients.

    Always derived from the countdown phase:
    IDLE -> LOBBY, PENDING -> COUNTDOWN, RUNNING/COMPLETED -> IN_PROGRESS
    """
    LOBBY = "lobby"
    COUNTDOWN = "countdown"
    IN_PROGRESS = "in_progress"


class CountdownPhase(Enum):
    """
    Countdown phases.

    IDLE -> PENDING (on ALL_READY)
    PENDING/COMPLETED -> IDLE (on READY_DROPPED)
    Any phase -> IDLE (on PARTICIPANT_JOINED or COUNTDOWN_RESET)
    Any phase -> RUNNING (on COUNTDOWN_START or RESULT_APPLIED)
    """
    IDLE = "idle"
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"


class ParticipantRole(Enum):
    HOST = "host"
    CHALLENGER = "challenger"
    SPECTATOR = "spectator"


class RoomEvent(Enum):
    """
    Events that trigger countdown transitions.

    - ALL_READY: ready ratio reached 100%
    - READY_DROPPED: ready ratio fell below 100%
    - PARTICIPANT_JOINED: a new participant joined the room
    - COUNTDOWN_START: explicit start request
    - COUNTDOWN_RESET: explicit reset request
    - RESULT_APPLIED: a match result was recorded against the room
    """
    ALL_READY = "ALL_READY"
    READY_DROPPED = "READY_DROPPED"
    PARTICIPANT_JOINED = "PARTICIPANT_JOINED"
    COUNTDOWN_START = "COUNTDOWN_START"
    COUNTDOWN_RESET = "COUNTDOWN_RESET"
    RESULT_APPLIED = "RESULT_APPLIED"
