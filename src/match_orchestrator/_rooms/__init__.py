# Area: Rooms
"""
Room subsystem: data model, lifecycle state machine, and registry.
"""

from .enums import CountdownPhase, ParticipantRole, RoomEvent, RoomStatus
from .models import CompetitiveContext, CountdownState, Participant, Room, build_participant
from .state_machine import RoomStateMachine
from .registry import RoomRegistry

__all__ = [
    "CountdownPhase",
    "ParticipantRole",
    "RoomEvent",
    "RoomStatus",
    "CompetitiveContext",
    "CountdownState",
    "Participant",
    "Room",
    "build_participant",
    "RoomStateMachine",
    "RoomRegistry",
]
