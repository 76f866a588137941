# Area: Rooms
"""
match_orchestrator._rooms.state_machine — Room lifecycle state machine
======================================================================

Drives a room's countdown phase from readiness changes, joins, and
explicit countdown requests. The room status is never set directly; it
is derived from the countdown phase after every transition so the two
cannot disagree.
"""

import logging
from typing import Optional

from .enums import CountdownPhase, RoomEvent, RoomStatus
from .models import CountdownState, Room

logger = logging.getLogger("match_orchestrator.rooms.state_machine")


_ALWAYS = {
    RoomEvent.PARTICIPANT_JOINED: CountdownPhase.IDLE,
    RoomEvent.COUNTDOWN_START: CountdownPhase.RUNNING,
    RoomEvent.COUNTDOWN_RESET: CountdownPhase.IDLE,
    RoomEvent.RESULT_APPLIED: CountdownPhase.RUNNING,
}

# Valid transitions: {current_phase: {event: next_phase}}
TRANSITIONS = {
    CountdownPhase.IDLE: {
        RoomEvent.ALL_READY: CountdownPhase.PENDING,
        **_ALWAYS,
    },
    CountdownPhase.PENDING: {
        RoomEvent.READY_DROPPED: CountdownPhase.IDLE,
        **_ALWAYS,
    },
    # A running countdown ignores readiness changes
    CountdownPhase.RUNNING: dict(_ALWAYS),
    CountdownPhase.COMPLETED: {
        RoomEvent.READY_DROPPED: CountdownPhase.IDLE,
        **_ALWAYS,
    },
}

STATUS_FOR_PHASE = {
    CountdownPhase.IDLE: RoomStatus.LOBBY,
    CountdownPhase.PENDING: RoomStatus.COUNTDOWN,
    CountdownPhase.RUNNING: RoomStatus.IN_PROGRESS,
    CountdownPhase.COMPLETED: RoomStatus.IN_PROGRESS,
}


class RoomStateMachine:
    """
    Applies lifecycle events to rooms.

    Events that are not valid from the room's current phase are ignored
    (readiness changes during a running countdown, for instance); only
    apply() touches the countdown and status fields.
    """

    @staticmethod
    def can_transition(phase: CountdownPhase, event: RoomEvent) -> bool:
        return event in TRANSITIONS.get(phase, {})

    @staticmethod
    def next_phase(phase: CountdownPhase, event: RoomEvent) -> Optional[CountdownPhase]:
        return TRANSITIONS.get(phase, {}).get(event)

    def apply(self, room: Room, event: RoomEvent, now: float) -> bool:
        """
        Apply an event to a room in place.

        Args:
            room: Room to update
            event: Lifecycle event
            now: Current epoch seconds (used for countdown timestamps)

        Returns:
            True if the countdown phase was updated, False if the event
            was ignored
        """
        current = room.countdown.state
        target = self.next_phase(current, event)
        if target is None:
            logger.debug(f"[{room.id}] Ignored {event.value} while {current.value}")
            return False

        seconds = room.countdown_seconds
        if event is RoomEvent.COUNTDOWN_START:
            room.countdown = CountdownState(
                countdown_seconds=seconds,
                state=target,
                started_at=now,
                expires_at=now + seconds,
            )
        elif event in (RoomEvent.PARTICIPANT_JOINED, RoomEvent.COUNTDOWN_RESET):
            room.countdown = CountdownState(countdown_seconds=seconds)
        elif event is RoomEvent.RESULT_APPLIED:
            room.countdown = CountdownState(
                countdown_seconds=room.countdown.countdown_seconds,
                state=target,
                started_at=now,
                expires_at=room.countdown.expires_at,
            )
        else:
            room.countdown.state = target

        room.status = STATUS_FOR_PHASE[target]
        if target is not current:
            logger.info(
                f"[{room.id}] Countdown: {current.value} → {target.value}",
                extra={"room_id": room.id},
            )
        return True

    def readiness_event(self, room: Room) -> RoomEvent:
        """Event implied by the room's current readiness."""
        return RoomEvent.ALL_READY if room.all_ready() else RoomEvent.READY_DROPPED
