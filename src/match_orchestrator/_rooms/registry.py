# Area: Rooms
"""
match_orchestrator._rooms.registry — Room repository
====================================================

CRUD and lifecycle operations over rooms keyed by id. Every mutation
stamps updated_at and writes the room back through the store.
Validation happens before any field is touched, so a rejected call
leaves the room unchanged.
"""

import logging
import uuid
from typing import List, Optional, Sequence, Tuple

from .._ladder.rating import RatingDeltaPreview
from .._shared.analytics import AnalyticsSink
from .._shared.clock import Clock, system_clock
from .._shared.modes import MatchMode
from .._shared.store import BaseRepository, KeyValueStore
from ..errors import (
    HandleRequiredError,
    InvalidCountdownActionError,
    InvalidRoleError,
    ParticipantNotFoundError,
    ParticipantRequiredError,
    RoomNotFoundError,
)
from ..puzzle_catalog import PuzzleMetadata
from .enums import ParticipantRole, RoomEvent
from .models import CompetitiveContext, Participant, Room, build_participant
from .state_machine import RoomStateMachine

logger = logging.getLogger("match_orchestrator.rooms")

COUNTDOWN_ACTIONS = {
    "start": RoomEvent.COUNTDOWN_START,
    "reset": RoomEvent.COUNTDOWN_RESET,
}


def parse_role(role: Optional[str]) -> Optional[ParticipantRole]:
    if role is None:
        return None
    try:
        return ParticipantRole(role)
    except ValueError:
        raise InvalidRoleError(role) from None


class RoomRegistry(BaseRepository[Room]):
    """
    Repository for rooms.

    Handles creation, joins, readiness, countdown control, and the
    administrative result patch.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore[Room]] = None,
        clock: Clock = system_clock,
        analytics: Optional[AnalyticsSink] = None,
    ):
        super().__init__(store)
        self._clock = clock
        self._analytics = analytics
        self.state_machine = RoomStateMachine()

    # ── Reads ────────────────────────────────────────────────

    def find(self, room_id: str) -> Optional[Room]:
        return self._get(room_id)

    def get(self, room_id: str) -> Room:
        """
        Get a room by id.

        Raises:
            RoomNotFoundError: If the id is unknown
        """
        room = self._get(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def list(self) -> List[Room]:
        return self._all()

    # ── Mutations ────────────────────────────────────────────

    def _save(self, room: Room) -> Room:
        room.updated_at = self._clock()
        self._put(room.id, room)
        return room

    def create_room(
        self,
        puzzle_id: str,
        mode: MatchMode,
        countdown_seconds: int,
        total_seconds: int,
        participants: Sequence[Participant],
        puzzle_metadata: Optional[PuzzleMetadata] = None,
        competitive: Optional[CompetitiveContext] = None,
        id_prefix: str = "room",
    ) -> Room:
        """
        Create a room in lobby/idle.

        Used both for hand-made lobby rooms and for rooms opened by
        matchmaking (which pass a competitive context).
        """
        now = self._clock()
        room = Room(
            id=f"{id_prefix}_{uuid.uuid4().hex[:12]}",
            puzzle_id=puzzle_id,
            mode=mode,
            countdown_seconds=countdown_seconds,
            total_seconds=total_seconds,
            created_at=now,
            updated_at=now,
            participants=list(participants),
            puzzle_metadata=puzzle_metadata,
            competitive=competitive,
        )
        self._save(room)
        logger.info(
            f"Room {room.id} created ({mode.value}, puzzle {puzzle_id})",
            extra={"room_id": room.id},
        )
        if self._analytics is not None:
            self._analytics.record_room_created(
                room.id, room.puzzle_id, room.mode.value,
                [participant.handle for participant in room.participants],
            )
        return room

    def join(
        self,
        room_id: str,
        handle: Optional[str],
        role: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Tuple[Room, bool]:
        """
        Add a participant to a room.

        Joining is idempotent by handle. A new participant cancels any
        pending countdown.

        Returns:
            (room, joined) where joined is False for a repeat join
        """
        room = self.get(room_id)
        if not handle or not handle.strip():
            raise HandleRequiredError("A handle is required to join a room")
        parsed_role = parse_role(role)

        if room.find_by_handle(handle) is not None:
            return room, False

        if user_id and room.find_participant(user_id) is not None:
            logger.warning(
                f"[{room.id}] Participant id {user_id} already taken; assigning a new id",
                extra={"room_id": room.id},
            )
            user_id = None

        room.participants.append(build_participant(handle.strip(), parsed_role, user_id))
        self.state_machine.apply(room, RoomEvent.PARTICIPANT_JOINED, self._clock())
        self._save(room)
        logger.info(f"[{room.id}] {handle} joined", extra={"room_id": room.id})
        return room, True

    def toggle_ready(
        self,
        room_id: str,
        participant_id: Optional[str] = None,
        ready: Optional[bool] = None,
    ) -> Room:
        """
        Flip (or set) a participant's ready flag and re-evaluate the countdown.

        Without a participant id the host (first participant) is toggled.
        """
        room = self.get(room_id)
        if participant_id is None and room.participants:
            participant_id = room.participants[0].id
        if not participant_id:
            raise ParticipantRequiredError("A participant id is required")
        participant = room.find_participant(participant_id)
        if participant is None:
            raise ParticipantNotFoundError(room_id, participant_id)

        participant.ready = (not participant.ready) if ready is None else ready
        self.state_machine.apply(room, self.state_machine.readiness_event(room), self._clock())
        self._save(room)
        if self._analytics is not None:
            self._analytics.record_ready_toggled(room.id, participant.id, participant.ready)
        return room

    def countdown(self, room_id: str, action: Optional[str] = "start") -> Room:
        """Start or reset the countdown. Action defaults to start."""
        room = self.get(room_id)
        event = COUNTDOWN_ACTIONS.get(action or "start")
        if event is None:
            raise InvalidCountdownActionError(action)

        self.state_machine.apply(room, event, self._clock())
        self._save(room)
        if event is RoomEvent.COUNTDOWN_START and self._analytics is not None:
            self._analytics.record_countdown_started(
                room.id, room.puzzle_id, room.countdown.countdown_seconds
            )
        return room

    def apply_match_result(
        self, room_id: str, deltas: List[RatingDeltaPreview]
    ) -> Optional[Room]:
        """
        Force a room into progress and record applied rating deltas.

        Returns None when the room does not exist.
        """
        room = self._get(room_id)
        if room is None:
            return None
        if room.competitive is not None:
            room.competitive.expected_deltas = list(deltas)
        else:
            room.competitive = CompetitiveContext(is_rated=False, expected_deltas=list(deltas))
        self.state_machine.apply(room, RoomEvent.RESULT_APPLIED, self._clock())
        return self._save(room)
