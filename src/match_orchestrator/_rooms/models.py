# Area: Rooms
"""
match_orchestrator._rooms.models — Room data model
==================================================

Rooms, participants, countdown state, and the competitive context that
matchmaking attaches to rated rooms. to_payload() renders the camelCase
JSON shape served over HTTP.
"""

from __future__ import annotations
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .._ladder.rating import RatingDeltaPreview
from .._shared.clock import to_iso
from .._shared.modes import MatchMode
from ..puzzle_catalog import PuzzleMetadata
from .enums import CountdownPhase, ParticipantRole, RoomStatus


@dataclass
class Participant:
    """One seat in a room. id is stable even if the handle changes."""
    id: str
    handle: str
    role: ParticipantRole = ParticipantRole.CHALLENGER
    ready: bool = False

    def matches_handle(self, handle: str) -> bool:
        return self.handle.strip().lower() == handle.strip().lower()

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "handle": self.handle,
            "role": self.role.value,
            "ready": self.ready,
        }


def build_participant(
    handle: str,
    role: Optional[ParticipantRole] = None,
    user_id: Optional[str] = None,
) -> Participant:
    return Participant(
        id=user_id or str(uuid.uuid4()),
        handle=handle,
        role=role or ParticipantRole.CHALLENGER,
    )


@dataclass
class CountdownState:
    countdown_seconds: int
    state: CountdownPhase = CountdownPhase.IDLE
    started_at: Optional[float] = None
    expires_at: Optional[float] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "state": self.state.value,
            "countdownSeconds": self.countdown_seconds,
        }
        if self.started_at is not None:
            payload["startedAt"] = to_iso(self.started_at)
        if self.expires_at is not None:
            payload["expiresAt"] = to_iso(self.expires_at)
        return payload


@dataclass
class CompetitiveContext:
    """Attached to rooms opened by matchmaking (or patched in by a result)."""
    is_rated: bool
    expected_deltas: List[RatingDeltaPreview] = field(default_factory=list)
    queue_ticket_ids: List[str] = field(default_factory=list)
    rating_spread: Optional[int] = None
    allowed_spread: Optional[int] = None
    bot_filled: bool = False

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "isRated": self.is_rated,
            "expectedDeltas": [delta.to_payload() for delta in self.expected_deltas],
            "botFilled": self.bot_filled,
        }
        if self.queue_ticket_ids:
            payload["queueTicketIds"] = list(self.queue_ticket_ids)
        if self.rating_spread is not None:
            payload["ratingSpread"] = self.rating_spread
        if self.allowed_spread is not None:
            payload["allowedSpread"] = self.allowed_spread
        return payload


@dataclass
class Room:
    id: str
    puzzle_id: str
    mode: MatchMode
    countdown_seconds: int
    total_seconds: int
    created_at: float
    updated_at: float
    participants: List[Participant] = field(default_factory=list)
    status: RoomStatus = RoomStatus.LOBBY
    countdown: CountdownState = field(init=False)
    puzzle_metadata: Optional[PuzzleMetadata] = None
    competitive: Optional[CompetitiveContext] = None

    def __post_init__(self) -> None:
        self.countdown = CountdownState(countdown_seconds=self.countdown_seconds)

    @property
    def websocket_channel(self) -> str:
        return f"match:{self.id}"

    def find_participant(self, participant_id: str) -> Optional[Participant]:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def find_by_handle(self, handle: str) -> Optional[Participant]:
        for participant in self.participants:
            if participant.matches_handle(handle):
                return participant
        return None

    def all_ready(self) -> bool:
        """True when every participant, spectators included, is ready."""
        if not self.participants:
            return False
        return all(participant.ready for participant in self.participants)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "puzzleId": self.puzzle_id,
            "mode": self.mode.value,
            "websocketChannel": self.websocket_channel,
            "participants": [participant.to_payload() for participant in self.participants],
            "timerConfig": {
                "countdownSeconds": self.countdown_seconds,
                "totalSeconds": self.total_seconds,
            },
            "status": self.status.value,
            "countdown": self.countdown.to_payload(),
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
        }
        if self.puzzle_metadata is not None:
            payload["puzzleMetadata"] = self.puzzle_metadata.to_payload()
        if self.competitive is not None:
            payload["competitive"] = self.competitive.to_payload()
        return payload
