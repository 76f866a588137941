# Area: Shared
"""
match_orchestrator._shared.analytics — Analytics event sink
===========================================================

Append-only, bounded log of lobby events. Producers fire and forget;
the buffer is only read for observability (GET /analytics/events).
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from .clock import Clock, system_clock, to_iso

logger = logging.getLogger("match_orchestrator.analytics")

BUFFER_LIMIT = 200

ROOM_CREATED = "room.created"
READY_TOGGLED = "room.ready_toggled"
COUNTDOWN_STARTED = "room.countdown_started"
RESULT_RECORDED = "match.result_recorded"


class AnalyticsSink:
    """
    Bounded ring of structured events.

    Each event is a dict: {"type", "occurredAt", "payload"}. When the
    buffer is full the oldest event is dropped.
    """

    def __init__(
        self,
        limit: int = BUFFER_LIMIT,
        clock: Clock = system_clock,
        quiet: bool = False,
    ) -> None:
        self._events: Deque[Dict[str, Any]] = deque(maxlen=limit)
        self._clock = clock
        self._quiet = quiet

    def _push(self, event_type: str, payload: Dict[str, Any]) -> None:
        event = {
            "type": event_type,
            "occurredAt": to_iso(self._clock()),
            "payload": payload,
        }
        self._events.append(event)
        if not self._quiet:
            logger.info(
                "[analytics:%s] %s", event_type, payload,
                extra={"event_type": event_type},
            )

    def record_room_created(
        self, room_id: str, puzzle_id: str, mode: str, participant_handles: List[str]
    ) -> None:
        self._push(ROOM_CREATED, {
            "roomId": room_id,
            "puzzleId": puzzle_id,
            "mode": mode,
            "participantHandles": list(participant_handles),
        })

    def record_ready_toggled(self, room_id: str, participant_id: str, ready: bool) -> None:
        self._push(READY_TOGGLED, {
            "roomId": room_id,
            "participantId": participant_id,
            "ready": ready,
        })

    def record_countdown_started(
        self, room_id: str, puzzle_id: str, countdown_seconds: int
    ) -> None:
        self._push(COUNTDOWN_STARTED, {
            "roomId": room_id,
            "puzzleId": puzzle_id,
            "countdownSeconds": countdown_seconds,
        })

    def record_match_result(
        self, room_id: str, puzzle_id: str, winner_handle: str, duration_seconds: float
    ) -> None:
        self._push(RESULT_RECORDED, {
            "roomId": room_id,
            "puzzleId": puzzle_id,
            "winnerHandle": winner_handle,
            "durationSeconds": duration_seconds,
        })

    def events(self, event_type: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return a copy of the buffered events, oldest first."""
        if event_type is None:
            return list(self._events)
        return [event for event in self._events if event["type"] == event_type]

    def __len__(self) -> int:
        return len(self._events)
