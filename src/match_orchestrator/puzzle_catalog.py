"""
match_orchestrator.puzzle_catalog — Puzzle catalog collaborator
===============================================================

Room creation needs exactly one thing from the puzzle service: look a
puzzle up by id and learn its timer preset and which modes offer it.
PuzzleLookup is that contract; BuiltinPuzzleCatalog is the bundled
implementation used when no external catalog is wired in.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol

from ._shared.modes import MatchMode


@dataclass(frozen=True)
class TimerPreset:
    countdown_seconds: int
    total_seconds: int


@dataclass(frozen=True)
class PuzzleMetadata:
    id: str
    title: str
    tier: str = "standard"
    topic_tags: List[str] = field(default_factory=list)
    mode_availability: List[MatchMode] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "tier": self.tier,
            "topicTags": list(self.topic_tags),
            "modeAvailability": [mode.value for mode in self.mode_availability],
        }


@dataclass(frozen=True)
class PuzzleEntry:
    metadata: PuzzleMetadata
    timer_preset: TimerPreset

    @property
    def id(self) -> str:
        return self.metadata.id

    def offers(self, mode: MatchMode) -> bool:
        return mode in self.metadata.mode_availability

    def to_payload(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata.to_payload(),
            "timerPreset": {
                "countdownSeconds": self.timer_preset.countdown_seconds,
                "totalSeconds": self.timer_preset.total_seconds,
            },
        }


class PuzzleLookup(Protocol):
    """Protocol for puzzle catalogs."""

    def get(self, puzzle_id: str) -> Optional[PuzzleEntry]:
        """Return the entry for puzzle_id, or None."""
        ...

    def list(self) -> List[PuzzleEntry]:
        """Return every entry in catalog order."""
        ...


_LOBBY = [MatchMode.SPEEDRUN, MatchMode.ENDURANCE]


def _entry(
    puzzle_id: str, title: str, tier: str, tags: List[str],
    modes: List[MatchMode], countdown: int, total: int,
) -> PuzzleEntry:
    return PuzzleEntry(
        metadata=PuzzleMetadata(
            id=puzzle_id, title=title, tier=tier,
            topic_tags=tags, mode_availability=modes,
        ),
        timer_preset=TimerPreset(countdown_seconds=countdown, total_seconds=total),
    )


BUILTIN_PUZZLES: List[PuzzleEntry] = [
    _entry("pz-carbonyl-01", "Carbonyl Cascade", "standard",
           ["carbonyl", "nucleophilic-addition"], _LOBBY, 5, 300),
    _entry("pz-aromatic-02", "Aromatic Relay", "standard",
           ["aromatic", "substitution"], _LOBBY, 5, 360),
    _entry("pz-grignard-03", "Grignard Gauntlet", "advanced",
           ["organometallic", "grignard"], _LOBBY, 6, 420),
    _entry("pz-photoredox-04", "Photoredox Sprint", "advanced",
           ["photoredox", "radical"], [MatchMode.SPEEDRUN], 5, 240),
    _entry("pz-pericyclic-05", "Pericyclic Marathon", "elite",
           ["pericyclic", "diels-alder"], [MatchMode.ENDURANCE], 8, 900),
    _entry("pz-retrosynth-06", "Retrosynthesis Summit", "elite",
           ["retrosynthesis", "total-synthesis"], _LOBBY, 8, 1200),
    # Presets used by rooms that matchmaking opens
    _entry("pz_speed_alpha", "Ranked Speedrun Alpha", "standard",
           ["ranked"], [MatchMode.SPEEDRUN], 5, 300),
    _entry("pz_endurance_prime", "Ranked Endurance Prime", "advanced",
           ["ranked"], [MatchMode.ENDURANCE], 8, 900),
    _entry("pz_sandbox_queue", "Sandbox Queue", "standard",
           ["practice"], [MatchMode.SANDBOX], 5, 300),
]


class BuiltinPuzzleCatalog:
    """In-memory PuzzleLookup over a fixed list of entries."""

    def __init__(self, entries: Optional[Iterable[PuzzleEntry]] = None):
        self._entries: Dict[str, PuzzleEntry] = {}
        for entry in (BUILTIN_PUZZLES if entries is None else entries):
            self._entries[entry.id] = entry

    def get(self, puzzle_id: str) -> Optional[PuzzleEntry]:
        return self._entries.get(puzzle_id)

    def list(self) -> List[PuzzleEntry]:
        return list(self._entries.values())
