# Area: Ladder
"""
match_orchestrator._ladder.records — Ladder and profile records
===============================================================

Mutable records owned by the ProfileStore. Ratings change only through
rating.apply_result; everything else here is plain data.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .._shared.modes import MatchMode

DEFAULT_RATING = 1500
DEFAULT_RD = 350
DEFAULT_VOLATILITY = 0.06
DEFAULT_PROVISIONAL_MATCHES = 5
DEFAULT_CALIBRATIONS = 3
DEFAULT_REGION = "NA"

MAX_RD = 400
MIN_RD = 35


@dataclass
class LadderRecord:
    """One handle's standing on one mode's ladder."""
    mode: MatchMode
    rating: float = DEFAULT_RATING
    deviation: float = DEFAULT_RD
    volatility: float = DEFAULT_VOLATILITY
    matches_played: int = 0
    provisional_matches: int = DEFAULT_PROVISIONAL_MATCHES
    last_played_at: Optional[float] = None      # epoch seconds


@dataclass
class Profile:
    """
    Competitive profile for one (normalized) handle.

    While calibrations_remaining > 0 matchmaking uses hidden_rating
    instead of the ladder rating.
    """
    handle: str
    hidden_rating: int
    last_updated: float
    region: str = DEFAULT_REGION
    calibrations_remaining: int = DEFAULT_CALIBRATIONS
    specializations: List[str] = field(default_factory=list)
    ladders: Dict[MatchMode, LadderRecord] = field(default_factory=dict)

    def ladder(self, mode: MatchMode) -> LadderRecord:
        return self.ladders[mode]
