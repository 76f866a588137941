# Area: Ladder
"""
match_orchestrator._ladder.profiles — Profile repository
========================================================

Per-handle competitive profiles with one ladder record per mode.
Profiles are created lazily on first reference with fixed defaults
plus a small random hidden-rating offset, and are never deleted.
"""

import logging
import random
from typing import Any, Dict, List, Optional, Tuple

from .._shared.clock import Clock, system_clock, to_iso, round_half_up
from .._shared.modes import MATCHMAKING_MODES, MatchMode
from .._shared.store import BaseRepository, KeyValueStore
from .divisions import pick_division_tier
from .rating import MatchContext, RatingDeltaPreview, apply_result, idle_inflated_deviation
from .records import DEFAULT_RATING, LadderRecord, Profile

logger = logging.getLogger("match_orchestrator.ladder.profiles")

HIDDEN_RATING_JITTER = 30
SPECIALIZATION_POOL = ["Organometallic", "Photoredox"]


def normalize_handle(handle: str) -> str:
    """Profiles and tickets key handles case-insensitively."""
    return handle.strip().lower()


class ProfileStore(BaseRepository[Profile]):
    """
    Repository for competitive profiles.

    Handles lazy creation, idle deviation decay, result application,
    and payload summaries.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore[Profile]] = None,
        clock: Clock = system_clock,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(store)
        self._clock = clock
        self._rng = rng or random.Random()

    def get(self, handle: str) -> Optional[Profile]:
        """Look up a profile without creating it."""
        return self._get(normalize_handle(handle))

    def get_or_create(self, handle: str) -> Profile:
        """
        Return the profile for handle, creating it with defaults if needed.

        Args:
            handle: Player handle (normalized before lookup)

        Returns:
            The stored Profile
        """
        key = normalize_handle(handle)
        existing = self._get(key)
        if existing is not None:
            return existing

        jitter = self._rng.randint(-HIDDEN_RATING_JITTER, HIDDEN_RATING_JITTER)
        specialization_count = self._rng.randint(1, len(SPECIALIZATION_POOL))
        profile = Profile(
            handle=key,
            hidden_rating=DEFAULT_RATING + jitter,
            last_updated=self._clock(),
            specializations=SPECIALIZATION_POOL[:specialization_count],
            ladders={mode: LadderRecord(mode=mode) for mode in MATCHMAKING_MODES},
        )
        self._put(key, profile)
        logger.debug(f"Created profile for {key} (hidden rating {profile.hidden_rating})")
        return profile

    def all(self) -> List[Profile]:
        return self._all()

    def refresh_idle_deviation(self, profile: Profile, mode: MatchMode) -> LadderRecord:
        """Inflate a ladder's deviation for the time it sat idle."""
        ladder = profile.ladder(mode)
        ladder.deviation = idle_inflated_deviation(
            ladder.deviation, ladder.last_played_at, self._clock()
        )
        return ladder

    def matchmaking_snapshot(self, handle: str, mode: MatchMode) -> Tuple[int, float]:
        """
        Rating and deviation a new ticket should carry.

        During calibration the hidden rating stands in for the ladder
        rating so that early matches are seeded by concealed skill.
        """
        profile = self.get_or_create(handle)
        ladder = self.refresh_idle_deviation(profile, mode)
        rating = profile.hidden_rating if profile.calibrations_remaining > 0 else ladder.rating
        return round_half_up(rating), ladder.deviation

    def record_result(
        self, winner_handle: str, loser_handle: str, context: MatchContext
    ) -> Tuple[RatingDeltaPreview, RatingDeltaPreview]:
        """Apply a match result to both players' ladders."""
        winner = self.get_or_create(winner_handle)
        loser = self.get_or_create(loser_handle)
        deltas = apply_result(winner, loser, context, self._clock())
        logger.info(
            f"Result applied on {context.mode.value}: "
            f"{winner.handle} {deltas[0].expected_delta:+.2f}, "
            f"{loser.handle} {deltas[1].expected_delta:+.2f}"
        )
        return deltas


def summarize_ladder(ladder: LadderRecord) -> Dict[str, Any]:
    division, tier = pick_division_tier(ladder.rating)
    return {
        "ladder": ladder.mode.value,
        "rating": round_half_up(ladder.rating),
        "deviation": round_half_up(ladder.deviation),
        "volatility": round(ladder.volatility, 4),
        "matchesPlayed": ladder.matches_played,
        "lastPlayedAt": to_iso(ladder.last_played_at),
        "provisionalMatches": max(0, ladder.provisional_matches),
        "division": division,
        "tier": tier,
    }


def profile_payload(profile: Profile) -> Dict[str, Any]:
    return {
        "handle": profile.handle,
        "region": profile.region,
        "calibrationsRemaining": profile.calibrations_remaining,
        "hiddenRating": profile.hidden_rating,
        "specializations": list(profile.specializations),
        "ladders": {
            mode.value: summarize_ladder(profile.ladder(mode)) for mode in MATCHMAKING_MODES
        },
        "lastUpdated": to_iso(profile.last_updated),
    }
