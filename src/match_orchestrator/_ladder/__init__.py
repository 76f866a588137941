# Area: Ladder
"""
Ladder subsystem: rating math, divisions, and the profile repository.
"""

from .records import LadderRecord, Profile
from .rating import (
    MatchContext,
    RatingDeltaPreview,
    apply_result,
    build_rating_preview,
    context_scalar,
    k_factor,
    win_chance,
)
from .divisions import pick_division_tier
from .profiles import ProfileStore, normalize_handle, profile_payload

__all__ = [
    "LadderRecord",
    "Profile",
    "MatchContext",
    "RatingDeltaPreview",
    "apply_result",
    "build_rating_preview",
    "context_scalar",
    "k_factor",
    "win_chance",
    "pick_division_tier",
    "ProfileStore",
    "normalize_handle",
    "profile_payload",
]
