# Area: Ladder
"""
match_orchestrator._ladder.rating — Rating model
================================================

Elo-style rating math with deviation-scaled K-factor, per-mode
scalars, and a match-context multiplier applied only when a real
result is recorded.

Everything here is a pure function of its inputs except apply_result,
which is the single entry point that mutates ladder records.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .._shared.clock import WEEK_SECONDS, round_half_up
from .._shared.modes import MatchMode
from .records import MAX_RD, MIN_RD, LadderRecord, Profile

BASE_K = 24
RD_SCALE = 200
RD_SCALAR_BOUNDS = (0.5, 1.5)

MODE_SCALARS: Dict[MatchMode, float] = {
    MatchMode.SPEEDRUN: 1.0,
    MatchMode.ENDURANCE: 1.1,
    MatchMode.SANDBOX: 0.25,
}

PUZZLE_TIER_SCALARS: Dict[str, float] = {
    "elite": 1.25,
    "advanced": 1.1,
    "standard": 1.0,
}
PUZZLE_TIERS = tuple(PUZZLE_TIER_SCALARS)

DEFAULT_REFEREE_CONFIDENCE = 0.92
TIME_REMAINING_SCALE = 300
TIME_ADJUSTMENT_CAP = 0.2

SANDBOX_DELTA_CAP = 5
IDLE_INFLATION_PER_WEEK = 0.02
DEVIATION_SHRINK = 0.92

VOLATILITY_SWING_RATIO = 0.8
VOLATILITY_BOUNDS = (0.02, 0.35)


@dataclass(frozen=True)
class MatchContext:
    """Circumstances of a finished match that scale its rating impact."""
    mode: MatchMode
    puzzle_tier: Optional[str] = None
    referee_confidence: Optional[float] = None
    time_remaining_seconds: Optional[float] = None


@dataclass(frozen=True)
class RatingDeltaPreview:
    """Expected (or applied) rating movement for one side of a pairing."""
    handle: str
    win_chance: float
    expected_delta: float
    win_delta: float
    loss_delta: float

    def to_payload(self) -> Dict[str, Any]:
        return {
            "handle": self.handle,
            "winChance": self.win_chance,
            "expectedDelta": self.expected_delta,
            "winDelta": self.win_delta,
            "lossDelta": self.loss_delta,
        }


def win_chance(rating_a: float, rating_b: float) -> float:
    """Probability that A beats B on the standard Elo curve."""
    return 1 / (1 + 10 ** ((rating_b - rating_a) / 400))


def mode_scalar(mode: MatchMode) -> float:
    return MODE_SCALARS[mode]


def k_factor(deviation: float, mode: MatchMode) -> float:
    """Base K scaled by rating confidence and mode."""
    low, high = RD_SCALAR_BOUNDS
    rd_scalar = min(high, max(low, deviation / RD_SCALE))
    return BASE_K * rd_scalar * mode_scalar(mode)


def context_scalar(context: MatchContext) -> float:
    """
    Multiplier applied at result time.

    puzzle tier × time-remaining adjustment × referee confidence × mode.
    """
    tier_scalar = PUZZLE_TIER_SCALARS.get(context.puzzle_tier or "standard", 1.0)
    if context.time_remaining_seconds is not None:
        adjustment = context.time_remaining_seconds / TIME_REMAINING_SCALE
        time_scalar = 1 + max(-TIME_ADJUSTMENT_CAP, min(TIME_ADJUSTMENT_CAP, adjustment))
    else:
        time_scalar = 1.0
    confidence = (
        context.referee_confidence
        if context.referee_confidence is not None
        else DEFAULT_REFEREE_CONFIDENCE
    )
    return tier_scalar * time_scalar * confidence * mode_scalar(context.mode)


def idle_inflated_deviation(
    deviation: float, last_played_at: Optional[float], now: float
) -> float:
    """
    Deviation after idle-time inflation.

    Grows 2% per full idle week, never past MAX_RD. Ladders that have
    never been played are left alone.
    """
    if last_played_at is None:
        return deviation
    weeks_idle = int((now - last_played_at) // WEEK_SECONDS)
    if weeks_idle <= 0:
        return deviation
    inflated = deviation * min(1 + weeks_idle * IDLE_INFLATION_PER_WEEK, MAX_RD / deviation)
    return min(MAX_RD, inflated)


def build_rating_preview(
    handle_a: str, rating_a: float, deviation_a: float,
    handle_b: str, rating_b: float, deviation_b: float,
    mode: MatchMode,
) -> List[RatingDeltaPreview]:
    """
    Preview what a pairing puts at stake for each side.

    No context scalar is applied; the numbers are the raw K-weighted
    win and loss swings.
    """
    previews = []
    for handle, own, dev, other in (
        (handle_a, rating_a, deviation_a, rating_b),
        (handle_b, rating_b, deviation_b, rating_a),
    ):
        chance = win_chance(own, other)
        k = k_factor(dev, mode)
        win_delta = round_half_up(k * (1 - chance), 1)
        loss_delta = round_half_up(-k * chance, 1)
        previews.append(RatingDeltaPreview(
            handle=handle,
            win_chance=round_half_up(chance, 2),
            expected_delta=round_half_up((win_delta + loss_delta) / 2, 1),
            win_delta=win_delta,
            loss_delta=loss_delta,
        ))
    return previews


@dataclass(frozen=True)
class _Adjustment:
    delta: float
    k: float
    chance: float
    projected_win: float
    projected_loss: float


def _compute_adjustment(
    own_rating: float, own_deviation: float, opponent_rating: float,
    outcome: int, context: MatchContext,
) -> _Adjustment:
    chance = win_chance(own_rating, opponent_rating)
    k = k_factor(own_deviation, context.mode)
    scalar = context_scalar(context)
    delta = round_half_up((outcome - chance) * k * scalar, 2)
    if context.mode is MatchMode.SANDBOX:
        delta = max(-SANDBOX_DELTA_CAP, min(SANDBOX_DELTA_CAP, delta))
    return _Adjustment(
        delta=delta,
        k=k,
        chance=chance,
        projected_win=round_half_up(k * scalar * (1 - chance), 2),
        projected_loss=round_half_up(-k * scalar * chance, 2),
    )


def _commit(profile: Profile, ladder: LadderRecord, adj: _Adjustment, now: float) -> None:
    ladder.rating = round_half_up(ladder.rating + adj.delta)
    ladder.deviation = min(MAX_RD, max(MIN_RD, ladder.deviation * DEVIATION_SHRINK))
    ladder.matches_played += 1
    ladder.provisional_matches = max(0, ladder.provisional_matches - 1)
    ladder.last_played_at = now
    low, high = VOLATILITY_BOUNDS
    if abs(adj.delta) > adj.k * VOLATILITY_SWING_RATIO:
        ladder.volatility = min(high, ladder.volatility * 1.05)
    else:
        ladder.volatility = max(low, ladder.volatility * 0.98)
    profile.calibrations_remaining = max(0, profile.calibrations_remaining - 1)
    profile.last_updated = now


def apply_result(
    winner: Profile, loser: Profile, context: MatchContext, now: float
) -> Tuple[RatingDeltaPreview, RatingDeltaPreview]:
    """
    Apply a decided match to both profiles' ladders for context.mode.

    Idle inflation runs first for both sides. Both adjustments are then
    computed from the pre-update ratings before either ladder is
    mutated, so the order of updates cannot leak into the result.

    Returns:
        (winner preview, loser preview) with the applied deltas
    """
    winner_ladder = winner.ladder(context.mode)
    loser_ladder = loser.ladder(context.mode)
    for ladder in (winner_ladder, loser_ladder):
        ladder.deviation = idle_inflated_deviation(ladder.deviation, ladder.last_played_at, now)

    winner_adj = _compute_adjustment(
        winner_ladder.rating, winner_ladder.deviation, loser_ladder.rating, 1, context
    )
    loser_adj = _compute_adjustment(
        loser_ladder.rating, loser_ladder.deviation, winner_ladder.rating, 0, context
    )

    _commit(winner, winner_ladder, winner_adj, now)
    _commit(loser, loser_ladder, loser_adj, now)

    return (
        _applied_preview(winner.handle, winner_adj),
        _applied_preview(loser.handle, loser_adj),
    )


def _applied_preview(handle: str, adj: _Adjustment) -> RatingDeltaPreview:
    return RatingDeltaPreview(
        handle=handle,
        win_chance=round_half_up(adj.chance, 2),
        expected_delta=adj.delta,
        win_delta=adj.projected_win,
        loss_delta=adj.projected_loss,
    )
