# Area: Ladder
"""Division and tier classification for ladder ratings."""

import math
from typing import List, NamedTuple, Tuple


class DivisionBand(NamedTuple):
    name: str
    floor: int
    ceiling: int


DIVISIONS: List[DivisionBand] = [
    DivisionBand("Bronze", 0, 1199),
    DivisionBand("Argentum", 1200, 1399),
    DivisionBand("Aurum", 1400, 1599),
    DivisionBand("Platinum", 1600, 1799),
    DivisionBand("Iridium", 1800, 1999),
    DivisionBand("Philosopher", 2000, 2400),
]

# Indexed from the top of a band down; "I" sits at the band floor
DIVISION_TIERS: List[str] = ["V", "IV", "III", "II", "I"]

FALLBACK_SPAN = 200


def find_division(rating: float) -> DivisionBand:
    """Return the band containing rating; out-of-range ratings use the nearest band."""
    band = DIVISIONS[0]
    for candidate in DIVISIONS:
        if rating >= candidate.floor:
            band = candidate
    return band


def pick_division_tier(rating: float) -> Tuple[str, str]:
    """
    Classify a rating into (division, tier).

    The tier is the player's relative position inside the band span,
    split into five equal slices.

    Args:
        rating: Ladder rating

    Returns:
        Tuple of (division name, tier numeral)
    """
    band = find_division(rating)
    span = band.ceiling - band.floor
    if span <= 0:
        span = FALLBACK_SPAN
    relative = min(max(rating - band.floor, 0), span)
    index = len(DIVISION_TIERS) - 1 - math.floor((relative / span) * len(DIVISION_TIERS))
    index = max(0, min(len(DIVISION_TIERS) - 1, index))
    return band.name, DIVISION_TIERS[index]
