# Area: Ladder Tests
"""Tests for division and tier classification."""

import pytest

from match_orchestrator._ladder.divisions import DIVISIONS, find_division, pick_division_tier


class TestFindDivision:

    def test_six_bands(self):
        assert [band.name for band in DIVISIONS] == [
            "Bronze", "Argentum", "Aurum", "Platinum", "Iridium", "Philosopher",
        ]

    @pytest.mark.parametrize("rating, name", [
        (0, "Bronze"), (1199, "Bronze"), (1200, "Argentum"), (1500, "Aurum"),
        (1799, "Platinum"), (1800, "Iridium"), (2000, "Philosopher"), (3000, "Philosopher"),
    ])
    def test_band_lookup(self, rating, name):
        assert find_division(rating).name == name

    def test_negative_rating_uses_lowest_band(self):
        assert find_division(-50).name == "Bronze"


class TestPickDivisionTier:
    """Tier I is the floor of a band, V the ceiling."""

    def test_band_floor_is_tier_i(self):
        assert pick_division_tier(1400) == ("Aurum", "I")

    def test_band_middle(self):
        assert pick_division_tier(1500) == ("Aurum", "III")

    def test_band_ceiling_is_tier_v(self):
        assert pick_division_tier(1599) == ("Aurum", "V")

    def test_tiers_step_up_through_band(self):
        tiers = [pick_division_tier(rating)[1] for rating in (1400, 1440, 1480, 1520, 1560)]
        assert tiers == ["I", "II", "III", "IV", "V"]

    def test_above_top_band_clamped(self):
        assert pick_division_tier(2600) == ("Philosopher", "V")

    def test_below_zero(self):
        assert pick_division_tier(-10) == ("Bronze", "I")

    def test_bronze_wide_band(self):
        assert pick_division_tier(500) == ("Bronze", "III")
