"""
Tests for the progression math.

Test strategy:
1. Boundaries of the curve (0, target, beyond target)
2. Concrete deposits with known levels
3. Degenerate input never raises
"""

import math

import pytest

from savings_party.models.savings import CURRENCIES, SavingsAccount, SavingsEntry, find_currency
from savings_party.progression import (
    account_stats,
    calculate_level,
    evolution_stage,
    exp_progress,
    format_currency,
    level_description,
    progress_percentage,
    savings_for_level,
    savings_to_evolution,
    savings_to_next_level,
    total_saved,
    would_evolve,
    would_level_up,
)


def make_account(target: float, *amounts: float) -> SavingsAccount:
    return SavingsAccount(
        nickname="Test",
        creature_ref="charmander-line",
        target_amount=target,
        entries=[SavingsEntry(amount=a) for a in amounts],
    )


class TestCalculateLevel:
    """Tests for the level curve."""

    def test_zero_saved_is_level_one(self):
        """Test nothing saved gives level 1."""
        assert calculate_level(0, 1000) == 1

    def test_target_reached_is_level_hundred(self):
        """Test saving exactly the target gives level 100."""
        for target in (1, 50, 1000, 123456.78):
            assert calculate_level(target, target) == 100

    def test_over_saving_caps_at_hundred(self):
        """Test saving past the target stays at level 100."""
        assert calculate_level(5000, 1000) == 100

    def test_known_deposits(self):
        """Test levels for known totals against a 1000 target."""
        assert calculate_level(160, 1000) == 21
        assert calculate_level(50, 1000) == 7
        assert calculate_level(100, 1000) == 14

    def test_curve_is_monotonic(self):
        """Test level never decreases as the total grows."""
        levels = [calculate_level(x, 1000) for x in range(0, 1501, 5)]
        assert levels == sorted(levels)

    def test_level_always_in_range(self):
        """Test level stays within 1..100."""
        for x in (-500, 0, 0.001, 1, 999.99, 10 ** 9):
            assert 1 <= calculate_level(x, 1000) <= 100

    def test_degenerate_targets(self):
        """Test zero, negative and NaN targets give level 1."""
        assert calculate_level(500, 0) == 1
        assert calculate_level(500, -100) == 1
        assert calculate_level(500, math.nan) == 1
        assert calculate_level(math.nan, 1000) == 1

    def test_negative_total(self):
        """Test a negative total gives level 1."""
        assert calculate_level(-200, 1000) == 1


class TestEvolutionStage:
    """Tests for the evolution thresholds."""

    def test_stage_boundaries(self):
        """Test stage changes exactly at 16 and 36."""
        assert evolution_stage(1) == 0
        assert evolution_stage(15) == 0
        assert evolution_stage(16) == 1
        assert evolution_stage(35) == 1
        assert evolution_stage(36) == 2
        assert evolution_stage(100) == 2

    def test_stage_consistent_for_all_levels(self):
        """Test every level maps to the right stage."""
        for level in range(1, 101):
            stage = evolution_stage(level)
            if level >= 36:
                assert stage == 2
            elif level >= 16:
                assert stage == 1
            else:
                assert stage == 0


class TestInverse:
    """Tests for the 'how much more' computations."""

    def test_savings_for_level_bounds(self):
        """Test level 100 starts at the target."""
        assert savings_for_level(100, 1000) == pytest.approx(1000)
        assert savings_for_level(250, 1000) == pytest.approx(1000)

    def test_savings_for_level_degenerate_target(self):
        """Test non-positive targets need nothing."""
        assert savings_for_level(50, 0) == 0.0
        assert savings_for_level(50, -10) == 0.0

    def test_savings_to_evolution_reaches_threshold(self):
        """Test saving the returned amount (plus a cent) evolves."""
        needed = savings_to_evolution(0, 1000, 1)
        assert calculate_level(needed + 0.01, 1000) >= 16
        needed = savings_to_evolution(0, 1000, 2)
        assert calculate_level(needed + 0.01, 1000) >= 36

    def test_savings_to_evolution_already_there(self):
        """Test nothing more is needed once evolved."""
        assert savings_to_evolution(900, 1000, 2) == 0.0

    def test_savings_to_next_level_positive(self):
        """Test there is always something left before level 100."""
        assert savings_to_next_level(160, 1000) > 0

    def test_savings_to_next_level_at_max(self):
        """Test nothing is left at level 100."""
        assert savings_to_next_level(1000, 1000) == 0.0


class TestExpProgress:
    """Tests for experience within a level."""

    def test_max_level(self):
        """Test level 100 reports a full bar."""
        assert exp_progress(1000, 1000) == (100.0, 0.0, 100.0)

    def test_degenerate_target(self):
        """Test a zero target reports an empty bar."""
        assert exp_progress(500, 0) == (0.0, 100.0, 0.0)

    def test_mid_level_values(self):
        """Test the figures for 160 saved towards 1000 (level 21)."""
        current, to_next, pct = exp_progress(160, 1000)
        assert (current, to_next, pct) == pytest.approx((0.55, 8.41, 6.2), abs=0.05)

        level_start = savings_for_level(21, 1000)
        level_range = savings_for_level(22, 1000) - level_start
        assert current == pytest.approx(160 - level_start, abs=0.01)
        assert current + to_next == pytest.approx(level_range, abs=0.01)

    def test_evolution_amount_lands_on_threshold(self):
        """Test the bar at the evolution amount sits at the start of level 16."""
        needed = savings_to_evolution(0, 1000, 1)
        level = calculate_level(needed, 1000)
        _, _, pct = exp_progress(needed, 1000)
        # The floor may put the exact amount a hair below level 16
        if level == 16:
            assert pct <= 1.0
        else:
            assert level == 15
            assert pct >= 99.0

        current, _, pct = exp_progress(needed + 0.01, 1000)
        assert calculate_level(needed + 0.01, 1000) == 16
        assert current == pytest.approx(0.01, abs=0.01)
        assert pct < 1.0

    def test_percentage_in_range(self):
        """Test the bar stays within 0..100."""
        for x in (-50, 0, 1, 160, 333.33, 999):
            _, to_next, pct = exp_progress(x, 1000)
            assert 0.0 <= pct <= 100.0
            assert to_next >= 0.0


class TestAccountStats:
    """Tests for the full projection."""

    def test_scenario_stage_one(self):
        """Test 160 saved towards 1000 is level 21, stage 1."""
        stats = account_stats(make_account(1000, 160))
        assert stats.total_saved == 160
        assert stats.level == 21
        assert stats.evolution_stage == 1
        assert stats.progress_percentage == 16.0

    def test_zero_target(self):
        """Test a zero target reports level 1 and 0%."""
        stats = account_stats(make_account(0, 500))
        assert stats.level == 1
        assert stats.progress_percentage == 0.0

    def test_over_saving(self):
        """Test percentage passes 100 while level stays capped."""
        stats = account_stats(make_account(1000, 1500))
        assert stats.level == 100
        assert stats.is_max_level
        assert stats.progress_percentage == 150.0

    def test_withdrawals_count(self):
        """Test withdrawals reduce the total."""
        stats = account_stats(make_account(1000, 500, -200))
        assert stats.total_saved == 300
        assert total_saved(make_account(1000).entries) == 0.0

    def test_progress_percentage_rounding(self):
        """Test percentage is rounded to one decimal."""
        assert progress_percentage(1, 3) == 33.3

    def test_progress_percentage_ties_round_up(self):
        """Test exact halves round up rather than to even."""
        assert progress_percentage(1, 16) == 6.3
        assert progress_percentage(5, 16) == 31.3
        assert progress_percentage(1, 8) == 12.5


class TestPreviews:
    """Tests for the non-mutating previews."""

    def test_would_level_up(self):
        """Test a preview of crossing a level."""
        account = make_account(1000)
        assert would_level_up(account, 160) is True
        assert would_level_up(account, 0.001) is False
        assert account.entries == []

    def test_would_evolve(self):
        """Test a preview of an evolution."""
        account = make_account(1000, 50)
        assert would_evolve(account, 110) == (True, 0, 1)
        assert would_evolve(account, 1) == (False, 0, 0)


class TestDisplayHelpers:
    """Tests for level descriptions and money formatting."""

    def test_level_descriptions(self):
        """Test the description ladder."""
        assert level_description(1) == "Brand new!"
        assert level_description(5) == "Just starting!"
        assert level_description(16) == "First evolution!"
        assert level_description(36) == "Fully evolved!"
        assert level_description(99) == "Almost there!"
        assert level_description(100) == "MAX LEVEL!"

    def test_format_currency_before(self):
        """Test symbol before the amount."""
        assert format_currency(1234.5, CURRENCIES[0]) == "$1,234.50"

    def test_format_currency_after(self):
        """Test symbol after the amount."""
        assert format_currency(1234.5, find_currency("SEK")) == "1,234.50 kr"

    def test_format_currency_negative(self):
        """Test negatives get a leading minus."""
        assert format_currency(-20, CURRENCIES[0]) == "-$20.00"
