"""
Level & Evolution Calculator

Pure functions mapping (total saved, target amount) to a level, an
evolution stage and experience figures, plus the inverse computations
behind "how much more until X".

The curve is concave: level = floor((saved / target) ** 0.85 * 100).
Early levels come quickly, the last ones take real saving.

IMPORTANT: Nothing here raises. Degenerate input (non-positive target,
negative totals) resolves to level 1, stage 0 and zero percentages so the
UI always has something to render.
"""

import math
from typing import Iterable

from savings_party.models.savings import ProgressStats, SavingsAccount, SavingsEntry

MAX_LEVEL = 100
MIN_LEVEL = 1
CURVE_EXPONENT = 0.85

# Levels at which the creature evolves (e.g. Charmander at 16, Charmeleon at 36).
# Expressed as levels, so they hold for any target amount.
EVOLUTION_THRESHOLDS: dict[int, int] = {
    1: 16,
    2: 36,
}

LEVEL_DESCRIPTIONS: list[tuple[int, str]] = [
    (100, "MAX LEVEL!"),
    (90, "Almost there!"),
    (75, "Getting strong!"),
    (50, "Halfway there!"),
    (36, "Fully evolved!"),
    (25, "Growing fast!"),
    (16, "First evolution!"),
    (10, "Making progress!"),
    (5, "Just starting!"),
]


def _round_half_up(value: float, digits: int) -> float:
    """Round with ties going up (2.25 -> 2.3), not to the even neighbour."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def total_saved(entries: Iterable[SavingsEntry]) -> float:
    """Sum of all entry amounts; 0 for no entries."""
    return sum((entry.amount for entry in entries), 0.0)


def calculate_level(total: float, target_amount: float) -> int:
    """Level in [1, 100]. Saving past the target does not go beyond 100."""
    if not target_amount > 0 or not total > 0:
        return MIN_LEVEL

    progress = min(total / target_amount, 1.0)
    curved = progress ** CURVE_EXPONENT
    if not math.isfinite(curved):
        return MIN_LEVEL

    level = max(MIN_LEVEL, math.floor(curved * MAX_LEVEL))
    return min(level, MAX_LEVEL)


def evolution_stage(level: int) -> int:
    """Stage 0, 1 or 2 for a level."""
    if level >= EVOLUTION_THRESHOLDS[2]:
        return 2
    if level >= EVOLUTION_THRESHOLDS[1]:
        return 1
    return 0


def savings_for_level(level: int, target_amount: float) -> float:
    """
    Amount at which a level begins, on the continuous curve.

    The forward curve floors, so this is the approximate start of the level
    rather than an exact inverse.
    """
    if not target_amount > 0:
        return 0.0
    level = max(MIN_LEVEL, min(level, MAX_LEVEL))
    return (level / MAX_LEVEL) ** (1 / CURVE_EXPONENT) * target_amount


def exp_progress(total: float, target_amount: float) -> tuple[float, float, float]:
    """
    Experience within the current level.

    Returns:
        (current_exp, exp_to_next_level, exp_percentage)
    """
    if not target_amount > 0:
        return 0.0, 100.0, 0.0

    level = calculate_level(total, target_amount)
    if level >= MAX_LEVEL:
        return 100.0, 0.0, 100.0

    level_start = savings_for_level(level, target_amount)
    level_range = savings_for_level(level + 1, target_amount) - level_start
    within_level = total - level_start

    if level_range <= 0:
        percentage = 100.0
    else:
        percentage = min(100.0, max(0.0, within_level / level_range * 100))

    return (
        max(0.0, _round_half_up(within_level, 2)),
        max(0.0, _round_half_up(level_range - within_level, 2)),
        _round_half_up(percentage, 1),
    )


def savings_to_next_level(total: float, target_amount: float) -> float:
    """How much more must be saved to gain the next level."""
    _, to_next, _ = exp_progress(total, target_amount)
    return max(0.0, to_next)


def savings_to_evolution(total: float, target_amount: float, target_stage: int) -> float:
    """How much more must be saved to reach evolution stage 1 or 2."""
    threshold = EVOLUTION_THRESHOLDS[2] if target_stage >= 2 else EVOLUTION_THRESHOLDS[1]
    needed = savings_for_level(threshold, target_amount)
    return max(0.0, needed - total)


def progress_percentage(total: float, target_amount: float) -> float:
    """Saved amount as a percentage of the target, unbounded above."""
    if not target_amount > 0:
        return 0.0
    return _round_half_up(total / target_amount * 100, 1)


def account_stats(account: SavingsAccount) -> ProgressStats:
    """Recompute the full progress projection from the account's entries."""
    total = total_saved(account.entries)
    level = calculate_level(total, account.target_amount)
    current_exp, to_next, exp_pct = exp_progress(total, account.target_amount)

    return ProgressStats(
        total_saved=total,
        level=level,
        current_exp=current_exp,
        exp_to_next_level=to_next,
        exp_percentage=exp_pct,
        evolution_stage=evolution_stage(level),
        progress_percentage=progress_percentage(total, account.target_amount),
    )


def would_level_up(account: SavingsAccount, amount: float) -> bool:
    """Preview: would adding this amount raise the level?"""
    total = total_saved(account.entries)
    before = calculate_level(total, account.target_amount)
    after = calculate_level(total + amount, account.target_amount)
    return after > before


def would_evolve(account: SavingsAccount, amount: float) -> tuple[bool, int, int]:
    """
    Preview: would adding this amount evolve the creature?

    Returns:
        (evolves, from_stage, to_stage)
    """
    total = total_saved(account.entries)
    from_stage = evolution_stage(calculate_level(total, account.target_amount))
    to_stage = evolution_stage(calculate_level(total + amount, account.target_amount))
    return to_stage > from_stage, from_stage, to_stage


def level_description(level: int) -> str:
    for threshold, text in LEVEL_DESCRIPTIONS:
        if level >= threshold:
            return text
    return "Brand new!"
