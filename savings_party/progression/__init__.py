"""Progression math package."""

from savings_party.progression.calculator import (
    CURVE_EXPONENT,
    EVOLUTION_THRESHOLDS,
    MAX_LEVEL,
    account_stats,
    calculate_level,
    evolution_stage,
    exp_progress,
    level_description,
    progress_percentage,
    savings_for_level,
    savings_to_evolution,
    savings_to_next_level,
    total_saved,
    would_evolve,
    would_level_up,
)
from savings_party.progression.formatting import format_currency

__all__ = [
    "CURVE_EXPONENT",
    "EVOLUTION_THRESHOLDS",
    "MAX_LEVEL",
    "account_stats",
    "calculate_level",
    "evolution_stage",
    "exp_progress",
    "format_currency",
    "level_description",
    "progress_percentage",
    "savings_for_level",
    "savings_to_evolution",
    "savings_to_next_level",
    "total_saved",
    "would_evolve",
    "would_level_up",
]
