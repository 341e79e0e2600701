"""Creature catalog package."""

from savings_party.catalog.creatures import (
    GENERATION_NAMES,
    STARTER_LINES,
    TYPE_COLORS,
    CreatureCatalogInterface,
    CreatureLine,
    CreatureStage,
    StarterCatalog,
)

__all__ = [
    "GENERATION_NAMES",
    "STARTER_LINES",
    "TYPE_COLORS",
    "CreatureCatalogInterface",
    "CreatureLine",
    "CreatureStage",
    "StarterCatalog",
]
