"""
Creature Catalog

Static catalog of the starter evolution lines a savings account can be
represented by (generations 1-9 plus the Hisuian variants).

The mutation engine only needs two things from here: whether a reference
resolves, and the base form's name for defaulting a nickname. Everything
else is display metadata for the UI.
"""

from abc import ABC, abstractmethod
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SPRITE_BASE = "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon"

CreatureType = Literal["grass", "fire", "water"]

GENERATION_NAMES: dict[int, str] = {
    1: "Kanto",
    2: "Johto",
    3: "Hoenn",
    4: "Sinnoh",
    5: "Unova",
    6: "Kalos",
    7: "Alola",
    8: "Galar/Hisui",
    9: "Paldea",
}

TYPE_COLORS: dict[str, dict[str, str]] = {
    "grass": {"primary": "#78C850", "secondary": "#4E8234", "light": "#A7DB8D"},
    "fire": {"primary": "#F08030", "secondary": "#9C531F", "light": "#F5AC78"},
    "water": {"primary": "#6890F0", "secondary": "#445E9C", "light": "#9DB7F5"},
}


class CreatureStage(BaseModel):
    """One form in an evolution line."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="National dex / sprite ID")
    name: str

    @property
    def sprite_url(self) -> str:
        return f"{SPRITE_BASE}/{self.id}.png"

    @property
    def animated_sprite_url(self) -> str:
        return f"{SPRITE_BASE}/versions/generation-v/black-white/animated/{self.id}.gif"


class CreatureLine(BaseModel):
    """A complete three-stage evolution line."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    generation: int = Field(..., ge=1, le=9)
    type: CreatureType
    is_hisuian: bool = False
    stages: tuple[CreatureStage, CreatureStage, CreatureStage]

    @property
    def base_name(self) -> str:
        return self.stages[0].name

    @property
    def category(self) -> str:
        return self.type

    def stage(self, index: int) -> CreatureStage:
        """Form for an evolution stage, clamped to the line."""
        return self.stages[max(0, min(index, len(self.stages) - 1))]


class CreatureCatalogInterface(ABC):
    """
    Abstract catalog lookup.

    The engine validates creature references through this, so tests and
    alternative front-ends can supply their own catalog.
    """

    @abstractmethod
    def resolve(self, creature_ref: str) -> Optional[CreatureLine]:
        """Return the line for a reference, or None if unknown."""
        pass

    @abstractmethod
    def all(self) -> list[CreatureLine]:
        """All lines in display order."""
        pass


def _line(
    line_id: str,
    generation: int,
    creature_type: CreatureType,
    stages: list[tuple[int, str]],
    is_hisuian: bool = False,
) -> CreatureLine:
    return CreatureLine(
        id=line_id,
        name=stages[0][1],
        generation=generation,
        type=creature_type,
        is_hisuian=is_hisuian,
        stages=tuple(CreatureStage(id=sid, name=name) for sid, name in stages),
    )


STARTER_LINES: list[CreatureLine] = [
    # Generation 1
    _line("bulbasaur-line", 1, "grass", [(1, "Bulbasaur"), (2, "Ivysaur"), (3, "Venusaur")]),
    _line("charmander-line", 1, "fire", [(4, "Charmander"), (5, "Charmeleon"), (6, "Charizard")]),
    _line("squirtle-line", 1, "water", [(7, "Squirtle"), (8, "Wartortle"), (9, "Blastoise")]),
    # Generation 2
    _line("chikorita-line", 2, "grass", [(152, "Chikorita"), (153, "Bayleef"), (154, "Meganium")]),
    _line("cyndaquil-line", 2, "fire", [(155, "Cyndaquil"), (156, "Quilava"), (157, "Typhlosion")]),
    _line("totodile-line", 2, "water", [(158, "Totodile"), (159, "Croconaw"), (160, "Feraligatr")]),
    # Generation 3
    _line("treecko-line", 3, "grass", [(252, "Treecko"), (253, "Grovyle"), (254, "Sceptile")]),
    _line("torchic-line", 3, "fire", [(255, "Torchic"), (256, "Combusken"), (257, "Blaziken")]),
    _line("mudkip-line", 3, "water", [(258, "Mudkip"), (259, "Marshtomp"), (260, "Swampert")]),
    # Generation 4
    _line("turtwig-line", 4, "grass", [(387, "Turtwig"), (388, "Grotle"), (389, "Torterra")]),
    _line("chimchar-line", 4, "fire", [(390, "Chimchar"), (391, "Monferno"), (392, "Infernape")]),
    _line("piplup-line", 4, "water", [(393, "Piplup"), (394, "Prinplup"), (395, "Empoleon")]),
    # Generation 5
    _line("snivy-line", 5, "grass", [(495, "Snivy"), (496, "Servine"), (497, "Serperior")]),
    _line("tepig-line", 5, "fire", [(498, "Tepig"), (499, "Pignite"), (500, "Emboar")]),
    _line("oshawott-line", 5, "water", [(501, "Oshawott"), (502, "Dewott"), (503, "Samurott")]),
    # Generation 6
    _line("chespin-line", 6, "grass", [(650, "Chespin"), (651, "Quilladin"), (652, "Chesnaught")]),
    _line("fennekin-line", 6, "fire", [(653, "Fennekin"), (654, "Braixen"), (655, "Delphox")]),
    _line("froakie-line", 6, "water", [(656, "Froakie"), (657, "Frogadier"), (658, "Greninja")]),
    # Generation 7
    _line("rowlet-line", 7, "grass", [(722, "Rowlet"), (723, "Dartrix"), (724, "Decidueye")]),
    _line("litten-line", 7, "fire", [(725, "Litten"), (726, "Torracat"), (727, "Incineroar")]),
    _line("popplio-line", 7, "water", [(728, "Popplio"), (729, "Brionne"), (730, "Primarina")]),
    # Generation 8
    _line("grookey-line", 8, "grass", [(810, "Grookey"), (811, "Thwackey"), (812, "Rillaboom")]),
    _line("scorbunny-line", 8, "fire", [(813, "Scorbunny"), (814, "Raboot"), (815, "Cinderace")]),
    _line("sobble-line", 8, "water", [(816, "Sobble"), (817, "Drizzile"), (818, "Inteleon")]),
    # Generation 9
    _line("sprigatito-line", 9, "grass", [(906, "Sprigatito"), (907, "Floragato"), (908, "Meowscarada")]),
    _line("fuecoco-line", 9, "fire", [(909, "Fuecoco"), (910, "Crocalor"), (911, "Skeledirge")]),
    _line("quaxly-line", 9, "water", [(912, "Quaxly"), (913, "Quaxwell"), (914, "Quaquaval")]),
    # Hisuian variants
    _line(
        "rowlet-hisui-line", 8, "grass",
        [(722, "Rowlet"), (723, "Dartrix"), (10239, "H-Decidueye")],
        is_hisuian=True,
    ),
    _line(
        "cyndaquil-hisui-line", 8, "fire",
        [(155, "Cyndaquil"), (156, "Quilava"), (10240, "H-Typhlosion")],
        is_hisuian=True,
    ),
    _line(
        "oshawott-hisui-line", 8, "water",
        [(501, "Oshawott"), (502, "Dewott"), (10241, "H-Samurott")],
        is_hisuian=True,
    ),
]


class StarterCatalog(CreatureCatalogInterface):
    """In-process catalog over a fixed list of lines."""

    def __init__(self, lines: Optional[list[CreatureLine]] = None):
        self._lines = list(lines if lines is not None else STARTER_LINES)
        self._by_id = {line.id: line for line in self._lines}

    def resolve(self, creature_ref: str) -> Optional[CreatureLine]:
        return self._by_id.get(creature_ref)

    def all(self) -> list[CreatureLine]:
        return list(self._lines)

    def by_generation(self, generation: int) -> list[CreatureLine]:
        return [line for line in self._lines if line.generation == generation]

    def by_type(self, creature_type: str) -> list[CreatureLine]:
        return [line for line in self._lines if line.type == creature_type]

    def hisuian(self) -> list[CreatureLine]:
        return [line for line in self._lines if line.is_hisuian]

    def standard(self) -> list[CreatureLine]:
        return [line for line in self._lines if not line.is_hisuian]
