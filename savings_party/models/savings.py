"""
Core Data Models for Savings Party

These models define the schemas for everything the tracker persists or hands
to the presentation layer:
1. Accounts (savings goals) and their entries
2. Derived progress stats and transition events
3. User preferences (currency, sound)

DESIGN DECISION: Persisted models serialize with camelCase keys so a saved
party can be exchanged with other front-ends of the same tracker. Derived
models (ProgressStats, TransitionEvent) are never stored.
"""

from datetime import datetime, timezone
from typing import Literal, Optional
from uuid import uuid4

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a fresh unique identifier."""
    return str(uuid4())


class _InterchangeModel(BaseModel):
    """Base for models persisted as camelCase JSON."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_storage_dict(self) -> dict:
        """Convert to a JSON-compatible dict using interchange keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# ACCOUNTS AND ENTRIES
# =============================================================================

class SavingsEntry(_InterchangeModel):
    """
    One deposit (positive) or withdrawal (negative).

    Entries are never edited once created; they can only be deleted.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default_factory=new_id,
        description="Unique entry ID"
    )
    amount: float = Field(
        ...,
        allow_inf_nan=False,
        description="Signed amount: deposit > 0, withdrawal < 0"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Optional note describing the entry"
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        description="When the entry was recorded"
    )

    @field_validator("note")
    @classmethod
    def blank_note_is_absent(cls, v: Optional[str]) -> Optional[str]:
        """Store blank notes as no note at all."""
        if v is not None and not v.strip():
            return None
        return v


class BackgroundConfig(_InterchangeModel):
    """Card background chosen for an account."""

    theme: str = Field(
        default="default",
        min_length=1,
        max_length=50,
        description="Background theme name ('default' means none)"
    )


class SavingsAccount(_InterchangeModel):
    """
    A savings goal, represented by a creature from the catalog.

    CRITICAL: No level or stage is stored here. Progress is always
    recomputed from the full entry list.
    """

    id: str = Field(
        default_factory=new_id,
        description="Unique account ID"
    )
    nickname: str = Field(
        ...,
        max_length=100,
        description="User-given nickname for the creature"
    )
    creature_ref: str = Field(
        ...,
        validation_alias=AliasChoices("creatureRef", "creature_ref", "pokemonLineId"),
        serialization_alias="creatureRef",
        description="Evolution line ID in the creature catalog"
    )
    target_amount: float = Field(
        ...,
        allow_inf_nan=False,
        description="Goal amount; non-positive goals never progress"
    )
    entries: list[SavingsEntry] = Field(
        default_factory=list,
        description="Entries in insertion order"
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        description="When the account was created"
    )
    background: Optional[BackgroundConfig] = None

    def find_entry(self, entry_id: str) -> Optional[SavingsEntry]:
        """Return the entry with this ID, if any."""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    @property
    def deposit_count(self) -> int:
        """Number of positive entries."""
        return sum(1 for entry in self.entries if entry.amount > 0)


# =============================================================================
# DERIVED MODELS (never persisted)
# =============================================================================

class ProgressStats(BaseModel):
    """Progress projection of one account."""

    total_saved: float
    level: int = Field(ge=1, le=100)
    current_exp: float = Field(ge=0)
    exp_to_next_level: float = Field(ge=0)
    exp_percentage: float = Field(ge=0, le=100)
    evolution_stage: Literal[0, 1, 2]
    progress_percentage: float

    @property
    def is_max_level(self) -> bool:
        return self.level >= 100


class TransitionEvent(BaseModel):
    """
    Produced when a mutation raises an account's level or stage.

    Consumed immediately by the caller (overlay, sound, activity log).
    """
    model_config = ConfigDict(frozen=True)

    account_id: str
    old_level: int
    new_level: int
    evolved: bool
    old_stage: int
    new_stage: int

    @property
    def levels_gained(self) -> int:
        return self.new_level - self.old_level


# =============================================================================
# USER PREFERENCES
# =============================================================================

class CurrencyOption(_InterchangeModel):
    """Display configuration for one currency."""

    code: str = Field(..., min_length=3, max_length=3)
    symbol: str = Field(..., min_length=1)
    name: str
    position: Literal["before", "after"] = "before"


CURRENCIES: list[CurrencyOption] = [
    CurrencyOption(code="USD", symbol="$", name="US Dollar"),
    CurrencyOption(code="EUR", symbol="€", name="Euro"),
    CurrencyOption(code="GBP", symbol="£", name="British Pound"),
    CurrencyOption(code="JPY", symbol="¥", name="Japanese Yen"),
    CurrencyOption(code="CNY", symbol="¥", name="Chinese Yuan"),
    CurrencyOption(code="KRW", symbol="₩", name="Korean Won"),
    CurrencyOption(code="INR", symbol="₹", name="Indian Rupee"),
    CurrencyOption(code="BRL", symbol="R$", name="Brazilian Real"),
    CurrencyOption(code="CAD", symbol="C$", name="Canadian Dollar"),
    CurrencyOption(code="AUD", symbol="A$", name="Australian Dollar"),
    CurrencyOption(code="MXN", symbol="$", name="Mexican Peso"),
    CurrencyOption(code="PHP", symbol="₱", name="Philippine Peso"),
    CurrencyOption(code="THB", symbol="฿", name="Thai Baht"),
    CurrencyOption(code="VND", symbol="₫", name="Vietnamese Dong", position="after"),
    CurrencyOption(code="IDR", symbol="Rp", name="Indonesian Rupiah"),
    CurrencyOption(code="MYR", symbol="RM", name="Malaysian Ringgit"),
    CurrencyOption(code="SGD", symbol="S$", name="Singapore Dollar"),
    CurrencyOption(code="CHF", symbol="CHF", name="Swiss Franc"),
    CurrencyOption(code="SEK", symbol="kr", name="Swedish Krona", position="after"),
    CurrencyOption(code="NOK", symbol="kr", name="Norwegian Krone", position="after"),
    CurrencyOption(code="DKK", symbol="kr", name="Danish Krone", position="after"),
    CurrencyOption(code="PLN", symbol="zł", name="Polish Złoty", position="after"),
    CurrencyOption(code="RUB", symbol="₽", name="Russian Ruble", position="after"),
    CurrencyOption(code="TRY", symbol="₺", name="Turkish Lira"),
    CurrencyOption(code="ZAR", symbol="R", name="South African Rand"),
    CurrencyOption(code="AED", symbol="د.إ", name="UAE Dirham"),
    CurrencyOption(code="SAR", symbol="﷼", name="Saudi Riyal"),
    CurrencyOption(code="NZD", symbol="NZ$", name="New Zealand Dollar"),
    CurrencyOption(code="HKD", symbol="HK$", name="Hong Kong Dollar"),
    CurrencyOption(code="TWD", symbol="NT$", name="Taiwan Dollar"),
]


def find_currency(code: str) -> Optional[CurrencyOption]:
    """Look up a built-in currency by ISO code (case-insensitive)."""
    code = code.strip().upper()
    for currency in CURRENCIES:
        if currency.code == code:
            return currency
    return None


class UserSettings(_InterchangeModel):
    """Preferences stored alongside the party."""

    currency: CurrencyOption = Field(default_factory=lambda: CURRENCIES[0])
    sound_enabled: bool = True
    sound_volume: int = Field(default=70, ge=0, le=100)
