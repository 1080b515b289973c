"""Encounter budget models: units in, budget state out."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class SpecialAbility(str, Enum):
    """High-impact features that shift encounter difficulty when combined."""

    SUMMONER = "summoner"
    SPOTLIGHTER = "spotlighter"
    RELENTLESS = "relentless"
    MOMENTUM = "momentum"
    TERRIFYING = "terrifying"


class FearBand(str, Enum):
    """How much Fear the GM intends to spend during the fight."""

    NONE_TO_ONE = "0-1"
    ONE_TO_THREE = "1-3"
    TWO_TO_FOUR = "2-4"
    FOUR_TO_EIGHT = "4-8"
    SIX_TO_TWELVE = "6-12"


class DifficultyLabel(str, Enum):
    VERY_EASY = "Very Easy"
    EASY = "Easy"
    BALANCED = "Balanced"
    CHALLENGING = "Challenging"
    HARD = "Hard"
    DEADLY = "Deadly"
    OUT_OF_TIER = "Out of Tier"


class EncounterUnit(BaseModel):
    """One adversary placed in an encounter."""

    archetype: str
    tier: int | None = None
    special_abilities: set[SpecialAbility] = Field(default_factory=set)
    damage_boost: bool = False
    """The GM added the tier's extra damage die (lowers the budget limit)."""

    name: str = ""


class BudgetModifier(BaseModel):
    """An adjustment applied to the budget limit."""

    key: str
    label: str
    value: int
    manual: bool = False


class BudgetState(BaseModel):
    """Battle Point budget for one encounter against one party."""

    party_count: int
    party_tier: int
    fear_band: FearBand
    easier: bool = False
    harder: bool = False

    base_budget: int
    limit: int
    cost: int
    modifiers: list[BudgetModifier] = []
    """Modifiers that actually applied, in evaluation order."""

    level: int
    """Difficulty level 0 (Very Easy) .. 5 (Deadly) after shifts and clamping."""

    difficulty: DifficultyLabel
    average_tier: int = 0
    """Rounded mean tier of the units, 0 for an empty encounter."""

    @property
    def remaining(self) -> int:
        return self.limit - self.cost

    @property
    def out_of_tier(self) -> bool:
        return self.difficulty is DifficultyLabel.OUT_OF_TIER
