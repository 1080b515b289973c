"""Rescale output: the diff a caller applies to its stored creature.

A :class:`RescaleResult` is built fresh per call and frozen once returned.
Every field holds only what changed; unchanged stats are ``None``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .creatures import Experience, SubAction, Thresholds


class StatChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    old: int
    new: int


class ThresholdChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    old: Thresholds
    new: Thresholds


class DamageChange(BaseModel):
    """A formula substitution, e.g. ``2d6+3`` -> ``3d6+6``."""

    model_config = ConfigDict(frozen=True)

    old: str
    new: str


class StatChanges(BaseModel):
    model_config = ConfigDict(frozen=True)

    difficulty: StatChange | None = None
    hp_max: StatChange | None = None
    hp_marked: StatChange | None = None
    """Set whenever ``hp_max`` changes and marked HP was not already 0."""

    stress_max: StatChange | None = None
    thresholds: ThresholdChange | None = None
    attack_bonus: StatChange | None = None

    def is_empty(self) -> bool:
        return all(v is None for v in self.__dict__.values())


class AbilityChangeKind(str, Enum):
    DAMAGE = "damage"
    NAME_HORDE = "name_horde"
    NAME_MINION = "name_minion"
    NAME_OVERRIDE = "name_override"


class AbilityChange(BaseModel):
    """One reportable change to an ability (for previews and logs)."""

    model_config = ConfigDict(frozen=True)

    ability_id: str
    ability_name: str
    """Name before the rescale."""

    kind: AbilityChangeKind
    old: str
    new: str


class AbilityUpdate(BaseModel):
    """The rewritten content of one ability, ready to persist."""

    model_config = ConfigDict(frozen=True)

    ability_id: str
    name: str
    description: str
    actions: list[SubAction]


class ExperienceChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    experience_id: str
    name: str
    old: int
    new: int


class RescaleResult(BaseModel):
    """Everything that changes when one creature moves between tiers."""

    model_config = ConfigDict(frozen=True)

    actor_id: str
    current_tier: int
    target_tier: int
    old_name: str
    name: str
    stats: StatChanges = StatChanges()
    primary_damage: DamageChange | None = None
    alternate_damage: DamageChange | None = None
    experience_changes: list[ExperienceChange] = []
    experiences_added: list[Experience] = []
    ability_changes: list[AbilityChange] = []
    ability_updates: list[AbilityUpdate] = []
    features_added: list[str] = []
    """Names of features to create on the creature."""

    features_removed: list[str] = []
    """Ability ids to delete (a replaced ``Relentless``)."""

    stats_log: list[str] = []
    """Sheet-level change lines (stats, damage, experiences)."""

    feature_log: list[str] = []
    """Feature-level change lines (damage, renames, added features)."""

    skipped: list[str] = []
    """Fields left untouched because their stored value was unusable."""

    @property
    def log(self) -> list[str]:
        """All change lines in the order they were produced."""
        return [*self.stats_log, *self.feature_log]


class FailureReason(str, Enum):
    UNKNOWN_ARCHETYPE = "unknown_archetype"
    MISSING_TIER_BENCHMARK = "missing_tier_benchmark"


class RescaleFailure(BaseModel):
    """A rescale that could not run; nothing about the creature changes."""

    model_config = ConfigDict(frozen=True)

    actor_id: str
    reason: FailureReason
    message: str

