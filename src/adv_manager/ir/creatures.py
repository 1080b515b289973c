"""Creature snapshots -- the read-only input to a rescale.

A snapshot is what an :class:`~adv_manager.content.repository.ActorRepository`
hands the engine.  Damage values stay as stored text so a malformed value can
be skipped per field instead of failing validation for the whole creature.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, Field, field_validator


def _new_id() -> str:
    return uuid.uuid4().hex[:16]


class Thresholds(BaseModel):
    """Damage thresholds: damage at or above ``major`` marks 2 HP, ``severe`` 3."""

    major: int = 0
    severe: int = 0

    def __str__(self) -> str:
        return f"{self.major}/{self.severe}"


class Experience(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    value: int = 2
    description: str = ""


class SubAction(BaseModel):
    """An action nested inside an ability, optionally dealing damage."""

    id: str = Field(default_factory=_new_id)
    name: str = ""
    description: str = ""
    damage: str | None = None
    """Damage formula text (``"2d6+3"`` or ``"4"``), or None for no damage."""


class AbilityRecord(BaseModel):
    """An adversary feature.

    Two name conventions carry state: ``"Horde (2d6+3)"`` embeds the halved
    damage formula and ``"Minion (5)"`` embeds the overflow-damage threshold.
    """

    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""
    """Rich (HTML) text."""

    kind: str = "passive"
    actions: list[SubAction] = Field(default_factory=list)


class CreatureSnapshot(BaseModel):
    """Immutable-by-convention view of one adversary at its current tier."""

    id: str = Field(default_factory=_new_id)
    name: str
    tier: int = 1
    archetype: str = "standard"
    """Role tag; matched against the benchmark table case-insensitively."""

    difficulty: int = 0
    hp_max: int = 0
    hp_marked: int = 0
    stress_max: int = 0
    thresholds: Thresholds = Field(default_factory=Thresholds)
    attack_bonus: int = 0
    attack_damage: str | None = None
    """Primary attack damage formula text."""

    alternate_damage: str | None = None
    """Horde halved damage formula text."""

    abilities: list[AbilityRecord] = Field(default_factory=list)
    experiences: list[Experience] = Field(default_factory=list)

    @field_validator("archetype")
    @classmethod
    def _normalise_archetype(cls, v: str) -> str:
        return (v or "standard").strip().lower()

    def ability_names(self) -> list[str]:
        return [a.name for a in self.abilities]
