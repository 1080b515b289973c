"""Benchmark table rows -- the per-archetype, per-tier stat guidance.

Range fields are kept as the source text (``"12–14"``, ``"+0 to +2"``,
``"7/14"``) and only interpreted by :mod:`adv_manager.rescale.ranges`, so the
table stays a faithful copy of the published guidance.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class Archetype(str, Enum):
    """The ten adversary roles that select a benchmark row."""

    BRUISER = "bruiser"
    HORDE = "horde"
    LEADER = "leader"
    MINION = "minion"
    RANGED = "ranged"
    SKULK = "skulk"
    SOLO = "solo"
    SOCIAL = "social"
    STANDARD = "standard"
    SUPPORT = "support"


class ExperienceBenchmark(BaseModel):
    """How many experiences an adversary of this tier has, and their bonus."""

    model_config = ConfigDict(frozen=True)

    amount: str
    """Range text for the number of experiences, e.g. ``"1–2"``."""

    modifier: str
    """Signed range text for the experience bonus, e.g. ``"+2/+3"``."""


class TierBenchmark(BaseModel):
    """One benchmark row: an archetype at a single tier."""

    model_config = ConfigDict(frozen=True)

    difficulty: str
    hp: str
    stress: str
    attack_modifier: str
    """Signed range text (``"-2 to +0"``)."""

    threshold_min: str | None = None
    """Lowest ``"major/severe"`` pair.  Absent for minions."""

    threshold_max: str | None = None
    """Highest ``"major/severe"`` pair.  Absent for minions."""

    damage_rolls: list[str] = []
    """Candidate damage formulas for this tier."""

    halved_damage_rolls: list[str] = []
    """Horde only: damage once the horde is at half HP or below."""

    basic_attack_range: str | None = None
    """Minion only: flat damage range for every attack."""

    minion_feature_range: str | None = None
    """Minion only: range for the N in ``Minion (N)``."""

    avg_damage: str | None = None
    """Informational average damage band."""

    experiences: ExperienceBenchmark | None = None

    suggested_features: list[str] = []
    """Feature names offered on tier-up.  May contain ``"Relentless (X)"``."""

    @field_validator("suggested_features", "damage_rolls", "halved_damage_rolls", mode="before")
    @classmethod
    def _empty_string_is_empty_list(cls, v: object) -> object:
        # The published table writes "no entries" as "".
        if v is None or v == "":
            return []
        return v

    @property
    def has_thresholds(self) -> bool:
        return bool(self.threshold_min and self.threshold_max)

    @property
    def is_minion(self) -> bool:
        """True when every damage value is a flat basic-attack roll."""
        return self.basic_attack_range is not None
