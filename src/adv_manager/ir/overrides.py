"""Manual values a game master can pin before a rescale."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RescaleOverrides(BaseModel):
    """Per-field manual values.  Any field left as ``None`` is rolled.

    The engine only reads this object; it is frozen so a caller can reuse one
    set of overrides across a preview and the final apply.
    """

    model_config = ConfigDict(frozen=True)

    difficulty: int | None = None
    hp: int | None = None
    stress: int | None = None
    major: int | None = None
    """Only used when ``severe`` is also set."""

    severe: int | None = None
    attack_bonus: int | None = None

    damage_formula: str | None = None
    """Replaces the primary attack damage outright."""

    alternate_damage_formula: str | None = None
    """Replaces the horde halved damage, and the formula in ``Horde (...)``."""

    minion_threshold: int | None = None
    """Pins the N of every ``Minion (N)`` feature."""

    ability_names: dict[str, str] = {}
    """Ability id -> new full name."""

    ability_damage: dict[str, str] = {}
    """Ability id -> damage formula for its first damaging action."""

    suggested_features: list[str] | None = None
    """Explicit feature names to add on tier-up instead of a random pick."""

    @property
    def has_thresholds(self) -> bool:
        return bool(self.major and self.severe)
