"""Damage formula value type."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class DamageFormula(BaseModel):
    """A damage roll such as ``2d8+3``, or a flat value such as ``6``.

    ``die is None`` marks a flat value: ``count`` is then 0 and ``bonus`` holds
    the value itself.
    """

    model_config = ConfigDict(frozen=True)

    count: int = 0
    die: int | None = None
    """Number of sides, e.g. ``8`` for ``d8``."""

    bonus: int = 0

    @field_validator("count")
    @classmethod
    def _count_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Dice count cannot be negative")
        return v

    @classmethod
    def flat(cls, value: int) -> DamageFormula:
        return cls(count=0, die=None, bonus=value)

    @property
    def is_flat(self) -> bool:
        return self.die is None

    @property
    def flat_value(self) -> int:
        """The damage of a flat formula (its bonus)."""
        return self.bonus
