"""Hit probabilities for an adversary's attack and against its Difficulty.

Adversaries roll 1d20 + attack bonus against a PC's Evasion.  PCs roll
duality dice (2d12) + trait against the adversary's Difficulty, and any
doubles also count as a hit.  Percentages are rounded half up.
"""

from __future__ import annotations

import math

from pydantic import BaseModel

_D12_OUTCOMES = 12 * 12


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class HitChance(BaseModel):
    """Hit percentages against the easiest and hardest target of a range."""

    minimum: int
    maximum: int

    def __str__(self) -> str:
        return f"(Min: {self.minimum}% | Max: {self.maximum}%)"


def d20_hit_percentage(target: int) -> int:
    """Chance that 1d20 meets or beats *target*.

    A target of 1 or less always hits; above 20 never does.
    """
    if target > 20:
        return 0
    target = max(target, 1)
    return _round_half_up((21 - target) / 20 * 100)


def adversary_hit_chance(attack_bonus: int, evasion_min: int, evasion_max: int) -> HitChance:
    """Chance an adversary hits PCs whose Evasion spans *evasion_min*..*evasion_max*."""
    low, high = sorted((evasion_min, evasion_max))
    return HitChance(
        minimum=d20_hit_percentage(high - attack_bonus),
        maximum=d20_hit_percentage(low - attack_bonus),
    )


def pc_hit_chance(difficulty: int, trait_bonus: int = 0) -> int:
    """Chance a PC with *trait_bonus* hits an adversary of *difficulty*."""
    hits = sum(
        1
        for d1 in range(1, 13)
        for d2 in range(1, 13)
        if d1 == d2 or d1 + d2 + trait_bonus >= difficulty
    )
    return _round_half_up(hits / _D12_OUTCOMES * 100)


def pc_hit_chance_range(difficulty: int, standard_trait: int, max_trait: int) -> HitChance:
    """PC hit chance with a typical trait and with the highest possible one."""
    return HitChance(
        minimum=pc_hit_chance(difficulty, standard_trait),
        maximum=pc_hit_chance(difficulty, max_trait),
    )
