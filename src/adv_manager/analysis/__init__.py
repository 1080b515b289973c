"""Hit-probability analysis."""

from adv_manager.analysis.hit_chance import (
    HitChance,
    adversary_hit_chance,
    d20_hit_percentage,
    pc_hit_chance,
    pc_hit_chance_range,
)

__all__ = [
    "HitChance",
    "adversary_hit_chance",
    "d20_hit_percentage",
    "pc_hit_chance",
    "pc_hit_chance_range",
]
