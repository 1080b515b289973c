"""Encounter Battle Point budgeting."""

from adv_manager.encounters.budget import (
    average_tier,
    compute_budget,
    damage_boost_die,
    damage_boost_feature,
    detect_special_abilities,
    difficulty_level,
    unit_cost,
    unit_from_snapshot,
)

__all__ = [
    "average_tier",
    "compute_budget",
    "damage_boost_die",
    "damage_boost_feature",
    "detect_special_abilities",
    "difficulty_level",
    "unit_cost",
    "unit_from_snapshot",
]
