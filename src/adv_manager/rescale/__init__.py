"""Tier rescaling engine: dice, ranges, damage, feature text and the orchestrator."""

from adv_manager.rescale.actor import ActorRescaler, retag_name
from adv_manager.rescale.damage import (
    compute_new_damage,
    rescale_damage,
    rescale_damage_text,
    reroll_flat_damage,
)
from adv_manager.rescale.dice import format_formula, normalise, parse_formula, require_formula
from adv_manager.rescale.experiences import rescale_experiences
from adv_manager.rescale.features import (
    MINION_DESCRIPTION_TEMPLATE,
    AbilityRewrite,
    apply_substitutions,
    rewrite_ability,
)
from adv_manager.rescale.ranges import (
    parse_threshold_pair,
    roll_signed,
    roll_threshold_pair,
    roll_uniform,
)
from adv_manager.rescale.suggestions import (
    available_features_for_tier,
    pick_new_features,
    resolve_feature_name,
)

__all__ = [
    "AbilityRewrite",
    "ActorRescaler",
    "MINION_DESCRIPTION_TEMPLATE",
    "apply_substitutions",
    "available_features_for_tier",
    "compute_new_damage",
    "format_formula",
    "normalise",
    "parse_formula",
    "parse_threshold_pair",
    "pick_new_features",
    "require_formula",
    "rescale_damage",
    "rescale_damage_text",
    "rescale_experiences",
    "reroll_flat_damage",
    "resolve_feature_name",
    "retag_name",
    "rewrite_ability",
    "roll_signed",
    "roll_threshold_pair",
    "roll_uniform",
]
