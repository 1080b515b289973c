"""Damage rescaling when a creature changes tier.

Pipeline for one damage value:
    flat value  -> shift by 2 per tier step
    dice value  -> same-die option from the target tier, else first option,
                   else ``<tier>d12+<2*tier>``
    then, on tier-up only, never let the bonus drop below the current one.
"""

from __future__ import annotations

import logging

from adv_manager.core.rng import RandomSource
from adv_manager.ir.formulas import DamageFormula
from adv_manager.ir.results import DamageChange

from .dice import format_formula, parse_formula, require_formula
from .ranges import roll_uniform

logger = logging.getLogger(__name__)

_FLAT_STEP_PER_TIER = 2
_FALLBACK_DIE = 12


def _parse_options(options: list[str] | None) -> list[DamageFormula]:
    parsed = [parse_formula(o) for o in options or []]
    return [p for p in parsed if p is not None and not p.is_flat]


def compute_new_damage(
    current: DamageFormula,
    new_tier: int,
    current_tier: int,
    options: list[str] | None,
) -> DamageFormula:
    """Pick the damage formula *current* should become at *new_tier*."""
    if current.is_flat:
        step = (new_tier - current_tier) * _FLAT_STEP_PER_TIER
        result = DamageFormula.flat(current.bonus + step)
    else:
        candidates = _parse_options(options)
        chosen = next((c for c in candidates if c.die == current.die), None)
        if chosen is None and candidates:
            chosen = candidates[0]
        if chosen is not None:
            result = chosen
        else:
            result = DamageFormula(count=new_tier, die=_FALLBACK_DIE, bonus=new_tier * 2)

    if new_tier > current_tier and result.bonus < current.bonus:
        result = result.model_copy(update={"bonus": current.bonus})
    return result


def rescale_damage(
    current: DamageFormula,
    new_tier: int,
    current_tier: int,
    options: list[str] | None,
) -> DamageChange | None:
    """Rescale *current*, returning the substitution or None if unchanged."""
    old = format_formula(current)
    new = format_formula(compute_new_damage(current, new_tier, current_tier, options))
    if old == new:
        return None
    return DamageChange(old=old, new=new)


def rescale_damage_text(
    text: str,
    new_tier: int,
    current_tier: int,
    options: list[str] | None,
) -> DamageChange | None:
    """Rescale a stored formula string.

    Raises :class:`~adv_manager.core.errors.MalformedDamageFormulaError` when
    *text* does not parse.  The change's ``old`` is the text as stored, so it
    can be substituted verbatim into descriptions.
    """
    current = require_formula(text)
    change = rescale_damage(current, new_tier, current_tier, options)
    if change is None:
        return None
    return DamageChange(old=text.strip(), new=change.new)


def reroll_flat_damage(
    text: str | None,
    attack_range: str,
    rng: RandomSource,
) -> DamageChange | None:
    """Minion damage: replace any value with a fresh flat roll from *attack_range*."""
    rolled = roll_uniform(attack_range, rng)
    if rolled is None:
        logger.warning("Basic attack range %r has no values", attack_range)
        return None
    old = (text or "").strip()
    new = str(rolled)
    logger.debug("Minion basic attack rolled %s from %r", new, attack_range)
    if old == new:
        return None
    return DamageChange(old=old, new=new)
