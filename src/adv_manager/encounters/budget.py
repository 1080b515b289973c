"""Encounter Battle Point budget.

The party sets a budget of ``3 * party_count + 2`` points; each adversary
costs points by archetype.  Situational modifiers move the limit (not the
cost), and the gap between cost and limit is banded into a difficulty level
which the Fear band and ability synergies then shift.

The calculator never raises: units that fail validation or carry an unknown
archetype cost nothing and are logged and ignored.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable

from pydantic import ValidationError

from adv_manager.ir.creatures import CreatureSnapshot
from adv_manager.ir.encounters import (
    BudgetModifier,
    BudgetState,
    DifficultyLabel,
    EncounterUnit,
    FearBand,
    SpecialAbility,
)

logger = logging.getLogger(__name__)

UNIT_COSTS: dict[str, int] = {
    "social": 1,
    "support": 1,
    "horde": 2,
    "ranged": 2,
    "skulk": 2,
    "standard": 2,
    "leader": 3,
    "bruiser": 4,
    "solo": 5,
}

MAJOR_ARCHETYPES = frozenset({"bruiser", "horde", "leader", "solo"})

FEAR_SHIFTS: dict[FearBand, int] = {
    FearBand.NONE_TO_ONE: -1,
    FearBand.ONE_TO_THREE: 0,
    FearBand.TWO_TO_FOUR: 1,
    FearBand.FOUR_TO_EIGHT: 2,
    FearBand.SIX_TO_TWELVE: 2,
}

LEVEL_LABELS = (
    DifficultyLabel.VERY_EASY,
    DifficultyLabel.EASY,
    DifficultyLabel.BALANCED,
    DifficultyLabel.CHALLENGING,
    DifficultyLabel.HARD,
    DifficultyLabel.DEADLY,
)

_DAMAGE_BOOST_DICE = {1: "1d4", 2: "1d6", 3: "1d8", 4: "1d10"}

# Feature-name prefixes that mark a special ability.
_SPECIAL_PATTERNS: tuple[tuple[re.Pattern[str], SpecialAbility], ...] = (
    (re.compile(r"^summon", re.IGNORECASE), SpecialAbility.SUMMONER),
    (re.compile(r"^spotlight", re.IGNORECASE), SpecialAbility.SPOTLIGHTER),
    (re.compile(r"^relentless", re.IGNORECASE), SpecialAbility.RELENTLESS),
    (re.compile(r"^momentum", re.IGNORECASE), SpecialAbility.MOMENTUM),
    (re.compile(r"^terrifying", re.IGNORECASE), SpecialAbility.TERRIFYING),
)


# =====================================================================
# Unit helpers
# =====================================================================

def unit_cost(archetype: str) -> int:
    """Battle Points for one non-minion unit.  Unknown archetypes cost 0."""
    return UNIT_COSTS.get(archetype.strip().lower(), 0)


def damage_boost_die(tier: int | None) -> str:
    """The extra damage die a boosted unit of *tier* gains."""
    tier = tier or 1
    return _DAMAGE_BOOST_DICE.get(min(max(tier, 1), 4), "1d4")


def damage_boost_feature(tier: int | None) -> str:
    """Name of the feature that grants the damage boost, e.g. ``More Damage (1d8)``."""
    return f"More Damage ({damage_boost_die(tier)})"


def detect_special_abilities(names: Iterable[str]) -> set[SpecialAbility]:
    """Map feature names to the special abilities they represent."""
    found: set[SpecialAbility] = set()
    for name in names:
        stripped = name.strip()
        for pattern, ability in _SPECIAL_PATTERNS:
            if pattern.match(stripped):
                found.add(ability)
    return found


def unit_from_snapshot(snapshot: CreatureSnapshot, *, damage_boost: bool = False) -> EncounterUnit:
    """Build an :class:`EncounterUnit` from a stored creature."""
    return EncounterUnit(
        archetype=snapshot.archetype,
        tier=snapshot.tier,
        special_abilities=detect_special_abilities(snapshot.ability_names()),
        damage_boost=damage_boost,
        name=snapshot.name,
    )


def average_tier(units: list[EncounterUnit]) -> int:
    """Mean unit tier rounded half up; a unit without a tier counts as 1."""
    if not units:
        return 0
    mean = sum(u.tier or 1 for u in units) / len(units)
    return math.floor(mean + 0.5)


def difficulty_level(diff: int) -> int:
    """Band ``cost - limit`` into a level from 0 (Very Easy) to 5 (Deadly)."""
    if diff <= -5:
        return 0
    if diff <= -2:
        return 1
    if diff <= 1:
        return 2
    if diff <= 3:
        return 3
    if diff <= 5:
        return 4
    return 5


def _coerce_units(units: Iterable[EncounterUnit | dict[str, Any]]) -> list[EncounterUnit]:
    valid: list[EncounterUnit] = []
    for raw in units:
        if isinstance(raw, EncounterUnit):
            unit = raw
        else:
            try:
                unit = EncounterUnit.model_validate(raw)
            except ValidationError as exc:
                logger.warning("Ignoring malformed encounter unit %r: %s", raw, exc)
                continue
        archetype = unit.archetype.strip().lower()
        if archetype != "minion" and archetype not in UNIT_COSTS:
            logger.warning("Ignoring unit with unknown archetype %r", unit.archetype)
            continue
        valid.append(unit.model_copy(update={"archetype": archetype}))
    return valid


# =====================================================================
# Budget
# =====================================================================

def compute_budget(
    units: Iterable[EncounterUnit | dict[str, Any]],
    party_count: int,
    party_tier: int,
    fear_band: FearBand | str = FearBand.ONE_TO_THREE,
    *,
    easier: bool = False,
    harder: bool = False,
) -> BudgetState:
    """Score an encounter against a party.

    Parameters
    ----------
    units:
        The adversaries placed, as models or plain dicts.
    party_count:
        Number of player characters.
    party_tier:
        The party's tier (1-4).
    fear_band:
        How much Fear the GM intends to spend; shifts the difficulty level.
    easier, harder:
        The GM's manual "shorter/easier" and "longer/harder" toggles.
    """
    try:
        fear_band = FearBand(fear_band)
    except ValueError:
        logger.warning("Unknown fear band %r, using %s", fear_band, FearBand.ONE_TO_THREE.value)
        fear_band = FearBand.ONE_TO_THREE
    valid = _coerce_units(units)

    base_budget = 3 * party_count + 2

    minion_count = sum(1 for u in valid if u.archetype == "minion")
    cost = sum(unit_cost(u.archetype) for u in valid if u.archetype != "minion")
    if minion_count:
        cost += math.ceil(minion_count / max(1, party_count))

    solo_count = sum(1 for u in valid if u.archetype == "solo")
    has_damage_boost = any(u.damage_boost for u in valid)
    has_lower_tier = any(u.tier is not None and u.tier < party_tier for u in valid)
    has_major = any(u.archetype in MAJOR_ARCHETYPES for u in valid)
    out_of_tier = any(u.tier is not None and u.tier > party_tier for u in valid)

    candidates = (
        (easier, BudgetModifier(key="easier", label="Easier/Shorter", value=-1, manual=True)),
        (solo_count >= 2, BudgetModifier(key="solos", label="2+ Solos", value=-2)),
        (has_damage_boost, BudgetModifier(key="damage_boost", label="Damage Boost", value=-2)),
        (has_lower_tier, BudgetModifier(key="lower_tier", label="Lower Tier Used", value=1)),
        (bool(valid) and not has_major,
         BudgetModifier(key="no_major", label="No Major Adversaries", value=1)),
        (harder, BudgetModifier(key="harder", label="Harder/Longer", value=2, manual=True)),
    )
    modifiers = [m for active, m in candidates if active]
    limit = base_budget + sum(m.value for m in modifiers)

    level = difficulty_level(cost - limit)
    level += FEAR_SHIFTS[fear_band]

    specials: set[SpecialAbility] = set()
    for u in valid:
        specials |= u.special_abilities
    if {SpecialAbility.SUMMONER, SpecialAbility.SPOTLIGHTER} <= specials:
        level += 1
    if SpecialAbility.RELENTLESS in specials and (
        SpecialAbility.MOMENTUM in specials or SpecialAbility.TERRIFYING in specials
    ):
        level += 1
    level = min(5, max(0, level))

    difficulty = DifficultyLabel.OUT_OF_TIER if out_of_tier else LEVEL_LABELS[level]
    logger.debug(
        "Budget: cost %d / limit %d (base %d), level %d -> %s",
        cost, limit, base_budget, level, difficulty.value,
    )

    return BudgetState(
        party_count=party_count,
        party_tier=party_tier,
        fear_band=fear_band,
        easier=easier,
        harder=harder,
        base_budget=base_budget,
        limit=limit,
        cost=cost,
        modifiers=modifiers,
        level=level,
        difficulty=difficulty,
        average_tier=average_tier(valid),
    )
