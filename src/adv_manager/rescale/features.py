"""Feature (ability) rewriting when a creature changes tier.

Abilities carry numbers in three places: the damage of their nested actions,
their name (``Horde (2d6+3)``, ``Minion (5)``), and their free-text
description.  :func:`rewrite_ability` rescales the first two and then pushes
every resulting formula substitution through the text.

The text pass is a heuristic, not a parser.  Formula strings such as
``2d6+3`` are replaced wherever they appear verbatim; bare numbers of one or
two digits are only replaced inside an emphasis span (``<strong>5</strong>``,
``<b>``, ``<em>`` or ``**5**``), since a bare ``5`` in prose is usually
unrelated.  A coincidental emphasised match can still be rewritten.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from adv_manager.core.errors import MalformedDamageFormulaError
from adv_manager.core.rng import RandomSource
from adv_manager.ir.benchmarks import TierBenchmark
from adv_manager.ir.creatures import AbilityRecord, SubAction
from adv_manager.ir.results import (
    AbilityChange,
    AbilityChangeKind,
    AbilityUpdate,
    DamageChange,
)

from .damage import reroll_flat_damage, rescale_damage_text
from .dice import normalise, parse_formula
from .ranges import roll_uniform

logger = logging.getLogger(__name__)

MINION_DESCRIPTION_TEMPLATE = (
    "<p>This adversary is defeated when they take any damage. "
    "For every <strong>{value}</strong> damage a PC deals to this adversary, "
    "defeat an additional Minion within range the attack would succeed against.</p>"
)

HORDE_NAME_RE = re.compile(r"^Horde(?:\s*\((.+)\))?$", re.IGNORECASE)
MINION_NAME_RE = re.compile(r"^Minion(?:\s*\((\d+|X)\))?$", re.IGNORECASE)

_PLACEHOLDER = "[X]"
_NAME_PLACEHOLDER = "(X)"
_SHORT_NUMBER_RE = re.compile(r"^\d{1,2}$")
_EMPHASIS_SPANS = (
    ("<strong>", "</strong>"),
    ("<b>", "</b>"),
    ("<em>", "</em>"),
    ("**", "**"),
)


@dataclass
class AbilityRewrite:
    """Result of rewriting one ability."""

    update: AbilityUpdate | None
    """None when the ability is unchanged (only skips were recorded)."""

    changes: list[AbilityChange] = field(default_factory=list)
    log: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Text substitution
# ---------------------------------------------------------------------------

def replace_emphasised(text: str, old: str, new: str) -> str:
    """Replace *old* only where it is the whole content of an emphasis span."""
    for open_tag, close_tag in _EMPHASIS_SPANS:
        pattern = re.escape(open_tag) + re.escape(old) + re.escape(close_tag)
        text = re.sub(pattern, lambda _m, o=open_tag, c=close_tag: f"{o}{new}{c}", text)
    return text


def contains_emphasised(text: str, value: str) -> bool:
    return any(f"{o}{value}{c}" in text for o, c in _EMPHASIS_SPANS)


def fill_placeholder(text: str, value: str) -> str | None:
    """Fill ``[X]`` (or, failing that, ``(X)``) with *value*.

    Returns None when *text* holds neither placeholder.
    """
    if _PLACEHOLDER in text:
        return text.replace(_PLACEHOLDER, value)
    if _NAME_PLACEHOLDER in text:
        return text.replace(_NAME_PLACEHOLDER, f"({value})")
    return None


def apply_substitutions(text: str, substitutions: list[DamageChange]) -> str:
    """Apply formula substitutions to rich text, in order."""
    if not text:
        return text
    for sub in substitutions:
        if not sub.old or not sub.new or sub.old == sub.new:
            continue
        if _SHORT_NUMBER_RE.match(sub.old):
            text = replace_emphasised(text, sub.old, sub.new)
        else:
            text = re.sub(re.escape(sub.old), lambda _m, n=sub.new: n, text)
    return text


# ---------------------------------------------------------------------------
# Rewriting
# ---------------------------------------------------------------------------

def _rescale_action(
    action: SubAction,
    new_tier: int,
    current_tier: int,
    benchmark: TierBenchmark,
    rng: RandomSource,
    damage_override: str | None,
) -> DamageChange | None:
    """Compute the damage substitution for one nested action."""
    if damage_override is not None:
        new = normalise(damage_override)
        old = (action.damage or "").strip()
        return DamageChange(old=old, new=new) if old != new else None
    if benchmark.is_minion:
        return reroll_flat_damage(action.damage, benchmark.basic_attack_range, rng)
    return rescale_damage_text(action.damage, new_tier, current_tier, benchmark.damage_rolls)


def _resolve_horde_formula(
    embedded: str,
    new_tier: int,
    current_tier: int,
    benchmark: TierBenchmark,
    substitutions: list[DamageChange],
    damage_override: str | None,
) -> str | None:
    """Decide the formula a ``Horde (...)`` name should carry.

    *embedded* is ``"X"`` for the ``Horde (X)`` placeholder and a bare ``Horde``.
    """
    if damage_override:
        return normalise(damage_override)
    if embedded.upper() == "X":
        return benchmark.halved_damage_rolls[0] if benchmark.halved_damage_rolls else None
    pending = next((s for s in substitutions if s.old == embedded), None)
    if pending is not None:
        return pending.new
    change = rescale_damage_text(embedded, new_tier, current_tier, benchmark.damage_rolls)
    return change.new if change is not None else embedded


def rewrite_ability(
    ability: AbilityRecord,
    new_tier: int,
    current_tier: int,
    benchmark: TierBenchmark,
    rng: RandomSource,
    *,
    name_override: str | None = None,
    damage_override: str | None = None,
    horde_formula: str | None = None,
) -> AbilityRewrite | None:
    """Rescale one ability's damage, name and text.  None when nothing changes.

    *damage_override* replaces the first damaging action's formula and, for a
    ``Horde (...)`` ability, the embedded formula.  *horde_formula* only pins
    the embedded formula and loses to *damage_override*.
    """
    changes: list[AbilityChange] = []
    log: list[str] = []
    skipped: list[str] = []
    substitutions: list[DamageChange] = []

    def record(kind: AbilityChangeKind, old: str, new: str) -> None:
        changes.append(AbilityChange(
            ability_id=ability.id, ability_name=ability.name,
            kind=kind, old=old, new=new,
        ))

    if damage_override and parse_formula(damage_override) is None:
        exc = MalformedDamageFormulaError(damage_override)
        logger.warning("Ignoring damage override for %s: %s", ability.name, exc)
        skipped.append(f"{ability.name} (Manual): {exc}")
        damage_override = None
    if horde_formula and parse_formula(horde_formula) is None:
        logger.debug("Ignoring malformed horde formula %r for %s", horde_formula, ability.name)
        horde_formula = None

    # 1. Nested action damage
    actions: list[SubAction] = []
    pending_override = damage_override
    for action in ability.actions:
        if not action.damage:
            actions.append(action)
            continue
        override, pending_override = pending_override, None
        try:
            change = _rescale_action(
                action, new_tier, current_tier, benchmark, rng, override,
            )
        except MalformedDamageFormulaError as exc:
            logger.warning("Skipping %s action %r: %s", ability.name, action.name or action.id, exc)
            skipped.append(f"{ability.name} ({action.name or action.id}): {exc}")
            actions.append(action)
            continue
        if change is None:
            actions.append(action)
            continue
        substitutions.append(change)
        record(AbilityChangeKind.DAMAGE, change.old, change.new)
        log.append(f"{ability.name}: {change.old} -> {change.new}")
        actions.append(action.model_copy(update={"damage": change.new}))

    # 2. Name conventions
    name = ability.name.strip()
    new_name = name
    description = ability.description
    minion_value: int | None = None
    old_minion = MINION_NAME_RE.match(name)
    horde = HORDE_NAME_RE.match(name)

    if name_override:
        new_name = name_override.strip()
        if new_name != name:
            record(AbilityChangeKind.NAME_OVERRIDE, name, new_name)
            log.append(f"Name Override: {name} -> {new_name}")
        m = MINION_NAME_RE.match(new_name)
        if m and m.group(1) and m.group(1).isdigit():
            minion_value = int(m.group(1))
    elif horde:
        embedded = (horde.group(1) or "X").strip()
        try:
            formula = _resolve_horde_formula(
                embedded, new_tier, current_tier, benchmark, substitutions,
                damage_override or horde_formula,
            )
        except MalformedDamageFormulaError as exc:
            logger.warning("Skipping %s name: %s", name, exc)
            skipped.append(f"{name}: {exc}")
            formula = None
        if formula:
            new_name = f"Horde ({formula})"
            if new_name != name:
                record(AbilityChangeKind.NAME_HORDE, name, new_name)
                log.append(f"Name Update: {name} -> {new_name}")
            if embedded.upper() == "X":
                description = fill_placeholder(description, formula) or description
            elif embedded != formula and not any(s.old == embedded for s in substitutions):
                substitutions.append(DamageChange(old=embedded, new=formula))
    elif old_minion and benchmark.minion_feature_range:
        rolled = roll_uniform(benchmark.minion_feature_range, rng)
        if rolled is not None:
            logger.debug("Minion threshold rolled %d from %r", rolled, benchmark.minion_feature_range)
            minion_value = rolled
            new_name = f"Minion ({rolled})"
            if new_name != name:
                record(AbilityChangeKind.NAME_MINION, name, new_name)
                log.append(f"Name Update: {name} -> {new_name}")

    # 3. Minion description
    if minion_value is not None:
        old_value = old_minion.group(1) if old_minion else None
        filled = fill_placeholder(description, str(minion_value))
        if old_value and old_value.isdigit() and contains_emphasised(description, old_value):
            description = replace_emphasised(description, old_value, str(minion_value))
        elif filled is not None:
            description = filled
        else:
            description = MINION_DESCRIPTION_TEMPLATE.format(value=minion_value)

    # 4. Push formula substitutions through the text
    description = apply_substitutions(description, substitutions)
    actions = [
        a.model_copy(update={"description": apply_substitutions(a.description, substitutions)})
        if a.description else a
        for a in actions
    ]

    if (
        new_name == ability.name
        and description == ability.description
        and actions == ability.actions
    ):
        if skipped:
            return AbilityRewrite(update=None, skipped=skipped)
        return None

    return AbilityRewrite(
        update=AbilityUpdate(
            ability_id=ability.id, name=new_name,
            description=description, actions=actions,
        ),
        changes=changes,
        log=log,
        skipped=skipped,
    )
