"""Suggested-feature selection on tier-up.

Benchmarks list features that suit an archetype at a tier.  ``Relentless (X)``
is a placeholder resolved to the target tier; a creature never holds two
``Relentless`` features, so picking a new one replaces the old.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from adv_manager.core.rng import RandomSource, choose
from adv_manager.ir.benchmarks import TierBenchmark
from adv_manager.ir.creatures import AbilityRecord

logger = logging.getLogger(__name__)

RELENTLESS_PLACEHOLDER = "Relentless (X)"
RELENTLESS_RE = re.compile(r"^Relentless\s*\((\d+)\)$", re.IGNORECASE)


@dataclass
class FeatureSelection:
    added: list[str] = field(default_factory=list)
    removed_ids: list[str] = field(default_factory=list)
    log: list[str] = field(default_factory=list)


def resolve_feature_name(name: str, tier: int) -> str:
    """Turn the ``Relentless (X)`` placeholder into ``Relentless (<tier>)``."""
    if RELENTLESS_PLACEHOLDER in name:
        return f"Relentless ({tier})"
    return name


def available_features_for_tier(benchmark: TierBenchmark, tier: int) -> list[str]:
    return [resolve_feature_name(n, tier) for n in benchmark.suggested_features]


def pick_new_features(
    abilities: list[AbilityRecord],
    benchmark: TierBenchmark,
    target_tier: int,
    rng: RandomSource,
    selected: list[str] | None = None,
) -> FeatureSelection:
    """Choose features to add.

    With *selected* (a manual choice) every listed name the creature lacks is
    added.  Otherwise one candidate from the tier's suggestions is picked at
    random, excluding names the creature already has.
    """
    out = FeatureSelection()
    existing = {a.name for a in abilities}

    if selected is not None:
        names = [n for n in selected if n not in existing]
    else:
        candidates = [
            n for n in available_features_for_tier(benchmark, target_tier)
            if n not in existing
        ]
        if not candidates:
            return out
        names = [choose(rng, candidates)]
        logger.debug("Picked suggested feature %r from %s", names[0], candidates)

    for name in names:
        out.added.append(name)
        replaced = None
        if RELENTLESS_RE.match(name):
            replaced = next((a for a in abilities if RELENTLESS_RE.match(a.name.strip())), None)
        if replaced is not None and replaced.id not in out.removed_ids:
            out.removed_ids.append(replaced.id)
            out.log.append(f"New Feature: {name} (Replaced {replaced.name})")
        else:
            out.log.append(f"New Feature: {name}")
    return out
