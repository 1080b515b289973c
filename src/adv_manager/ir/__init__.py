"""Pydantic schema for creatures, benchmarks, rescale diffs and encounters.

Everything the two engines read or produce is a model here, so inputs
validate at the boundary and results serialise cleanly to/from JSON.
"""

from .benchmarks import Archetype, ExperienceBenchmark, TierBenchmark
from .creatures import (
    AbilityRecord,
    CreatureSnapshot,
    Experience,
    SubAction,
    Thresholds,
)
from .encounters import (
    BudgetModifier,
    BudgetState,
    DifficultyLabel,
    EncounterUnit,
    FearBand,
    SpecialAbility,
)
from .formulas import DamageFormula
from .overrides import RescaleOverrides
from .results import (
    AbilityChange,
    AbilityChangeKind,
    AbilityUpdate,
    DamageChange,
    ExperienceChange,
    FailureReason,
    RescaleFailure,
    RescaleResult,
    StatChange,
    StatChanges,
    ThresholdChange,
)

__all__ = [
    # benchmarks
    "Archetype",
    "ExperienceBenchmark",
    "TierBenchmark",
    # creatures
    "AbilityRecord",
    "CreatureSnapshot",
    "Experience",
    "SubAction",
    "Thresholds",
    # encounters
    "BudgetModifier",
    "BudgetState",
    "DifficultyLabel",
    "EncounterUnit",
    "FearBand",
    "SpecialAbility",
    # formulas
    "DamageFormula",
    # overrides
    "RescaleOverrides",
    # results
    "AbilityChange",
    "AbilityChangeKind",
    "AbilityUpdate",
    "DamageChange",
    "ExperienceChange",
    "FailureReason",
    "RescaleFailure",
    "RescaleResult",
    "StatChange",
    "StatChanges",
    "ThresholdChange",
]
