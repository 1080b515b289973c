"""Ambient primitives shared by both engines: RNG, errors, settings."""

from adv_manager.core.errors import (
    AdvManagerError,
    MalformedDamageFormulaError,
    MissingTierBenchmarkError,
    UnknownArchetypeError,
)
from adv_manager.core.rng import RandomSource, SeededRNG, choose
from adv_manager.core.settings import RescaleSettings

__all__ = [
    # rng
    "RandomSource",
    "SeededRNG",
    "choose",
    # errors
    "AdvManagerError",
    "UnknownArchetypeError",
    "MissingTierBenchmarkError",
    "MalformedDamageFormulaError",
    # settings
    "RescaleSettings",
]
