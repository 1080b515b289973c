"""Benchmark data and storage-side interfaces."""

from adv_manager.content.catalog import BenchmarkCatalog, default_catalog
from adv_manager.content.repository import (
    AbilityCatalog,
    AbilityEntry,
    ActorRepository,
    InMemoryAbilityCatalog,
    InMemoryActorRepository,
    apply_rescale,
)

__all__ = [
    "AbilityCatalog",
    "AbilityEntry",
    "ActorRepository",
    "BenchmarkCatalog",
    "InMemoryAbilityCatalog",
    "InMemoryActorRepository",
    "apply_rescale",
    "default_catalog",
]
