"""Exception taxonomy for the rescaling engine."""

from __future__ import annotations


class AdvManagerError(Exception):
    """Base class for all adv_manager errors."""


class UnknownArchetypeError(AdvManagerError, KeyError):
    """The archetype tag has no benchmark table."""

    def __init__(self, archetype: str) -> None:
        super().__init__(archetype)
        self.archetype = archetype

    def __str__(self) -> str:
        return f"No benchmarks for archetype {self.archetype!r}"


class MissingTierBenchmarkError(AdvManagerError, KeyError):
    """The archetype exists but has no row for the requested tier."""

    def __init__(self, archetype: str, tier: int) -> None:
        super().__init__(archetype, tier)
        self.archetype = archetype
        self.tier = tier

    def __str__(self) -> str:
        return f"No tier {self.tier} benchmark for archetype {self.archetype!r}"


class MalformedDamageFormulaError(AdvManagerError, ValueError):
    """A stored damage formula could not be parsed."""

    def __init__(self, text: object) -> None:
        super().__init__(text)
        self.text = text

    def __str__(self) -> str:
        return f"Malformed damage formula {self.text!r}"
