"""Shared fixtures and helpers for engine tests."""

from __future__ import annotations

from typing import Callable

import pytest

from adv_manager.content.catalog import BenchmarkCatalog, default_catalog


class ScriptedRNG:
    """RandomSource double: returns queued values, then the low end of each range.

    Every call is recorded in ``calls`` so tests can assert which ranges
    were sampled.
    """

    def __init__(self, values: tuple[int, ...] | list[int] = ()) -> None:
        self.values = list(values)
        self.calls: list[tuple[int, int]] = []

    def random_int(self, low: int, high: int) -> int:
        self.calls.append((low, high))
        if self.values:
            value = self.values.pop(0)
            assert low <= value <= high, f"scripted {value} outside [{low}, {high}]"
            return value
        return low


class HighRNG:
    """RandomSource double that always returns the high end."""

    def random_int(self, low: int, high: int) -> int:
        return high


@pytest.fixture
def low_rng() -> ScriptedRNG:
    return ScriptedRNG()


@pytest.fixture
def high_rng() -> HighRNG:
    return HighRNG()


@pytest.fixture
def make_rng() -> Callable[..., ScriptedRNG]:
    """Factory: ``make_rng(5, 7)`` returns those values in order."""
    return lambda *values: ScriptedRNG(values)


@pytest.fixture(scope="session")
def catalog() -> BenchmarkCatalog:
    """The bundled benchmark table, loaded once."""
    return default_catalog()
