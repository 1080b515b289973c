"""Seeded random number generation for replayable rescales.

Every random decision the engines make (stat rolls, threshold rolls, minion
values, suggested-feature picks) goes through a :class:`RandomSource`.
:class:`SeededRNG` wraps Python's ``random.Random`` so a whole batch rescale
can be replayed from one integer seed.
"""

from __future__ import annotations

import hashlib
import random
from typing import Protocol, Sequence, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """Anything that can draw a uniform integer from a closed interval."""

    def random_int(self, low: int, high: int) -> int:
        """Return a random integer *N* such that ``low <= N <= high``."""
        ...


def choose(rng: RandomSource, seq: Sequence[T]) -> T:
    """Pick one element of a non-empty sequence using only ``random_int``."""
    return seq[rng.random_int(0, len(seq) - 1)]


class SeededRNG:
    """Deterministic RNG that can be forked into independent sub-streams.

    Parameters
    ----------
    seed:
        Integer seed for the underlying Mersenne Twister.  ``None`` seeds
        from system entropy (non-replayable).
    """

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = random.SystemRandom().getrandbits(63)
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int:
        """Return the seed this RNG was initialised with."""
        return self._seed

    # -- core random methods -------------------------------------------------

    def random_int(self, low: int, high: int) -> int:
        """Return a random integer *N* such that ``low <= N <= high``."""
        return self._rng.randint(low, high)

    def random_choice(self, seq: Sequence[T]) -> T:
        """Return a random element from a non-empty sequence."""
        return choose(self, seq)

    # -- forking -------------------------------------------------------------

    def fork(self, name: str) -> SeededRNG:
        """Create a child RNG whose seed is derived from this RNG's seed and
        *name*.

        Forking with the same *name* always yields the same child seed, so a
        batch can give each actor (``"actor:<id>"``) its own stream and
        rescaling one actor never perturbs another.
        """
        digest = hashlib.sha256(f"{self._seed}:{name}".encode()).digest()
        child_seed = int.from_bytes(digest[:8], "big")
        return SeededRNG(child_seed)

    def __repr__(self) -> str:
        return f"SeededRNG(seed={self._seed})"
