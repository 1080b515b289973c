"""Benchmark catalog -- loads and serves per-archetype, per-tier stat guidance.

The bundled table lives in ``data/adversary_benchmarks.json`` and has the
shape::

    {"bruiser": {"tiers": {"tier_1": {...}, "tier_2": {...}}}, ...}

The catalog is read-only once built; :func:`default_catalog` loads the
bundled table once per process.
"""

from __future__ import annotations

import functools
import json
import logging
import re
from pathlib import Path
from typing import Any

from adv_manager.core.errors import MissingTierBenchmarkError, UnknownArchetypeError
from adv_manager.ir.benchmarks import Archetype, TierBenchmark

logger = logging.getLogger(__name__)

_DEFAULT_BENCHMARKS_PATH = Path(__file__).resolve().parent / "data" / "adversary_benchmarks.json"
_TIER_KEY_RE = re.compile(r"^tier_(\d+)$")


def _parse_archetype(raw: dict[str, Any]) -> dict[int, TierBenchmark]:
    """Parse one archetype's ``{"tiers": {"tier_N": {...}}}`` block."""
    tiers: dict[int, TierBenchmark] = {}
    for key, row in raw.get("tiers", {}).items():
        m = _TIER_KEY_RE.match(key)
        if not m:
            logger.warning("Ignoring unrecognised tier key %r", key)
            continue
        tiers[int(m.group(1))] = TierBenchmark.model_validate(row)
    return tiers


class BenchmarkCatalog:
    """Serves :class:`TierBenchmark` rows keyed by archetype and tier.

    Usage::

        catalog = default_catalog()
        row = catalog.get("bruiser", 2)
        row.damage_rolls   # ["2d8+6", "2d10+2", ...]
    """

    def __init__(self, table: dict[str, dict[int, TierBenchmark]]) -> None:
        self._table = {k.lower(): dict(v) for k, v in table.items()}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> BenchmarkCatalog:
        return cls({name: _parse_archetype(block) for name, block in raw.items()})

    @classmethod
    def from_json(cls, path: Path | str = _DEFAULT_BENCHMARKS_PATH) -> BenchmarkCatalog:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        catalog = cls.from_dict(data)
        logger.debug("Loaded benchmarks for %d archetypes from %s", len(catalog), path)
        return catalog

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, archetype: str | Archetype, tier: int) -> TierBenchmark:
        """Return the row for *archetype* at *tier*.

        Raises :class:`UnknownArchetypeError` or
        :class:`MissingTierBenchmarkError`.
        """
        key = archetype.value if isinstance(archetype, Archetype) else str(archetype).lower()
        tiers = self._table.get(key)
        if tiers is None:
            raise UnknownArchetypeError(key)
        row = tiers.get(tier)
        if row is None:
            raise MissingTierBenchmarkError(key, tier)
        return row

    def has_archetype(self, archetype: str) -> bool:
        return archetype.lower() in self._table

    def archetypes(self) -> list[str]:
        return sorted(self._table)

    def tiers(self, archetype: str) -> list[int]:
        return sorted(self._table.get(archetype.lower(), {}))

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, archetype: object) -> bool:
        return isinstance(archetype, str) and archetype.lower() in self._table


@functools.lru_cache(maxsize=1)
def default_catalog() -> BenchmarkCatalog:
    """The bundled benchmark table, loaded once."""
    return BenchmarkCatalog.from_json(_DEFAULT_BENCHMARKS_PATH)
