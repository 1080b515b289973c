"""Storage-side collaborators: actor repositories and ability catalogs.

The engines never touch storage.  A caller fetches a snapshot from an
:class:`ActorRepository`, asks the rescaler for a diff, and hands the diff
back to the repository.  :func:`apply_rescale` is the reference semantics of
"applying" a :class:`RescaleResult`, used by the in-memory repository.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol, runtime_checkable

from pydantic import BaseModel

from adv_manager.ir.creatures import AbilityRecord, CreatureSnapshot, Thresholds
from adv_manager.ir.results import RescaleResult

logger = logging.getLogger(__name__)


class AbilityEntry(BaseModel):
    """Catalog view of a feature, used to materialise added features."""

    id: str
    name: str
    kind: str = "passive"
    icon: str = ""
    description: str = ""


@runtime_checkable
class AbilityCatalog(Protocol):
    def find_by_name(self, name: str) -> AbilityEntry | None: ...


@runtime_checkable
class ActorRepository(Protocol):
    def get_snapshot(self, actor_id: str) -> CreatureSnapshot: ...

    def apply_diff(self, actor_id: str, result: RescaleResult) -> None: ...


class InMemoryAbilityCatalog:
    """Feature lookup over a fixed list of entries (exact name match)."""

    def __init__(self, entries: Iterable[AbilityEntry] = ()) -> None:
        self._by_name: dict[str, AbilityEntry] = {}
        for entry in entries:
            self._by_name[entry.name] = entry

    def add(self, entry: AbilityEntry) -> None:
        self._by_name[entry.name] = entry

    def find_by_name(self, name: str) -> AbilityEntry | None:
        return self._by_name.get(name)

    def __len__(self) -> int:
        return len(self._by_name)


def apply_rescale(
    snapshot: CreatureSnapshot,
    result: RescaleResult,
    ability_catalog: AbilityCatalog | None = None,
) -> CreatureSnapshot:
    """Return a new snapshot with *result* applied.  *snapshot* is untouched."""
    update: dict[str, object] = {"name": result.name, "tier": result.target_tier}

    stats = result.stats
    if stats.difficulty is not None:
        update["difficulty"] = stats.difficulty.new
    if stats.hp_max is not None:
        update["hp_max"] = stats.hp_max.new
    if stats.hp_marked is not None:
        update["hp_marked"] = stats.hp_marked.new
    if stats.stress_max is not None:
        update["stress_max"] = stats.stress_max.new
    if stats.thresholds is not None:
        update["thresholds"] = Thresholds(
            major=stats.thresholds.new.major, severe=stats.thresholds.new.severe,
        )
    if stats.attack_bonus is not None:
        update["attack_bonus"] = stats.attack_bonus.new
    if result.primary_damage is not None:
        update["attack_damage"] = result.primary_damage.new
    if result.alternate_damage is not None:
        update["alternate_damage"] = result.alternate_damage.new

    # Experiences
    exp_values = {c.experience_id: c.new for c in result.experience_changes}
    experiences = [
        e.model_copy(update={"value": exp_values[e.id]}) if e.id in exp_values else e
        for e in snapshot.experiences
    ]
    experiences.extend(e.model_copy() for e in result.experiences_added)
    update["experiences"] = experiences

    # Abilities
    rewrites = {u.ability_id: u for u in result.ability_updates}
    removed = set(result.features_removed)
    abilities: list[AbilityRecord] = []
    for ability in snapshot.abilities:
        if ability.id in removed:
            continue
        rewrite = rewrites.get(ability.id)
        if rewrite is not None:
            ability = ability.model_copy(update={
                "name": rewrite.name,
                "description": rewrite.description,
                "actions": list(rewrite.actions),
            })
        abilities.append(ability)
    for name in result.features_added:
        entry = ability_catalog.find_by_name(name) if ability_catalog is not None else None
        if entry is None:
            logger.debug("Feature %r not in catalog, adding a bare record", name)
            abilities.append(AbilityRecord(name=name))
        else:
            abilities.append(AbilityRecord(
                name=entry.name, description=entry.description, kind=entry.kind,
            ))
    update["abilities"] = abilities

    return snapshot.model_copy(update=update)


class InMemoryActorRepository:
    """Dict-backed :class:`ActorRepository`, handy for tests and scripts."""

    def __init__(
        self,
        snapshots: Iterable[CreatureSnapshot] = (),
        ability_catalog: AbilityCatalog | None = None,
    ) -> None:
        self._actors: dict[str, CreatureSnapshot] = {s.id: s for s in snapshots}
        self.ability_catalog = ability_catalog

    def add(self, snapshot: CreatureSnapshot) -> None:
        self._actors[snapshot.id] = snapshot

    def get_snapshot(self, actor_id: str) -> CreatureSnapshot:
        try:
            return self._actors[actor_id]
        except KeyError:
            raise KeyError(f"Unknown actor id {actor_id!r}") from None

    def apply_diff(self, actor_id: str, result: RescaleResult) -> None:
        current = self.get_snapshot(actor_id)
        self._actors[actor_id] = apply_rescale(current, result, self.ability_catalog)

    def __len__(self) -> int:
        return len(self._actors)
