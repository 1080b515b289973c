"""Actor rescaling -- one creature from its current tier to a target tier.

Provides:

- **retag_name**: appends or replaces the trailing ``" (T<tier>)"`` tag.
- **ActorRescaler**: builds a :class:`RescaleResult` for one snapshot, and
  drives batches and repository round trips.

Order inside one rescale is fixed: name, stats, sheet damage, experiences,
abilities, then suggested features.  The ability pass consumes the formula
substitutions its own action damage produced, so damage always precedes text.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from adv_manager.content.catalog import BenchmarkCatalog, default_catalog
from adv_manager.content.repository import ActorRepository
from adv_manager.core.errors import (
    MalformedDamageFormulaError,
    MissingTierBenchmarkError,
    UnknownArchetypeError,
)
from adv_manager.core.rng import RandomSource, SeededRNG
from adv_manager.core.settings import RescaleSettings
from adv_manager.ir.benchmarks import TierBenchmark
from adv_manager.ir.creatures import CreatureSnapshot, Thresholds
from adv_manager.ir.overrides import RescaleOverrides
from adv_manager.ir.results import (
    AbilityChange,
    AbilityUpdate,
    DamageChange,
    FailureReason,
    RescaleFailure,
    RescaleResult,
    StatChange,
    StatChanges,
    ThresholdChange,
)

from .damage import reroll_flat_damage, rescale_damage_text
from .dice import format_formula, parse_formula, require_formula
from .experiences import rescale_experiences
from .features import rewrite_ability
from .ranges import roll_signed, roll_threshold_pair, roll_uniform
from .suggestions import pick_new_features

logger = logging.getLogger(__name__)

_TIER_TAG_RE = re.compile(r"\s*\(T\d+\)$")
_MINION_FEATURE_RE = re.compile(r"^Minion(\s*\(.*\))?$", re.IGNORECASE)
_HORDE_FEATURE_RE = re.compile(r"^Horde(\s*\(.*\))?$", re.IGNORECASE)


def retag_name(name: str, tier: int) -> str:
    """Return *name* ending in exactly one ``" (T<tier>)"`` tag."""
    tag = f" (T{tier})"
    if _TIER_TAG_RE.search(name):
        return _TIER_TAG_RE.sub(lambda _m: tag, name)
    return name + tag


def _stat_change(current: int, value: int | None) -> StatChange | None:
    # A zero (or missing) value counts as "no change".
    if not value or value == current:
        return None
    return StatChange(old=current, new=value)


def _signed(value: int) -> str:
    return f"+{value}" if value >= 0 else str(value)


class ActorRescaler:
    """Computes rescale diffs for creature snapshots.

    Parameters
    ----------
    catalog:
        Benchmark rows to rescale against.  Defaults to the bundled table.
    rng:
        Source for every roll and pick.  Defaults to an unseeded
        :class:`SeededRNG`.
    settings:
        Feature toggles.  Defaults to :class:`RescaleSettings` defaults.
    """

    def __init__(
        self,
        catalog: BenchmarkCatalog | None = None,
        rng: RandomSource | None = None,
        settings: RescaleSettings | None = None,
    ) -> None:
        self.catalog = catalog if catalog is not None else default_catalog()
        self.rng = rng if rng is not None else SeededRNG()
        self.settings = settings if settings is not None else RescaleSettings()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def rescale(
        self,
        snapshot: CreatureSnapshot,
        target_tier: int,
        overrides: RescaleOverrides | None = None,
        *,
        rng: RandomSource | None = None,
    ) -> RescaleResult | RescaleFailure | None:
        """Compute the diff moving *snapshot* to *target_tier*.

        Returns None when the creature is already at *target_tier*, and a
        :class:`RescaleFailure` when the benchmark table has no row for it.
        Per-field problems never abort the call; they land in ``skipped``.
        """
        current_tier = snapshot.tier
        if target_tier == current_tier:
            return None

        try:
            benchmark = self.catalog.get(snapshot.archetype, target_tier)
        except UnknownArchetypeError as exc:
            logger.warning("Cannot rescale %s: %s", snapshot.name, exc)
            return RescaleFailure(
                actor_id=snapshot.id, reason=FailureReason.UNKNOWN_ARCHETYPE, message=str(exc),
            )
        except MissingTierBenchmarkError as exc:
            logger.warning("Cannot rescale %s: %s", snapshot.name, exc)
            return RescaleFailure(
                actor_id=snapshot.id, reason=FailureReason.MISSING_TIER_BENCHMARK, message=str(exc),
            )

        rng = rng if rng is not None else self.rng
        overrides = overrides if overrides is not None else RescaleOverrides()
        stats_log: list[str] = []
        feature_log: list[str] = []
        skipped: list[str] = []

        logger.debug(
            "Rescaling %s (%s) T%d -> T%d", snapshot.name, snapshot.archetype,
            current_tier, target_tier,
        )

        name = retag_name(snapshot.name, target_tier)
        stats = self._rescale_stats(snapshot, benchmark, overrides, rng, stats_log)
        primary = self._rescale_primary(
            snapshot, target_tier, benchmark, overrides, rng, stats_log, skipped,
        )
        alternate = self._rescale_alternate(
            snapshot, target_tier, benchmark, overrides, stats_log, skipped,
        )

        experience_changes = []
        experiences_added = []
        if self.settings.update_experiences:
            exp = rescale_experiences(snapshot.experiences, target_tier, current_tier)
            experience_changes, experiences_added = exp.changes, exp.added
            stats_log.extend(exp.log)

        halved = alternate.new if alternate is not None else None
        if halved is None and snapshot.alternate_damage:
            stored = parse_formula(snapshot.alternate_damage)
            halved = format_formula(stored) if stored is not None else None

        ability_changes, ability_updates = self._rescale_abilities(
            snapshot, target_tier, benchmark, overrides, halved, rng, feature_log, skipped,
        )

        features_added: list[str] = []
        features_removed: list[str] = []
        if target_tier > current_tier and self.settings.add_suggested_features:
            selection = pick_new_features(
                snapshot.abilities, benchmark, target_tier, rng, overrides.suggested_features,
            )
            features_added, features_removed = selection.added, selection.removed_ids
            feature_log.extend(selection.log)

        return RescaleResult(
            actor_id=snapshot.id,
            current_tier=current_tier,
            target_tier=target_tier,
            old_name=snapshot.name,
            name=name,
            stats=stats,
            primary_damage=primary,
            alternate_damage=alternate,
            experience_changes=experience_changes,
            experiences_added=experiences_added,
            ability_changes=ability_changes,
            ability_updates=ability_updates,
            features_added=features_added,
            features_removed=features_removed,
            stats_log=stats_log,
            feature_log=feature_log,
            skipped=skipped,
        )

    def rescale_batch(
        self,
        snapshots: Iterable[CreatureSnapshot],
        target_tier: int,
        overrides: dict[str, RescaleOverrides] | None = None,
    ) -> list[RescaleResult | RescaleFailure]:
        """Rescale many creatures, skipping those already at *target_tier*.

        With a :class:`SeededRNG`, every creature rolls on its own fork
        (``"actor:<id>"``), so adding a creature to the batch never changes
        another creature's rolls.
        """
        overrides = overrides or {}
        outcomes: list[RescaleResult | RescaleFailure] = []
        for snapshot in snapshots:
            rng = (
                self.rng.fork(f"actor:{snapshot.id}")
                if isinstance(self.rng, SeededRNG) else self.rng
            )
            outcome = self.rescale(snapshot, target_tier, overrides.get(snapshot.id), rng=rng)
            if outcome is None:
                logger.debug("%s already at T%d, skipping", snapshot.name, target_tier)
                continue
            outcomes.append(outcome)
        return outcomes

    def rescale_stored(
        self,
        repository: ActorRepository,
        actor_id: str,
        target_tier: int,
        overrides: RescaleOverrides | None = None,
    ) -> RescaleResult | RescaleFailure | None:
        """Fetch, rescale and write back one stored creature."""
        snapshot = repository.get_snapshot(actor_id)
        outcome = self.rescale(snapshot, target_tier, overrides)
        if isinstance(outcome, RescaleResult):
            repository.apply_diff(actor_id, outcome)
        return outcome

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def _rescale_stats(
        self,
        snapshot: CreatureSnapshot,
        benchmark: TierBenchmark,
        overrides: RescaleOverrides,
        rng: RandomSource,
        log: list[str],
    ) -> StatChanges:
        def pick(override: int | None, text: str) -> int | None:
            return override if override is not None else roll_uniform(text, rng)

        difficulty = _stat_change(snapshot.difficulty, pick(overrides.difficulty, benchmark.difficulty))
        if difficulty is not None:
            log.append(f"Diff: {difficulty.old} -> {difficulty.new}")

        hp_max = _stat_change(snapshot.hp_max, pick(overrides.hp, benchmark.hp))
        hp_marked = None
        if hp_max is not None:
            log.append(f"HP: {hp_max.old} -> {hp_max.new}")
            if snapshot.hp_marked != 0:
                hp_marked = StatChange(old=snapshot.hp_marked, new=0)

        stress = _stat_change(snapshot.stress_max, pick(overrides.stress, benchmark.stress))
        if stress is not None:
            log.append(f"Stress: {stress.old} -> {stress.new}")

        thresholds = None
        if benchmark.has_thresholds:
            if overrides.has_thresholds:
                pair = (overrides.major, overrides.severe)
            else:
                pair = roll_threshold_pair(benchmark.threshold_min, benchmark.threshold_max, rng)
            if pair is not None and pair[0] and pair[1]:
                new = Thresholds(major=pair[0], severe=pair[1])
                if new != snapshot.thresholds:
                    thresholds = ThresholdChange(old=snapshot.thresholds, new=new)
                    log.append(f"Dmg Thresh: {snapshot.thresholds} -> {new}")

        attack = overrides.attack_bonus
        if attack is None:
            attack = roll_signed(benchmark.attack_modifier, rng)
        attack_bonus = _stat_change(snapshot.attack_bonus, attack)
        if attack_bonus is not None:
            log.append(f"Atk Mod: {_signed(attack_bonus.old)} -> {_signed(attack_bonus.new)}")

        return StatChanges(
            difficulty=difficulty,
            hp_max=hp_max,
            hp_marked=hp_marked,
            stress_max=stress,
            thresholds=thresholds,
            attack_bonus=attack_bonus,
        )

    # ------------------------------------------------------------------
    # Sheet damage
    # ------------------------------------------------------------------

    @staticmethod
    def _manual_damage(
        current: str | None,
        formula: str,
        label: str,
        log: list[str],
    ) -> DamageChange | None:
        """Apply a manual formula.  Raises on malformed *formula*."""
        new = format_formula(require_formula(formula))
        log.append(f"{label} (Manual): {new}")
        old = (current or "").strip()
        return DamageChange(old=old, new=new) if old != new else None

    def _rescale_primary(
        self,
        snapshot: CreatureSnapshot,
        target_tier: int,
        benchmark: TierBenchmark,
        overrides: RescaleOverrides,
        rng: RandomSource,
        log: list[str],
        skipped: list[str],
    ) -> DamageChange | None:
        if overrides.damage_formula:
            try:
                return self._manual_damage(
                    snapshot.attack_damage, overrides.damage_formula, "Sheet Dmg", log,
                )
            except MalformedDamageFormulaError as exc:
                logger.warning("Ignoring sheet damage override for %s: %s", snapshot.name, exc)
                skipped.append(f"Sheet Dmg (Manual): {exc}")
        if not snapshot.attack_damage:
            return None
        try:
            if benchmark.is_minion:
                change = reroll_flat_damage(snapshot.attack_damage, benchmark.basic_attack_range, rng)
            else:
                change = rescale_damage_text(
                    snapshot.attack_damage, target_tier, snapshot.tier, benchmark.damage_rolls,
                )
        except MalformedDamageFormulaError as exc:
            logger.warning("Skipping sheet damage of %s: %s", snapshot.name, exc)
            skipped.append(f"Sheet Dmg: {exc}")
            return None
        if change is not None:
            log.append(f"Sheet Dmg: {change.old} -> {change.new}")
        return change

    def _rescale_alternate(
        self,
        snapshot: CreatureSnapshot,
        target_tier: int,
        benchmark: TierBenchmark,
        overrides: RescaleOverrides,
        log: list[str],
        skipped: list[str],
    ) -> DamageChange | None:
        if overrides.alternate_damage_formula:
            try:
                return self._manual_damage(
                    snapshot.alternate_damage, overrides.alternate_damage_formula,
                    "Halved Dmg", log,
                )
            except MalformedDamageFormulaError as exc:
                logger.warning("Ignoring halved damage override for %s: %s", snapshot.name, exc)
                skipped.append(f"Halved Dmg (Manual): {exc}")
        if not snapshot.alternate_damage or not benchmark.halved_damage_rolls:
            return None
        try:
            change = rescale_damage_text(
                snapshot.alternate_damage, target_tier, snapshot.tier,
                benchmark.halved_damage_rolls,
            )
        except MalformedDamageFormulaError as exc:
            logger.warning("Skipping halved damage of %s: %s", snapshot.name, exc)
            skipped.append(f"Halved Dmg: {exc}")
            return None
        if change is not None:
            log.append(f"Halved Dmg: {change.old} -> {change.new}")
        return change

    # ------------------------------------------------------------------
    # Abilities
    # ------------------------------------------------------------------

    def _rescale_abilities(
        self,
        snapshot: CreatureSnapshot,
        target_tier: int,
        benchmark: TierBenchmark,
        overrides: RescaleOverrides,
        halved: str | None,
        rng: RandomSource,
        log: list[str],
        skipped: list[str],
    ) -> tuple[list[AbilityChange], list[AbilityUpdate]]:
        """Rewrite every ability.

        *halved* is the creature's alternate damage after rescaling; every
        ``Horde`` feature without its own damage override carries it.
        """
        names = dict(overrides.ability_names)
        if overrides.minion_threshold:
            for ability in snapshot.abilities:
                if _MINION_FEATURE_RE.match(ability.name.strip()) and ability.id not in names:
                    names[ability.id] = f"Minion ({overrides.minion_threshold})"

        changes: list[AbilityChange] = []
        updates: list[AbilityUpdate] = []
        for ability in snapshot.abilities:
            horde_formula = None
            if (
                halved
                and ability.id not in overrides.ability_damage
                and _HORDE_FEATURE_RE.match(ability.name.strip())
            ):
                horde_formula = halved

            rewrite = rewrite_ability(
                ability, target_tier, snapshot.tier, benchmark, rng,
                name_override=names.get(ability.id),
                damage_override=overrides.ability_damage.get(ability.id),
                horde_formula=horde_formula,
            )
            if rewrite is None:
                continue
            changes.extend(rewrite.changes)
            log.extend(rewrite.log)
            skipped.extend(rewrite.skipped)
            if rewrite.update is not None:
                updates.append(rewrite.update)
        return changes, updates
