"""Tests for ability (feature) rewriting."""

from __future__ import annotations

from adv_manager.core.rng import SeededRNG
from adv_manager.ir.benchmarks import TierBenchmark
from adv_manager.ir.creatures import AbilityRecord, SubAction
from adv_manager.ir.results import AbilityChangeKind, DamageChange
from adv_manager.rescale.features import (
    MINION_DESCRIPTION_TEMPLATE,
    apply_substitutions,
    contains_emphasised,
    replace_emphasised,
    rewrite_ability,
)


def _make_minion_benchmark(feature_range: str = "7/9", attack_range: str = "5–8") -> TierBenchmark:
    return TierBenchmark(
        difficulty="14–16",
        hp="1",
        stress="1",
        attack_modifier="+0 to +2",
        minion_feature_range=feature_range,
        basic_attack_range=attack_range,
    )


def _make_ability(
    name: str,
    description: str = "",
    damages: list[str | None] | None = None,
) -> AbilityRecord:
    actions = [
        SubAction(name=f"Action {i}", description=f"Deal {d} damage." if d else "", damage=d)
        for i, d in enumerate(damages or [])
    ]
    return AbilityRecord(id="ab1", name=name, description=description, actions=actions)


# ---- Text substitution ----

class TestApplySubstitutions:
    def test_formula_replaced_everywhere(self) -> None:
        text = "Deals 2d6+3, or 2d6+3 when flanking."
        out = apply_substitutions(text, [DamageChange(old="2d6+3", new="3d6+6")])
        assert out == "Deals 3d6+6, or 3d6+6 when flanking."

    def test_plus_sign_is_literal(self) -> None:
        out = apply_substitutions("2d6+3 vs 2d63", [DamageChange(old="2d6+3", new="3d6+6")])
        assert out == "3d6+6 vs 2d63"

    def test_short_number_only_inside_emphasis(self) -> None:
        text = "Within 5 feet, take <strong>5</strong> damage or **5** stress."
        out = apply_substitutions(text, [DamageChange(old="5", new="7")])
        assert out == "Within 5 feet, take <strong>7</strong> damage or **7** stress."

    def test_short_number_other_tags(self) -> None:
        out = apply_substitutions("<b>3</b> and <em>3</em>", [DamageChange(old="3", new="4")])
        assert out == "<b>4</b> and <em>4</em>"

    def test_three_digit_number_is_literal(self) -> None:
        out = apply_substitutions("roll 100 times", [DamageChange(old="100", new="120")])
        assert out == "roll 120 times"

    def test_empty_text(self) -> None:
        assert apply_substitutions("", [DamageChange(old="1", new="2")]) == ""

    def test_emphasis_helpers(self) -> None:
        assert contains_emphasised("a <strong>12</strong> b", "12")
        assert not contains_emphasised("a 12 b", "12")
        assert replace_emphasised("<strong>12</strong> 12", "12", "14") == "<strong>14</strong> 12"


# ---- Sub-action damage ----

class TestActionDamage:
    def test_rescales_against_target_tier(self, catalog, low_rng) -> None:
        ability = _make_ability("Claws", "<p>The beast rakes for 2d8+2.</p>", ["2d8+2"])
        rewrite = rewrite_ability(ability, 3, 2, catalog.get("standard", 3), low_rng)
        assert rewrite.update.actions[0].damage == "3d8+2"
        assert rewrite.update.actions[0].description == "Deal 3d8+2 damage."
        assert rewrite.update.description == "<p>The beast rakes for 3d8+2.</p>"
        assert rewrite.log == ["Claws: 2d8+2 -> 3d8+2"]
        assert rewrite.changes[0].kind is AbilityChangeKind.DAMAGE

    def test_actions_without_damage_untouched(self, catalog, low_rng) -> None:
        ability = _make_ability("Hide", "<p>Vanishes.</p>", [None])
        assert rewrite_ability(ability, 3, 2, catalog.get("standard", 3), low_rng) is None

    def test_minion_rerolls_flat(self, make_rng) -> None:
        ability = _make_ability(
            "Group Attack", "<p>Each minion deals <strong>2</strong> damage, 2 times.</p>", ["2"],
        )
        rewrite = rewrite_ability(ability, 3, 2, _make_minion_benchmark(), make_rng(7))
        assert rewrite.update.actions[0].damage == "7"
        assert rewrite.update.description == (
            "<p>Each minion deals <strong>7</strong> damage, 2 times.</p>"
        )

    def test_damage_override_hits_first_damaging_action(self, catalog, low_rng) -> None:
        ability = _make_ability("Flurry", "", [None, "2d8+2", "2d8+2"])
        rewrite = rewrite_ability(
            ability, 3, 2, catalog.get("standard", 3), low_rng, damage_override="4d6 + 2",
        )
        damages = [a.damage for a in rewrite.update.actions]
        assert damages == [None, "4d6+2", "3d8+2"]

    def test_malformed_override_falls_back(self, catalog, low_rng) -> None:
        ability = _make_ability("Claws", "", ["2d8+2"])
        rewrite = rewrite_ability(
            ability, 3, 2, catalog.get("standard", 3), low_rng, damage_override="huge",
        )
        assert rewrite.update.actions[0].damage == "3d8+2"
        assert rewrite.skipped == ["Claws (Manual): Malformed damage formula 'huge'"]

    def test_malformed_damage_skipped(self, catalog, low_rng) -> None:
        ability = _make_ability("Weird", "", ["lots"])
        rewrite = rewrite_ability(ability, 3, 2, catalog.get("standard", 3), low_rng)
        assert rewrite.update is None
        assert len(rewrite.skipped) == 1
        assert "lots" in rewrite.skipped[0]

    def test_malformed_does_not_block_other_actions(self, catalog, low_rng) -> None:
        ability = _make_ability("Mixed", "", ["lots", "2d8+2"])
        rewrite = rewrite_ability(ability, 3, 2, catalog.get("standard", 3), low_rng)
        assert [a.damage for a in rewrite.update.actions] == ["lots", "3d8+2"]
        assert len(rewrite.skipped) == 1


# ---- Horde ----

class TestHorde:
    def test_horde_tier_up(self, catalog, low_rng) -> None:
        ability = _make_ability(
            "Horde (2d6+3)",
            "<p>When the Horde has marked half or more of its HP, "
            "its standard attack deals 2d6+3 physical damage instead.</p>",
        )
        rewrite = rewrite_ability(ability, 3, 2, catalog.get("horde", 3), low_rng)
        assert rewrite.update.name == "Horde (3d6+6)"
        assert "2d6+3" not in rewrite.update.description
        assert "deals 3d6+6 physical damage" in rewrite.update.description
        assert rewrite.log == ["Name Update: Horde (2d6+3) -> Horde (3d6+6)"]
        assert rewrite.changes[0].kind is AbilityChangeKind.NAME_HORDE

    def test_placeholder_uses_halved_table(self, catalog, low_rng) -> None:
        ability = _make_ability("Horde (X)", "<p>Attack deals [X] instead.</p>")
        rewrite = rewrite_ability(ability, 3, 2, catalog.get("horde", 3), low_rng)
        assert rewrite.update.name == "Horde (3d4+1)"
        assert rewrite.update.description == "<p>Attack deals 3d4+1 instead.</p>"

    def test_reuses_pending_substitution(self, low_rng) -> None:
        bm = TierBenchmark(
            difficulty="14", hp="6", stress="3", attack_modifier="+1",
            damage_rolls=["3d6+6"],
        )
        ability = _make_ability("Horde (2d6+3)", "", ["2d6+3"])
        rewrite = rewrite_ability(ability, 3, 2, bm, low_rng)
        assert rewrite.update.name == "Horde (3d6+6)"
        assert rewrite.update.actions[0].damage == "3d6+6"

    def test_horde_formula_pins_name(self, catalog, low_rng) -> None:
        ability = _make_ability("Horde (2d6+3)", "<p>Deals 2d6+3.</p>")
        rewrite = rewrite_ability(
            ability, 3, 2, catalog.get("horde", 3), low_rng, horde_formula="2d6+2",
        )
        assert rewrite.update.name == "Horde (2d6+2)"
        assert rewrite.update.description == "<p>Deals 2d6+2.</p>"

    def test_damage_override_beats_horde_formula(self, catalog, low_rng) -> None:
        ability = _make_ability("Horde (2d6+3)")
        rewrite = rewrite_ability(
            ability, 3, 2, catalog.get("horde", 3), low_rng,
            damage_override="3d8", horde_formula="2d6+2",
        )
        assert rewrite.update.name == "Horde (3d8)"

    def test_bare_name_resolved_like_placeholder(self, catalog, low_rng) -> None:
        ability = _make_ability("Horde", "<p>Attack deals [X] instead.</p>")
        rewrite = rewrite_ability(ability, 3, 2, catalog.get("horde", 3), low_rng)
        assert rewrite.update.name == "Horde (3d4+1)"
        assert rewrite.update.description == "<p>Attack deals 3d4+1 instead.</p>"

    def test_parenthesised_placeholder_in_text(self, catalog, low_rng) -> None:
        ability = _make_ability("Horde (X)", "<p>Attack deals (X) instead.</p>")
        rewrite = rewrite_ability(ability, 3, 2, catalog.get("horde", 3), low_rng)
        assert rewrite.update.description == "<p>Attack deals (3d4+1) instead.</p>"


# ---- Minion ----

class TestMinion:
    def test_bold_threshold_substituted_in_place(self, make_rng) -> None:
        ability = _make_ability(
            "Minion (5)",
            "<p>For every <strong>5</strong> damage a PC deals, defeat an additional "
            "Minion within 5 feet.</p>",
        )
        rewrite = rewrite_ability(ability, 3, 2, _make_minion_benchmark("7/9"), make_rng(8))
        assert rewrite.update.name == "Minion (8)"
        assert rewrite.update.description == (
            "<p>For every <strong>8</strong> damage a PC deals, defeat an additional "
            "Minion within 5 feet.</p>"
        )
        assert rewrite.changes[0].kind is AbilityChangeKind.NAME_MINION

    def test_threshold_stays_in_range(self) -> None:
        rng = SeededRNG(9)
        bm = _make_minion_benchmark("7/9")
        for _ in range(30):
            rewrite = rewrite_ability(_make_ability("Minion (5)"), 3, 2, bm, rng)
            assert rewrite.update.name in {"Minion (7)", "Minion (8)", "Minion (9)"}

    def test_template_when_no_emphasis(self, make_rng) -> None:
        ability = _make_ability("Minion (3)", "<p>Old text.</p>")
        rewrite = rewrite_ability(ability, 2, 1, _make_minion_benchmark("5–7"), make_rng(6))
        assert rewrite.update.description == MINION_DESCRIPTION_TEMPLATE.format(value=6)

    def test_placeholder_filled(self, make_rng) -> None:
        ability = _make_ability("Minion (3)", "<p>For every [X] damage...</p>")
        rewrite = rewrite_ability(ability, 2, 1, _make_minion_benchmark("5–7"), make_rng(5))
        assert rewrite.update.description == "<p>For every 5 damage...</p>"

    def test_placeholder_name_rolled(self, make_rng) -> None:
        ability = _make_ability("Minion (X)", "<p>For every [X] damage...</p>")
        rewrite = rewrite_ability(ability, 2, 1, _make_minion_benchmark("5–7"), make_rng(6))
        assert rewrite.update.name == "Minion (6)"
        assert rewrite.update.description == "<p>For every 6 damage...</p>"
        assert rewrite.changes[0].kind is AbilityChangeKind.NAME_MINION

    def test_bare_name_rolled(self, make_rng) -> None:
        ability = _make_ability("Minion", "<p>Old text.</p>")
        rewrite = rewrite_ability(ability, 2, 1, _make_minion_benchmark("5–7"), make_rng(7))
        assert rewrite.update.name == "Minion (7)"
        assert rewrite.update.description == MINION_DESCRIPTION_TEMPLATE.format(value=7)

    def test_parenthesised_placeholder_in_text(self, make_rng) -> None:
        ability = _make_ability("Minion (X)", "<p>Threshold (X).</p>")
        rewrite = rewrite_ability(ability, 2, 1, _make_minion_benchmark("5–7"), make_rng(6))
        assert rewrite.update.description == "<p>Threshold (6).</p>"


# ---- Overrides and no-ops ----

class TestNameOverride:
    def test_override_wins(self, catalog, low_rng) -> None:
        ability = _make_ability("Horde (2d6+3)")
        rewrite = rewrite_ability(
            ability, 3, 2, catalog.get("horde", 3), low_rng, name_override="Swarm",
        )
        assert rewrite.update.name == "Swarm"
        assert rewrite.log == ["Name Override: Horde (2d6+3) -> Swarm"]
        assert rewrite.changes[0].kind is AbilityChangeKind.NAME_OVERRIDE

    def test_minion_override_sets_threshold(self, low_rng) -> None:
        ability = _make_ability("Minion (5)", "<p>Every <strong>5</strong> damage.</p>")
        rewrite = rewrite_ability(
            ability, 3, 2, _make_minion_benchmark(), low_rng, name_override="Minion (9)",
        )
        assert rewrite.update.name == "Minion (9)"
        assert rewrite.update.description == "<p>Every <strong>9</strong> damage.</p>"
        assert low_rng.calls == []

    def test_plain_ability_unchanged(self, catalog, low_rng) -> None:
        ability = _make_ability("Keen Senses", "<p>Cannot be surprised.</p>")
        assert rewrite_ability(ability, 3, 2, catalog.get("standard", 3), low_rng) is None
