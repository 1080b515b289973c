#!/usr/bin/env python3
"""Score an encounter's Battle Point budget against a party.

Units are given as ``archetype:tier`` with optional ``+boost`` and
``@ability`` flags:

    uv run python scripts/encounter_budget.py --party 4 --tier 1 bruiser:1 minion:1 minion:1
    uv run python scripts/encounter_budget.py --party 3 --tier 2 --fear 4-8 solo:2+boost leader:2@summoner
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from adv_manager.encounters.budget import compute_budget, damage_boost_feature
from adv_manager.ir.encounters import EncounterUnit, FearBand, SpecialAbility
from adv_manager.report import generate_budget_report


def parse_unit(text: str) -> EncounterUnit:
    """Parse ``archetype[:tier][+boost][@ability...]``."""
    specials = text.split("@")
    head, abilities = specials[0], specials[1:]
    boost = head.endswith("+boost")
    if boost:
        head = head[: -len("+boost")]
    archetype, _, tier = head.partition(":")
    return EncounterUnit(
        archetype=archetype,
        tier=int(tier) if tier else None,
        special_abilities={SpecialAbility(a.lower()) for a in abilities},
        damage_boost=boost,
        name=text,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Compute an encounter Battle Point budget.")
    parser.add_argument("units", nargs="*", help="Units as archetype:tier[+boost][@ability]")
    parser.add_argument("--party", type=int, default=4, help="Number of PCs (default: 4)")
    parser.add_argument("--tier", type=int, default=1, choices=[1, 2, 3, 4], help="Party tier")
    parser.add_argument(
        "--fear", default=FearBand.ONE_TO_THREE.value,
        choices=[b.value for b in FearBand], help="Fear budget band",
    )
    parser.add_argument("--easier", action="store_true", default=False, help="Shorter/easier fight")
    parser.add_argument("--harder", action="store_true", default=False, help="Longer/harder fight")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        units = [parse_unit(u) for u in args.units]
    except ValueError as exc:
        parser.error(str(exc))

    state = compute_budget(
        units, args.party, args.tier, args.fear, easier=args.easier, harder=args.harder,
    )
    print(generate_budget_report(state))

    boosted = [u for u in units if u.damage_boost]
    if boosted:
        print("\nDamage boosts:")
        for u in boosted:
            print(f"  {u.name}: add {damage_boost_feature(u.tier)}")


if __name__ == "__main__":
    main()
