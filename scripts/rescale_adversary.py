#!/usr/bin/env python3
"""Rescale adversaries stored as JSON snapshots to a new tier.

Usage:
    uv run python scripts/rescale_adversary.py data/goblins.json --tier 3
    uv run python scripts/rescale_adversary.py data/goblins.json --tier 3 --seed 42 -o out.json
    uv run python scripts/rescale_adversary.py data/goblins.json --tier 2 --chat-card card.html

The input file holds one snapshot object or a list of them.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from adv_manager.content.catalog import BenchmarkCatalog, default_catalog
from adv_manager.content.repository import InMemoryActorRepository
from adv_manager.core.rng import SeededRNG
from adv_manager.core.settings import RescaleSettings
from adv_manager.ir.creatures import CreatureSnapshot
from adv_manager.ir.results import RescaleResult
from adv_manager.report import generate_text_log, render_chat_card
from adv_manager.rescale.actor import ActorRescaler


def main() -> None:
    parser = argparse.ArgumentParser(description="Rescale adversary snapshots to a target tier.")
    parser.add_argument("snapshots", type=Path, help="Path to snapshot JSON (object or list)")
    parser.add_argument("--tier", type=int, required=True, choices=[1, 2, 3, 4], help="Target tier")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for replayable rolls")
    parser.add_argument("--benchmarks", type=Path, default=None, help="Alternate benchmark table JSON")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Write updated snapshots here")
    parser.add_argument("--chat-card", type=Path, default=None, help="Write an HTML chat card here")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    with open(args.snapshots) as f:
        raw = json.load(f)
    items = raw if isinstance(raw, list) else [raw]
    snapshots = [CreatureSnapshot.model_validate(item) for item in items]
    print(f"Loaded {len(snapshots)} adversaries from {args.snapshots}")

    catalog = BenchmarkCatalog.from_json(args.benchmarks) if args.benchmarks else default_catalog()
    rng = SeededRNG(args.seed)
    rescaler = ActorRescaler(catalog, rng, RescaleSettings.from_env())
    print(f"  seed: {rng.seed}\n")

    repo = InMemoryActorRepository(snapshots)
    outcomes = []
    for snapshot in snapshots:
        outcome = rescaler.rescale_stored(repo, snapshot.id, args.tier)
        if outcome is None:
            print(f"{snapshot.name}: already tier {args.tier}\n")
            continue
        outcomes.append(outcome)
        print(generate_text_log(outcome))
        print()

    updated = sum(1 for o in outcomes if isinstance(o, RescaleResult))
    print(f"Updated {updated}/{len(snapshots)} adversaries")

    if args.output:
        data = [repo.get_snapshot(s.id).model_dump(mode="json") for s in snapshots]
        args.output.write_text(json.dumps(data, indent=2))
        print(f"Wrote {args.output}")

    if args.chat_card and rescaler.settings.chat_log and outcomes:
        args.chat_card.write_text(render_chat_card(outcomes, args.tier))
        print(f"Wrote {args.chat_card}")


if __name__ == "__main__":
    main()
