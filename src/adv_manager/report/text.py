"""Plain-text reports for rescales and encounter budgets."""

from __future__ import annotations

from adv_manager.ir.encounters import BudgetState
from adv_manager.ir.results import RescaleFailure, RescaleResult


def generate_text_log(result: RescaleResult | RescaleFailure) -> str:
    """Render one rescale outcome as a short terminal-friendly block."""
    if isinstance(result, RescaleFailure):
        return f"{result.actor_id}: not rescaled ({result.reason.value}): {result.message}"

    lines: list[str] = [
        f"{result.name.upper()} (T{result.current_tier} -> T{result.target_tier})",
    ]
    if result.stats_log:
        lines.append("  " + " | ".join(result.stats_log))
    for entry in result.feature_log:
        lines.append(f"  * {entry}")
    for entry in result.skipped:
        lines.append(f"  ! skipped {entry}")
    return "\n".join(lines)


def generate_batch_log(results: list[RescaleResult | RescaleFailure]) -> str:
    return "\n\n".join(generate_text_log(r) for r in results)


def generate_budget_report(state: BudgetState) -> str:
    """Human-readable summary of an encounter budget."""
    lines: list[str] = []

    lines.append("=" * 40)
    lines.append(
        f"Encounter Budget: {state.party_count} PCs, Tier {state.party_tier},"
        f" Fear {state.fear_band.value}"
    )
    lines.append("=" * 40)
    lines.append(f"  Base budget:  {state.base_budget}")
    for m in state.modifiers:
        tag = " (manual)" if m.manual else ""
        lines.append(f"  {m.label + tag:28s} {m.value:+d}")
    lines.append(f"  Limit:        {state.limit}")
    lines.append(f"  Cost:         {state.cost}")
    lines.append(f"  Remaining:    {state.remaining}")
    if state.average_tier:
        lines.append(f"  Average tier: T{state.average_tier}")
    lines.append("")
    lines.append(f"Difficulty: {state.difficulty.value}")
    return "\n".join(lines)
