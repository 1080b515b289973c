"""HTML chat card for a batch of rescales, rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from adv_manager.ir.results import RescaleFailure, RescaleResult

_TEMPLATE_DIR = Path(__file__).parent / "templates"

_jinja = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    keep_trailing_newline=True,
    autoescape=True,
)


def split_label(line: str) -> tuple[str, str]:
    """Split ``"HP: 5 -> 7"`` into ``("HP", "5 -> 7")``; unlabeled lines get ``""``."""
    label, sep, rest = line.partition(": ")
    if not sep:
        return "", line
    return label, rest


def _entry(result: RescaleResult) -> dict[str, Any]:
    return {
        "name": result.name,
        "current_tier": result.current_tier,
        "stats": [split_label(line) for line in result.stats_log],
        "features": [split_label(line) for line in result.feature_log],
    }


def render_chat_card(
    results: list[RescaleResult | RescaleFailure],
    target_tier: int,
) -> str:
    """Render the GM chat card summarising a batch update to *target_tier*."""
    template = _jinja.get_template("chat_card.html.j2")
    return template.render(
        target_tier=target_tier,
        entries=[_entry(r) for r in results if isinstance(r, RescaleResult)],
        failures=[r for r in results if isinstance(r, RescaleFailure)],
    )
