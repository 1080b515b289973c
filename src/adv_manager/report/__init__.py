"""Rendering of rescale logs and encounter budgets."""

from adv_manager.report.chat import render_chat_card, split_label
from adv_manager.report.text import (
    generate_batch_log,
    generate_budget_report,
    generate_text_log,
)

__all__ = [
    "generate_batch_log",
    "generate_budget_report",
    "generate_text_log",
    "render_chat_card",
    "split_label",
]
