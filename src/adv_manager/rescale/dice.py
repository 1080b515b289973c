"""Damage notation parsing and formatting.

Accepted forms::

    "6"        -> flat 6
    "d8"       -> 1d8
    "2d6+3"    -> 2d6+3
    "3d10 - 1" -> 3d10-1

Formatting is canonical: the bonus suffix is omitted when zero, so
``format_formula(parse_formula(s)) == s`` for any canonical ``s``.
"""

from __future__ import annotations

import re

from adv_manager.core.errors import MalformedDamageFormulaError
from adv_manager.ir.formulas import DamageFormula

_FLAT_RE = re.compile(r"^\s*([+-]?\d+)\s*$")
_DICE_RE = re.compile(
    r"^\s*(\d+)?\s*d\s*(\d+)\s*(?:([+-])\s*(\d+))?\s*$",
    re.IGNORECASE,
)


def parse_formula(text: object) -> DamageFormula | None:
    """Parse damage notation, returning None for anything unrecognised."""
    if text is None:
        return None
    s = str(text)

    flat = _FLAT_RE.match(s)
    if flat:
        return DamageFormula.flat(int(flat.group(1)))

    m = _DICE_RE.match(s)
    if not m:
        return None
    count = int(m.group(1)) if m.group(1) else 1
    die = int(m.group(2))
    bonus = 0
    if m.group(4):
        bonus = int(m.group(4))
        if m.group(3) == "-":
            bonus = -bonus
    if die <= 0:
        return None
    return DamageFormula(count=count, die=die, bonus=bonus)


def require_formula(text: object) -> DamageFormula:
    """Like :func:`parse_formula` but raise on malformed input."""
    formula = parse_formula(text)
    if formula is None:
        raise MalformedDamageFormulaError(text)
    return formula


def format_formula(formula: DamageFormula) -> str:
    """Render a formula in canonical notation."""
    if formula.is_flat:
        return str(formula.bonus)
    text = f"{formula.count}d{formula.die}"
    if formula.bonus > 0:
        text += f"+{formula.bonus}"
    elif formula.bonus < 0:
        text += str(formula.bonus)
    return text


def normalise(text: str) -> str:
    """Canonical form of *text* if it parses, else *text* unchanged."""
    formula = parse_formula(text)
    return format_formula(formula) if formula is not None else text


def average(formula: DamageFormula) -> float:
    """Expected damage of a formula."""
    if formula.is_flat:
        return float(formula.bonus)
    return formula.count * (formula.die + 1) / 2 + formula.bonus
