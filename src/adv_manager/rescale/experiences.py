"""Experience adjustment on tier change."""

from __future__ import annotations

from dataclasses import dataclass, field

from adv_manager.ir.creatures import Experience
from adv_manager.ir.results import ExperienceChange

EXPERIENCE_MIN = 2
EXPERIENCE_MAX = 5
NEW_EXPERIENCE_NAME = "New Experience"
NEW_EXPERIENCE_DESCRIPTION = "Added by Adversary Manager"


@dataclass
class ExperienceRescale:
    changes: list[ExperienceChange] = field(default_factory=list)
    added: list[Experience] = field(default_factory=list)
    log: list[str] = field(default_factory=list)


def rescale_experiences(
    experiences: list[Experience],
    new_tier: int,
    current_tier: int,
) -> ExperienceRescale:
    """Shift every experience by the tier delta, clamped to 2..5.

    Crossing from tier 1-2 into tier 3+ also grants one new experience,
    worth +3 at tier 3 and +4 above.
    """
    out = ExperienceRescale()
    delta = new_tier - current_tier

    for exp in experiences:
        new_value = min(EXPERIENCE_MAX, max(EXPERIENCE_MIN, exp.value + delta))
        if new_value != exp.value:
            out.changes.append(ExperienceChange(
                experience_id=exp.id, name=exp.name, old=exp.value, new=new_value,
            ))
            out.log.append(f"Exp ({exp.name}): {exp.value} -> {new_value}")

    if current_tier <= 2 and new_tier >= 3:
        value = 3 if new_tier == 3 else 4
        out.added.append(Experience(
            name=NEW_EXPERIENCE_NAME, value=value, description=NEW_EXPERIENCE_DESCRIPTION,
        ))
        out.log.append(f'New Exp: Added "{NEW_EXPERIENCE_NAME}" ({value})')

    return out
