"""Feature toggles for the rescaler.

Mirrors the module settings a game master can flip: whether experiences are
adjusted, whether suggested features are added on tier-up, and whether the
caller should post a chat log.
"""

from __future__ import annotations

import os
from typing import Mapping

from pydantic import BaseModel

_TRUTHY = frozenset({"1", "true", "yes", "on"})

ENV_UPDATE_EXPERIENCES = "ADV_MANAGER_UPDATE_EXPERIENCES"
ENV_ADD_FEATURES = "ADV_MANAGER_ADD_FEATURES"
ENV_CHAT_LOG = "ADV_MANAGER_CHAT_LOG"


class RescaleSettings(BaseModel):
    """Switches consulted by :class:`~adv_manager.rescale.actor.ActorRescaler`."""

    update_experiences: bool = True
    """Shift experience modifiers and add one on crossing into tier 3+."""

    add_suggested_features: bool = True
    """Add one suggested feature from the target tier on tier-up."""

    chat_log: bool = True
    """Whether callers should deliver the change log to chat."""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RescaleSettings:
        """Build settings from ``ADV_MANAGER_*`` environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        values: dict[str, bool] = {}
        for field, var in (
            ("update_experiences", ENV_UPDATE_EXPERIENCES),
            ("add_suggested_features", ENV_ADD_FEATURES),
            ("chat_log", ENV_CHAT_LOG),
        ):
            raw = env.get(var)
            if raw is not None:
                values[field] = raw.strip().lower() in _TRUTHY
        return cls(**values)
