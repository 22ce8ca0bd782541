# games/battle/engine/skills.py
import time
from typing import Any, Dict, Optional

from .models import Player
from .rules import clamp
from ..content.balance import CAPS, TIMING
from ..content.skills import SKILLS


def now_ms() -> float:
    return time.monotonic() * 1000


def apply_action(player: Player, action: Optional[Dict[str, Any]], now: Optional[float] = None) -> bool:
    """
    Validate one skill action and fold it into the player's live stats.

    Returns False (without touching the player) for a missing or unknown type,
    or when the player's previous accepted action is less than
    min_action_interval_ms old.
    """
    if not isinstance(action, dict):
        return False
    skill_type = action.get("type")
    if not isinstance(skill_type, str):
        return False
    skill = SKILLS.get(skill_type)
    if not skill:
        return False

    now = now_ms() if now is None else now
    live = player.live
    if live.last_action_at is not None and now - live.last_action_at < TIMING["min_action_interval_ms"]:
        return False

    live.last_action_at = now
    live.combo = clamp(live.combo + skill["combo"], CAPS["combo_min"], CAPS["combo_max"])
    live.reaction_score = clamp(
        live.reaction_score + skill["reaction"], CAPS["reaction_min"], CAPS["reaction_max"]
    )
    return True
