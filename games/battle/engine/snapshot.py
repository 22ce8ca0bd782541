# games/battle/engine/snapshot.py
from typing import Any, Dict, Optional

from .models import Player, Room


def pack_player(player: Optional[Player]) -> Optional[Dict[str, Any]]:
    # last_action_at stays server-side
    if player is None:
        return None
    return {
        "userId": player.user_id,
        "username": player.username,
        "base": {"power": player.base.power, "stability": player.base.stability},
        "live": {
            "energy": player.live.energy,
            "combo": player.live.combo,
            "reactionScore": player.live.reaction_score,
        },
    }


def snapshot_for(room: Room) -> Dict[str, Any]:
    """battleUpdate payload shared by every member of the room."""
    p1 = room.players[0] if len(room.players) > 0 else None
    p2 = room.players[1] if len(room.players) > 1 else None
    return {
        "id": room.id,
        "phase": room.phase,
        "dominance": room.dominance,
        "energy": {"p1": room.energy["p1"], "p2": room.energy["p2"]},
        "players": {"p1": pack_player(p1), "p2": pack_player(p2)},
    }

