# games/battle/engine/models.py
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..content.balance import DEFAULTS

PHASE_LOBBY = "lobby"
PHASE_COUNTDOWN = "countdown"
PHASE_ACTIVE = "active"
PHASE_FINISHED = "finished"

REASON_DOMINANCE = "dominance"
REASON_ENERGY = "energy"
REASON_PLAYER_LEFT = "player_left"
REASON_EMPTY = "empty"


@dataclass(frozen=True)
class Identity:
    """Canonical identity of an authenticated connection."""
    user_id: str
    username: str


@dataclass
class BaseStats:
    power: int = DEFAULTS["power"]
    stability: int = DEFAULTS["stability"]


@dataclass
class LiveStats:
    energy: float = DEFAULTS["energy"]
    combo: float = DEFAULTS["combo"]
    reaction_score: float = DEFAULTS["reaction_score"]
    last_action_at: Optional[float] = None   # ms, monotonic; None until first accepted action


@dataclass
class Player:
    sid: str
    user_id: str
    username: str
    base: BaseStats = field(default_factory=BaseStats)
    live: LiveStats = field(default_factory=LiveStats)

    @classmethod
    def from_identity(cls, sid: str, identity: Identity) -> "Player":
        return cls(sid=sid, user_id=identity.user_id, username=identity.username)


@dataclass
class BattleResult:
    reason: str                              # "dominance" | "energy" | "player_left" | "empty"
    winner: Optional[str] = None             # winner's user_id

    def to_payload(self) -> Dict[str, Any]:
        return {"reason": self.reason, "winner": self.winner}


@dataclass
class Room:
    id: str
    players: List[Player] = field(default_factory=list)   # [p1, p2]
    phase: str = PHASE_LOBBY                 # "lobby" | "countdown" | "active" | "finished"
    dominance: float = 0.0
    energy: Dict[str, float] = field(default_factory=lambda: {
        "p1": DEFAULTS["energy"],
        "p2": DEFAULTS["energy"],
    })
    tick_handle: Any = None
    countdown_handle: Any = None
    lock: Any = field(default_factory=threading.RLock, repr=False, compare=False)

    def player_by_sid(self, sid: str) -> Optional[Player]:
        for player in self.players:
            if player.sid == sid:
                return player
        return None

    @property
    def is_full(self) -> bool:
        return len(self.players) >= 2
