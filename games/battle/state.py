# games/battle/state.py
import logging
import random
import string
import threading
import time
from typing import Dict, Optional

from .engine.models import PHASE_LOBBY, Identity, Player, Room
from .errors import RoomFull, RoomNotFound, RoomNotJoinable

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def generate_room_id() -> str:
    suffix = "".join(random.choice(_BASE36) for _ in range(6))
    return f"room_{_base36(int(time.time() * 1000))}{suffix}"


class RoomRegistry:
    """In-memory directory of active rooms plus the connection -> room bindings."""

    def __init__(self):
        self._rooms: Dict[str, Room] = {}
        self._sid_to_room: Dict[str, str] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id) -> bool:
        return isinstance(room_id, str) and room_id in self._rooms

    def create(self, sid: str, identity: Identity) -> Room:
        with self._lock:
            room_id = generate_room_id()
            while room_id in self._rooms:
                room_id = generate_room_id()
            room = Room(id=room_id, players=[Player.from_identity(sid, identity)])
            self._rooms[room_id] = room
            self._sid_to_room[sid] = room_id
        logger.info("Room %s created by %s", room_id, identity.user_id)
        return room

    def join(self, room_id: Optional[str], sid: str, identity: Identity) -> Room:
        room = self.get(room_id)
        if not room:
            raise RoomNotFound()
        # lock order is always room, then registry
        with room.lock:
            if room.is_full:
                raise RoomFull()
            if room.phase != PHASE_LOBBY:
                raise RoomNotJoinable()
            room.players.append(Player.from_identity(sid, identity))
            with self._lock:
                self._sid_to_room[sid] = room.id
        logger.info("%s joined room %s", identity.user_id, room.id)
        return room

    def get(self, room_id: Optional[str]) -> Optional[Room]:
        if not isinstance(room_id, str):
            return None
        return self._rooms.get(room_id)

    def room_for(self, sid: str) -> Optional[Room]:
        return self.get(self._sid_to_room.get(sid))

    def remove(self, room_id: Optional[str]) -> None:
        with self._lock:
            room = self._rooms.pop(room_id, None) if room_id else None
            if not room:
                return
            for sid, bound in list(self._sid_to_room.items()):
                if bound == room_id:
                    del self._sid_to_room[sid]

    def leave(self, room_id: Optional[str], sid: str) -> Optional[Room]:
        """Drop the connection's player from the room. Teardown is the caller's decision."""
        room = self.get(room_id)
        if not room:
            self._unbind(sid, room_id)
            return None
        with room.lock:
            room.players = [p for p in room.players if p.sid != sid]
            self._unbind(sid, room_id)
        logger.info("Connection %s left room %s", sid, room_id)
        return room

    def _unbind(self, sid: str, room_id: Optional[str]) -> None:
        with self._lock:
            if room_id and self._sid_to_room.get(sid) == room_id:
                del self._sid_to_room[sid]
