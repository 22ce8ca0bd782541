# games/battle/sockets.py
import logging
from typing import Dict, Optional

from flask import request
from flask_socketio import join_room, leave_room

from .auth import authenticate, bearer_token
from .engine.models import (
    PHASE_ACTIVE,
    PHASE_FINISHED,
    REASON_EMPTY,
    REASON_PLAYER_LEFT,
    BattleResult,
    Identity,
    Room,
)
from .engine.skills import apply_action
from .errors import (
    AlreadyInRoom,
    AuthError,
    BattleError,
    BattleNotActive,
    PlayerNotInRoom,
    RoomNotFound,
)

logger = logging.getLogger(__name__)


class RoomBroadcaster:
    """Room-scoped fan-out over the Socket.IO server."""

    def __init__(self, socketio, namespace: str = "/"):
        self.socketio = socketio
        self.namespace = namespace

    def emit(self, event: str, payload, room_id: str) -> None:
        self.socketio.emit(event, payload, to=room_id, namespace=self.namespace)

    def close(self, room_id: str) -> None:
        self.socketio.close_room(room_id, namespace=self.namespace)


def register_battle_socket_handlers(socketio, registry, loop, config, scheduler):
    identities: Dict[str, Identity] = {}

    def rejected(event: str, exc: BattleError):
        logger.debug("Rejected %s from %s: %s", event, request.sid, exc)
        return exc.payload

    def depart(sid: str) -> Optional[Room]:
        bound = registry.room_for(sid)
        if not bound:
            return None
        room = registry.leave(bound.id, sid)
        if not room:
            return None

        with room.lock:
            if room.phase == PHASE_FINISHED:
                return room
            if not room.players:
                loop.finalize(room, BattleResult(REASON_EMPTY))
            elif room.phase == PHASE_ACTIVE:
                loop.finalize(room, BattleResult(REASON_PLAYER_LEFT, room.players[0].user_id))
            else:
                loop.broadcast_snapshot(room)
        return room

    @socketio.on("connect")
    def battle_connect(auth=None):
        sid = request.sid
        token = bearer_token(auth, request.headers)
        try:
            identity = authenticate(token, config.jwt_secret, config.jwt_algorithms, fallback_id=sid)
        except AuthError as exc:
            logger.warning("Refused connection %s", sid)
            raise ConnectionRefusedError(str(exc))
        identities[sid] = identity
        logger.debug("Connection %s authenticated as %s", sid, identity.user_id)

    @socketio.on("createRoom")
    def create_room(payload=None):
        sid = request.sid
        if registry.room_for(sid):
            return rejected("createRoom", AlreadyInRoom())
        room = registry.create(sid, identities[sid])
        join_room(room.id)
        loop.broadcast_snapshot(room)
        return {"roomId": room.id}

    @socketio.on("joinRoom")
    def join_battle_room(payload=None):
        sid = request.sid
        room_id = payload.get("roomId") if isinstance(payload, dict) else None
        if not isinstance(room_id, str):
            room_id = None
        if registry.room_for(sid):
            return rejected("joinRoom", AlreadyInRoom())
        try:
            room = registry.join(room_id, sid, identities[sid])
        except BattleError as exc:
            return rejected("joinRoom", exc)
        join_room(room.id)
        loop.broadcast_snapshot(room)
        return {"roomId": room.id}

    @socketio.on("startBattle")
    def start_battle(payload=None):
        room = registry.room_for(request.sid)
        if not room:
            return rejected("startBattle", RoomNotFound())
        try:
            loop.start(room)
        except BattleError as exc:
            return rejected("startBattle", exc)
        return {"status": "countdown"}

    @socketio.on("skillAction")
    def skill_action(payload=None):
        sid = request.sid
        room = registry.room_for(sid)
        if not room or room.phase != PHASE_ACTIVE:
            return rejected("skillAction", BattleNotActive())
        with room.lock:
            # a finalize may have landed since the unlocked check
            if room.phase != PHASE_ACTIVE:
                return rejected("skillAction", BattleNotActive())
            player = room.player_by_sid(sid)
            if not player:
                return rejected("skillAction", PlayerNotInRoom())
            applied = apply_action(player, payload or {}, now=scheduler.monotonic() * 1000)
        return {"applied": applied}

    @socketio.on("leaveRoom")
    def leave_battle_room(payload=None):
        sid = request.sid
        bound = registry.room_for(sid)
        if bound:
            leave_room(bound.id)
        depart(sid)
        return {"status": "ok"}

    @socketio.on("disconnect")
    def battle_disconnect(reason=None):
        sid = request.sid
        depart(sid)
        identities.pop(sid, None)
