# games/battle/engine/loop.py
import logging
from typing import Optional

from .models import (
    PHASE_ACTIVE,
    PHASE_COUNTDOWN,
    PHASE_FINISHED,
    PHASE_LOBBY,
    REASON_DOMINANCE,
    REASON_ENERGY,
    REASON_PLAYER_LEFT,
    BattleResult,
    Room,
)
from .rules import apply_skill_decay, drain_energy, shift_dominance, total_pressure
from .snapshot import snapshot_for
from ..content.balance import CAPS, TIMING
from ..errors import BattleAlreadyStarted, NotEnoughPlayers

logger = logging.getLogger(__name__)


def evaluate_tick(room: Room) -> Optional[BattleResult]:
    """
    Advance one active room by a single tick.

    Returns the terminal result when the tick ends the battle, None otherwise.
    Terminal checks run in a fixed order (dominance before energy, p1 before p2),
    so a tick where both energies hit zero always goes to player 2.
    """
    if len(room.players) < 2:
        return BattleResult(REASON_PLAYER_LEFT)

    p1, p2 = room.players[0], room.players[1]
    apply_skill_decay(p1)
    apply_skill_decay(p2)

    total_p1 = total_pressure(p1)
    total_p2 = total_pressure(p2)

    room.dominance = shift_dominance(room.dominance, total_p1, total_p2)

    room.energy["p1"] = drain_energy(room.energy["p1"], total_p2)
    room.energy["p2"] = drain_energy(room.energy["p2"], total_p1)
    p1.live.energy = room.energy["p1"]
    p2.live.energy = room.energy["p2"]

    if room.dominance >= CAPS["dominance_max"]:
        return BattleResult(REASON_DOMINANCE, p1.user_id)
    if room.dominance <= CAPS["dominance_min"]:
        return BattleResult(REASON_DOMINANCE, p2.user_id)
    if room.energy["p1"] <= CAPS["energy_min"]:
        return BattleResult(REASON_ENERGY, p2.user_id)
    if room.energy["p2"] <= CAPS["energy_min"]:
        return BattleResult(REASON_ENERGY, p1.user_id)
    return None


class BattleLoop:
    """Drives rooms through lobby -> countdown -> active -> finished."""

    def __init__(self, registry, scheduler, broadcaster):
        self.registry = registry
        self.scheduler = scheduler
        self.broadcaster = broadcaster

    def _registered(self, room: Room) -> bool:
        return self.registry.get(room.id) is room

    def broadcast_snapshot(self, room: Room) -> None:
        self.broadcaster.emit("battleUpdate", snapshot_for(room), room.id)

    def start(self, room: Room) -> None:
        with room.lock:
            if len(room.players) < 2:
                raise NotEnoughPlayers()
            if room.phase != PHASE_LOBBY:
                raise BattleAlreadyStarted()
            room.phase = PHASE_COUNTDOWN
            self.broadcast_snapshot(room)
            room.countdown_handle = self.scheduler.call_later(
                TIMING["countdown_ms"] / 1000,
                lambda: self._activate(room),
                name=f"countdown:{room.id}",
            )
        logger.info("Room %s counting down", room.id)

    def _activate(self, room: Room) -> None:
        with room.lock:
            # everyone may have left while the countdown was pending
            if not self._registered(room) or room.phase != PHASE_COUNTDOWN:
                return
            room.countdown_handle = None
            room.phase = PHASE_ACTIVE
            self.broadcast_snapshot(room)
            room.tick_handle = self.scheduler.call_every(
                TIMING["tick_ms"] / 1000,
                lambda: self.tick(room),
                name=f"tick:{room.id}",
            )
        logger.info("Room %s active", room.id)

    def tick(self, room: Room) -> None:
        with room.lock:
            if not self._registered(room) or room.phase != PHASE_ACTIVE:
                return
            try:
                result = evaluate_tick(room)
            except Exception:
                logger.exception("Tick failed for room %s; forcing finalization", room.id)
                result = BattleResult(REASON_PLAYER_LEFT)

            if result is not None:
                self.finalize(room, result)
            else:
                self.broadcast_snapshot(room)

    def finalize(self, room: Room, result: BattleResult) -> bool:
        """
        Cancel the room's timers, announce the result, disband the broadcast
        group and drop the room from the registry. Safe to call from several
        triggers; only the first call has an effect.
        """
        with room.lock:
            if room.phase == PHASE_FINISHED:
                return False

            for handle in (room.tick_handle, room.countdown_handle):
                if handle is not None:
                    handle.cancel()
            room.tick_handle = None
            room.countdown_handle = None

            room.phase = PHASE_FINISHED
            self.broadcaster.emit("battleEnd", result.to_payload(), room.id)
            self.broadcast_snapshot(room)
            self.broadcaster.close(room.id)
            self.registry.remove(room.id)

        logger.info("Room %s finished (%s, winner=%s)", room.id, result.reason, result.winner)
        return True
