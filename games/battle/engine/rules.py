# games/battle/engine/rules.py
from .models import Player
from ..content.balance import CAPS, DECAY, PRESSURE


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def base_pressure(player: Player) -> float:
    # constant while base stats are fixed at creation
    b = player.base
    return (b.power * PRESSURE["power_weight"] + b.stability * PRESSURE["stability_weight"]) / 100


def skill_pressure(player: Player) -> float:
    live = player.live
    return (live.combo * PRESSURE["combo_weight"] + live.reaction_score * PRESSURE["reaction_weight"]) / 100


def total_pressure(player: Player) -> float:
    return PRESSURE["base_share"] * base_pressure(player) + PRESSURE["skill_share"] * skill_pressure(player)


def apply_skill_decay(player: Player) -> None:
    live = player.live
    live.combo = clamp(live.combo - DECAY["combo_per_tick"], CAPS["combo_min"], CAPS["combo_max"])
    live.reaction_score = clamp(
        live.reaction_score - DECAY["reaction_per_tick"], CAPS["reaction_min"], CAPS["reaction_max"]
    )


def shift_dominance(dominance: float, p1_pressure: float, p2_pressure: float) -> float:
    delta = (p1_pressure - p2_pressure) * PRESSURE["dominance_step"]
    return clamp(dominance + delta, CAPS["dominance_min"], CAPS["dominance_max"])


def drain_energy(energy: float, opponent_pressure: float) -> float:
    return clamp(
        energy - max(0.0, opponent_pressure) * PRESSURE["energy_drain"],
        CAPS["energy_min"],
        CAPS["energy_max"],
    )
