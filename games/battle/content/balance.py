# games/battle/content/balance.py
TIMING = {
    "tick_ms": 50,
    "countdown_ms": 3000,
    "min_action_interval_ms": 75,
}

DEFAULTS = {
    "power": 100,
    "stability": 100,
    "energy": 100.0,
    "combo": 1.0,
    "reaction_score": 0.0,
}

CAPS = {
    "combo_min": 0.5,
    "combo_max": 3.0,
    "reaction_min": 0.0,
    "reaction_max": 100.0,
    "energy_min": 0.0,
    "energy_max": 100.0,
    "dominance_min": -100.0,
    "dominance_max": 100.0,
}

DECAY = {
    "combo_per_tick": 0.01,
    "reaction_per_tick": 0.2,
}

PRESSURE = {
    "power_weight": 0.6,
    "stability_weight": 0.4,
    "combo_weight": 20,
    "reaction_weight": 0.3,
    "base_share": 0.5,
    "skill_share": 0.5,
    "dominance_step": 3,
    "energy_drain": 0.8,
}
