# games/battle/content/skills.py
SKILLS = {
    "attack": {
        "name": "Attack",
        "combo": 0.08,
        "reaction": 1,
    },
    "defend": {
        "name": "Defend",
        "combo": -0.03,
        "reaction": 3,
    },
    "burst": {
        "name": "Burst",
        "combo": 0.15,
        "reaction": -2,
    },
    "focus": {
        "name": "Focus",
        "combo": 0.0,
        "reaction": 4,
    },
}
