"""Virtual-time scheduler, recording broadcaster and small factories shared by the tests."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import jwt

from games.battle.engine.loop import BattleLoop
from games.battle.engine.models import Identity
from games.battle.engine.scheduler import TaskHandle
from games.battle.state import RoomRegistry

SECRET = "test-secret-key-with-at-least-32-bytes"


def make_token(claims: Optional[Dict[str, Any]] = None, secret: str = SECRET) -> str:
    return jwt.encode(claims or {"id": "u1", "username": "alice"}, secret, algorithm="HS256")


class ManualScheduler:
    """Runs timers only when advance() moves the virtual clock past their deadline."""

    def __init__(self):
        self.now = 0.0
        self._tasks: List[list] = []   # [due, period or None, callback, handle]

    def monotonic(self) -> float:
        return self.now

    def call_later(self, delay, callback, name=""):
        handle = TaskHandle(name)
        self._tasks.append([self.now + delay, None, callback, handle])
        return handle

    def call_every(self, period, callback, name=""):
        handle = TaskHandle(name)
        self._tasks.append([self.now + period, period, callback, handle])
        return handle

    def pending(self) -> List[TaskHandle]:
        return [task[3] for task in self._tasks if not task[3].cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self._tasks if not t[3].cancelled and t[0] <= target + 1e-9]
            if not due:
                break
            task = min(due, key=lambda t: t[0])
            self.now = task[0]
            if task[1] is None:
                self._tasks.remove(task)
            else:
                task[0] += task[1]
            task[2]()
        self._tasks = [t for t in self._tasks if not t[3].cancelled]
        self.now = target

    def advance_ticks(self, count: int, tick: float = 0.05) -> None:
        for _ in range(count):
            self.advance(tick)


class RecordingBroadcaster:
    def __init__(self):
        self.events: List[Tuple[str, Any, str]] = []
        self.closed: List[str] = []

    def emit(self, event, payload, room_id):
        self.events.append((event, payload, room_id))

    def close(self, room_id):
        self.closed.append(room_id)

    def named(self, event: str) -> List[Any]:
        return [payload for name, payload, _ in self.events if name == event]


def make_battle(scheduler: Optional[ManualScheduler] = None):
    registry = RoomRegistry()
    scheduler = scheduler or ManualScheduler()
    broadcaster = RecordingBroadcaster()
    loop = BattleLoop(registry, scheduler, broadcaster)
    return registry, scheduler, broadcaster, loop


def make_lobby(registry: RoomRegistry, a: str = "alice", b: Optional[str] = "bob"):
    room = registry.create(f"sid-{a}", Identity(user_id=a, username=a.title()))
    if b:
        registry.join(room.id, f"sid-{b}", Identity(user_id=b, username=b.title()))
    return room


def make_active(registry, scheduler, loop, a: str = "alice", b: str = "bob"):
    room = make_lobby(registry, a, b)
    loop.start(room)
    scheduler.advance(3.0)
    return room
