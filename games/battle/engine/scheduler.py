# games/battle/engine/scheduler.py
import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)


class TaskHandle:
    """Ownership handle for a scheduled callback. cancel() may be called any number of times."""

    def __init__(self, name: str = ""):
        self.name = name
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class SocketIOScheduler:
    """
    Timers as Socket.IO background tasks, so they interleave with event
    handlers under whichever async mode the server runs (threading, eventlet, gevent).
    """

    def __init__(self, socketio):
        self.socketio = socketio

    def monotonic(self) -> float:
        return time.monotonic()

    def call_later(self, delay: float, callback: Callable[[], None], name: str = "") -> TaskHandle:
        handle = TaskHandle(name)

        def runner():
            self.socketio.sleep(delay)
            if not handle.cancelled:
                callback()

        self.socketio.start_background_task(runner)
        return handle

    def call_every(self, period: float, callback: Callable[[], None], name: str = "") -> TaskHandle:
        handle = TaskHandle(name)

        def runner():
            next_at = self.monotonic() + period
            while not handle.cancelled:
                self.socketio.sleep(max(0.0, next_at - self.monotonic()))
                if handle.cancelled:
                    break
                callback()
                next_at += period
            logger.debug("Recurring task %s stopped", name or id(handle))

        self.socketio.start_background_task(runner)
        return handle
