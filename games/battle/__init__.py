# games/battle/__init__.py
__version__ = "1.0.0"

from .engine.loop import BattleLoop
from .engine.scheduler import SocketIOScheduler
from .routes import battle_bp
from .sockets import RoomBroadcaster, register_battle_socket_handlers
from .state import RoomRegistry


def init_battle(app, socketio, config, scheduler=None):
    registry = RoomRegistry()
    scheduler = scheduler or SocketIOScheduler(socketio)
    loop = BattleLoop(registry, scheduler, RoomBroadcaster(socketio))

    app.extensions["battle"] = {"registry": registry, "loop": loop, "scheduler": scheduler}
    app.register_blueprint(battle_bp)
    register_battle_socket_handlers(socketio, registry, loop, config, scheduler)
    return registry, loop
