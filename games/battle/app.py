# games/battle/app.py
import logging

from flask import Flask, jsonify
from flask_socketio import SocketIO

from . import init_battle
from .config import BattleConfig

logger = logging.getLogger(__name__)


def create_app(config=None, scheduler=None):
    config = config or BattleConfig.from_env()

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.secret_key
    socketio = SocketIO(
        app,
        cors_allowed_origins=config.client_url,
        async_mode=config.async_mode,
    )

    if not config.jwt_secret:
        logger.warning("JWT_SECRET is not set; every socket connection will be refused")

    init_battle(app, socketio, config, scheduler=scheduler)

    @app.errorhandler(404)
    def not_found(_):
        return jsonify({"message": "Route not found"}), 404

    return app, socketio


def main():
    config = BattleConfig.from_env()
    logging.basicConfig(level=config.log_level)
    app, socketio = create_app(config)
    logger.info("Battle server listening on %s:%s", config.host, config.port)
    socketio.run(app, host=config.host, port=config.port, allow_unsafe_werkzeug=True)


if __name__ == "__main__":
    main()
