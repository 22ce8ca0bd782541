# games/battle/routes.py
from flask import Blueprint, current_app, jsonify

from . import __version__
from .engine.snapshot import snapshot_for

battle_bp = Blueprint("battle", __name__, url_prefix="/battle")


@battle_bp.route("/status")
def battle_status():
    registry = current_app.extensions["battle"]["registry"]
    return jsonify({
        "message": "Battle Arena API",
        "version": __version__,
        "status": "running",
        "rooms": len(registry),
    })


@battle_bp.route("/rooms/<room_id>")
def battle_room(room_id):
    room = current_app.extensions["battle"]["registry"].get(room_id)
    if not room:
        return jsonify({"message": "Room not found"}), 404
    with room.lock:
        return jsonify(snapshot_for(room))
