from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<code>")
def get_room(code: str):
    session = current_app.extensions["bingo"]
    room = session.registry.get(code)
    if not room:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(session.public_state(room))
