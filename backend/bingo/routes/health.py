from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    session = current_app.extensions["bingo"]
    return jsonify({"ok": True, "rooms": len(session.registry)})
