from __future__ import annotations

import logging
import sys
from pathlib import Path

from flask import Flask, send_from_directory
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.registry import RoomRegistry
from .game.scheduler import SocketIOScheduler
from .game.session import BingoSession
from .history import HistoryRecorder
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp
from .realtime.handlers import register_socketio_handlers


def _async_mode(configured: str) -> str:
    if configured:
        return configured
    # Windows and Python >= 3.13: threading (eventlet is not reliable there)
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


def create_app(config_class=Config, scheduler=None) -> tuple[Flask, SocketIO]:
    dist_dir = Path(__file__).resolve().parents[2] / "frontend" / "dist"

    static_folder = str(dist_dir) if dist_dir.exists() else None
    static_url_path = "/" if dist_dir.exists() else None

    app = Flask(
        __name__,
        static_folder=static_folder,
        static_url_path=static_url_path,
    )
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, app.config.get("LOG_LEVEL", "INFO"), logging.INFO))

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=_async_mode(app.config.get("SOCKETIO_ASYNC_MODE", "")),
    )

    history = HistoryRecorder(
        base_url=app.config.get("HISTORY_API_URL", ""),
        token=app.config.get("HISTORY_API_TOKEN", ""),
        timeout_sec=app.config.get("HISTORY_API_TIMEOUT_SEC", 5),
        spawn=socketio.start_background_task,
    )
    session = BingoSession(
        registry=RoomRegistry(code_length=app.config.get("ROOM_CODE_LENGTH", 4)),
        emitter=socketio,
        scheduler=scheduler or SocketIOScheduler(socketio),
        history=history,
        caller_delay_sec=app.config.get("CALLER_ADVANCE_DELAY_SEC", 1.0),
        round_delay_sec=app.config.get("ROUND_ADVANCE_DELAY_SEC", 4.0),
    )
    app.extensions["bingo"] = session

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")

    register_socketio_handlers(socketio, session)

    if dist_dir.exists():
        @app.get("/")
        def index():
            return send_from_directory(dist_dir, "index.html")

        @app.get("/<path:path>")
        def static_proxy(path: str):
            file_path = dist_dir / path
            if file_path.exists() and file_path.is_file():
                return send_from_directory(dist_dir, path)
            return send_from_directory(dist_dir, "index.html")

    app.logger.info("bingo server ready (async_mode=%s)", socketio.async_mode)
    return app, socketio
