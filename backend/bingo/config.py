import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # "" picks eventlet, or threading on Windows / Python >= 3.13
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Rooms
    ROOM_CODE_LENGTH = int(os.environ.get("ROOM_CODE_LENGTH", "4"))
    MAX_NAME_LENGTH = int(os.environ.get("MAX_NAME_LENGTH", "24"))
    MAX_CHAT_LENGTH = int(os.environ.get("MAX_CHAT_LENGTH", "500"))

    # Auto-advance timers (seconds)
    CALLER_ADVANCE_DELAY_SEC = float(os.environ.get("CALLER_ADVANCE_DELAY_SEC", "1.0"))
    ROUND_ADVANCE_DELAY_SEC = float(os.environ.get("ROUND_ADVANCE_DELAY_SEC", "4.0"))

    # Game-history collaborator (disabled when the URL is empty)
    HISTORY_API_URL = os.environ.get("HISTORY_API_URL", "")
    HISTORY_API_TOKEN = os.environ.get("HISTORY_API_TOKEN", "")
    HISTORY_API_TIMEOUT_SEC = float(os.environ.get("HISTORY_API_TIMEOUT_SEC", "5"))
