import random
from dataclasses import dataclass
from typing import Any

import pytest

from bingo.game.registry import RoomRegistry
from bingo.game.scheduler import TimerHandle
from bingo.game.session import BingoSession
from bingo.server import create_app


class TestConfig:
    TESTING = True
    SECRET_KEY = "test-secret"
    CORS_ORIGINS = "*"
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = "threading"
    LOG_LEVEL = "DEBUG"
    ROOM_CODE_LENGTH = 4
    MAX_NAME_LENGTH = 24
    MAX_CHAT_LENGTH = 500
    CALLER_ADVANCE_DELAY_SEC = 1.0
    ROUND_ADVANCE_DELAY_SEC = 4.0
    HISTORY_API_URL = ""
    HISTORY_API_TOKEN = ""
    HISTORY_API_TIMEOUT_SEC = 1


class ManualScheduler:
    """Collects deferred callbacks; tests fire them explicitly."""

    def __init__(self):
        self.queue: list[tuple[TimerHandle, Any, tuple]] = []

    def call_later(self, delay, fn, *args, handle=None):
        handle = handle or TimerHandle(delay)
        self.queue.append((handle, fn, args))
        return handle

    @property
    def pending(self) -> list[TimerHandle]:
        return [h for h, _, _ in self.queue if not h.cancelled]

    def run_next(self) -> bool:
        while self.queue:
            handle, fn, args = self.queue.pop(0)
            if not handle.cancelled:
                fn(*args)
                return True
        return False

    def run_all(self, limit: int = 1000) -> int:
        ran = 0
        while ran < limit and self.run_next():
            ran += 1
        return ran


@dataclass
class Sent:
    event: str
    payload: Any
    to: str | None
    skip_sid: str | None


class RecordingEmitter:
    def __init__(self):
        self.sent: list[Sent] = []

    def emit(self, event, payload, to=None, skip_sid=None):
        self.sent.append(Sent(event, payload, to, skip_sid))

    def named(self, event: str) -> list[Sent]:
        return [s for s in self.sent if s.event == event]

    def clear(self) -> None:
        self.sent.clear()


class FakeHistory:
    def __init__(self):
        self.records = []

    def record(self, room_code, card_title, players, winner_name, win_type):
        self.records.append(
            {
                "roomCode": room_code,
                "cardTitle": card_title,
                "players": players,
                "winnerName": winner_name,
                "winType": win_type,
            }
        )


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def emitter():
    return RecordingEmitter()


@pytest.fixture()
def history():
    return FakeHistory()


@pytest.fixture()
def session(emitter, scheduler, history):
    return BingoSession(
        registry=RoomRegistry(code_length=4, rng=random.Random(1)),
        emitter=emitter,
        scheduler=scheduler,
        history=history,
        caller_delay_sec=1.0,
        round_delay_sec=4.0,
        rng=random.Random(7),
    )


@pytest.fixture()
def app_and_socketio(scheduler):
    return create_app(TestConfig, scheduler=scheduler)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def socketio(app_and_socketio):
    return app_and_socketio[1]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_client(flask_app, socketio):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
