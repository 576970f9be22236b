from __future__ import annotations

import logging
from typing import Any, Callable

from flask_socketio import SocketIO


logger = logging.getLogger(__name__)


class TimerHandle:
    __slots__ = ("delay", "cancelled")

    def __init__(self, delay: float):
        self.delay = delay
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class SocketIOScheduler:
    """Deferred callbacks run as Socket.IO background tasks.

    Works with whichever async mode the server was started in (eventlet
    greenlets or plain threads), since both ``sleep`` and
    ``start_background_task`` are delegated to the SocketIO instance.
    """

    def __init__(self, socketio: SocketIO):
        self._socketio = socketio

    def call_later(
        self, delay: float, fn: Callable[..., Any], *args: Any, handle: TimerHandle | None = None
    ) -> TimerHandle:
        """Run ``fn(*args)`` after ``delay`` seconds unless the handle is cancelled first.

        Callers that need the handle before the task can possibly run pass
        their own; otherwise a fresh one is created.
        """
        if handle is None:
            handle = TimerHandle(delay)

        def _runner() -> None:
            self._socketio.sleep(delay)
            if handle.cancelled:
                logger.debug("timer cancelled before firing (delay=%ss)", delay)
                return
            fn(*args)

        self._socketio.start_background_task(_runner)
        return handle
