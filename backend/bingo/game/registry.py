from __future__ import annotations

import random
import string
import time
from threading import RLock

from .models import Player, Room


CODE_ALPHABET = string.ascii_uppercase + string.digits


def now_ms() -> int:
    return int(time.time() * 1000)


class RoomRegistry:
    """Process-wide mapping from room code to live :class:`Room`.

    Every mutation of a room goes through ``registry.lock`` so handlers and
    timer callbacks never interleave on the same state.
    """

    def __init__(self, code_length: int = 4, rng: random.Random | None = None):
        self.lock = RLock()
        self.code_length = code_length
        self._rng = rng or random.SystemRandom()
        self._rooms: dict[str, Room] = {}

    def _new_code(self) -> str:
        code = "".join(self._rng.choice(CODE_ALPHABET) for _ in range(self.code_length))
        while code in self._rooms:
            code = "".join(self._rng.choice(CODE_ALPHABET) for _ in range(self.code_length))
        return code

    def create(self, host_id: str, host_name: str) -> Room:
        with self.lock:
            room = Room(code=self._new_code(), host_id=host_id, created_at_ms=now_ms())
            room.players[host_id] = Player(id=host_id, name=host_name)
            room.scores[host_id] = 0
            self._rooms[room.code] = room
            return room

    def get(self, code: str) -> Room | None:
        with self.lock:
            return self._rooms.get((code or "").strip().upper())

    def remove(self, code: str) -> bool:
        with self.lock:
            if code in self._rooms:
                del self._rooms[code]
                return True
            return False

    def list(self) -> list[Room]:
        with self.lock:
            return list(self._rooms.values())

    def rooms_for(self, player_id: str) -> list[Room]:
        with self.lock:
            return [r for r in self._rooms.values() if player_id in r.players]

    def __len__(self) -> int:
        with self.lock:
            return len(self._rooms)

    def __contains__(self, code: str) -> bool:
        with self.lock:
            return code in self._rooms
