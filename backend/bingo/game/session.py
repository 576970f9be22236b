from __future__ import annotations

import logging
import random
import uuid
from typing import Any, Callable, Protocol

from . import caller, rounds
from .dealer import board_cells
from .models import Player, Room, RoomSettings
from .registry import RoomRegistry, now_ms
from .scheduler import TimerHandle


logger = logging.getLogger(__name__)


class Emitter(Protocol):
    def emit(self, event: str, *args: Any, **kwargs: Any) -> Any: ...


class Scheduler(Protocol):
    def call_later(
        self, delay: float, fn: Callable[..., Any], *args: Any, handle: TimerHandle | None = None
    ) -> Any: ...


class BingoSession:
    def __init__(
        self,
        registry: RoomRegistry,
        emitter: Emitter,
        scheduler: Scheduler,
        history=None,
        caller_delay_sec: float = 1.0,
        round_delay_sec: float = 4.0,
        rng: random.Random | None = None,
    ):
        self.registry = registry
        self.emitter = emitter
        self.scheduler = scheduler
        self.history = history
        self.caller_delay_sec = caller_delay_sec
        self.round_delay_sec = round_delay_sec
        self._rng = rng

    # -- helpers -----------------------------------------------------------

    def _emit(self, event: str, payload: Any, to: str, skip_sid: str | None = None) -> None:
        if skip_sid is None:
            self.emitter.emit(event, payload, to=to)
        else:
            self.emitter.emit(event, payload, to=to, skip_sid=skip_sid)

    def _schedule(self, room: Room, delay: float, action: Callable[[Room], None]) -> None:
        self._cancel_pending(room)
        # Installed before scheduling so an immediate fire still matches.
        handle = TimerHandle(delay)
        room.pending_advance = handle
        self.scheduler.call_later(delay, self._fire, room.code, handle, action, handle=handle)

    def _cancel_pending(self, room: Room) -> None:
        if room.pending_advance is not None:
            room.pending_advance.cancel()
            room.pending_advance = None

    def _fire(self, code: str, handle: Any, action: Callable[[Room], None]) -> None:
        with self.registry.lock:
            room = self.registry.get(code)
            if room is None or room.pending_advance is not handle:
                logger.debug("stale timer for room %s ignored", code)
                return
            room.pending_advance = None
            action(room)

    def _room_for(self, code: str, player_id: str) -> Room | None:
        room = self.registry.get(code)
        if room is None or player_id not in room.players:
            return None
        return room

    def _host_room(self, code: str, player_id: str) -> Room | None:
        room = self.registry.get(code)
        if room is None or room.host_id != player_id:
            return None
        return room

    def snapshot(self, room: Room, viewer_id: str | None = None) -> dict:
        return {
            "roomId": room.code,
            "playerId": viewer_id,
            "hostId": room.host_id,
            "players": room.player_list(),
            "settings": room.settings.to_dict() if room.settings else None,
            "scores": dict(room.scores),
            "currentRound": room.current_round,
            "totalRounds": room.total_rounds,
            "gameStarted": room.game_started,
            "gameOver": room.game_over,
            "calledEntries": list(room.called_entries),
            "currentCall": room.current_call,
        }

    def public_state(self, room: Room) -> dict:
        with self.registry.lock:
            state = self.snapshot(room)
            state.pop("playerId")
            state["createdAtMs"] = room.created_at_ms
            state["remaining"] = caller.remaining(room)
            return state

    # -- membership --------------------------------------------------------

    def create_room(self, player_id: str, host_name: str) -> Room:
        with self.registry.lock:
            room = self.registry.create(player_id, host_name)
            logger.info("room %s created by %s (%s)", room.code, host_name, player_id)
            return room

    def join_room(self, code: str, player_id: str, player_name: str) -> dict | None:
        with self.registry.lock:
            room = self.registry.get(code)
            if room is None:
                return None

            room.players.setdefault(player_id, Player(id=player_id, name=player_name))
            room.players[player_id].name = player_name
            room.scores.setdefault(player_id, 0)

            self._emit("player_joined", {"id": player_id, "name": player_name}, to=room.code, skip_sid=player_id)
            logger.info("%s joined room %s", player_name, room.code)
            return self.snapshot(room, viewer_id=player_id)

    def leave_room(self, code: str, player_id: str) -> bool:
        with self.registry.lock:
            room = self._room_for(code, player_id)
            if room is None:
                return False
            self._remove_player(room, player_id)
            return True

    def disconnect(self, player_id: str) -> list[str]:
        with self.registry.lock:
            left = []
            for room in self.registry.rooms_for(player_id):
                self._remove_player(room, player_id)
                left.append(room.code)
            return left

    def _remove_player(self, room: Room, player_id: str) -> None:
        rounds.remove_player(room, player_id)

        if not room.players:
            self._cancel_pending(room)
            self.registry.remove(room.code)
            logger.info("room %s destroyed (empty)", room.code)
            return

        if player_id == room.host_id:
            # No host transfer: the room keeps running without a host.
            logger.info("host left room %s; host-only actions are now unavailable", room.code)

        self._emit("player_left", {"id": player_id, "scores": dict(room.scores)}, to=room.code)

        if (
            caller.caller_active(room)
            and room.pending_advance is None
            and caller.call_settled(room)
            and caller.remaining(room) > 0
        ):
            self._schedule(room, self.caller_delay_sec, self._auto_draw)

    # -- configuration and rounds -------------------------------------------

    def update_settings(self, code: str, player_id: str, settings: RoomSettings) -> bool:
        with self.registry.lock:
            room = self._host_room(code, player_id)
            if room is None:
                return False
            room.settings = settings
            self._emit("room_settings_update", settings.to_dict(), to=room.code, skip_sid=player_id)
            return True

    def start_game(self, code: str, player_id: str) -> bool:
        with self.registry.lock:
            room = self._host_room(code, player_id)
            if room is None:
                return False
            boards = rounds.start_game(room, self._rng)
            if boards is None:
                logger.debug("start_game in room %s refused (no settings, started or pool too small)", code)
                return False
            self._announce_round(room, boards, "game_started")
            return True

    def next_round(self, code: str, player_id: str) -> bool:
        with self.registry.lock:
            room = self._host_room(code, player_id)
            if room is None or not room.game_started or room.game_over:
                return False
            if rounds.is_final_round(room):
                return False
            return self._begin_next_round(room)

    def _begin_next_round(self, room: Room) -> bool:
        self._cancel_pending(room)
        boards = rounds.start_round(room, self._rng)
        if boards is None:
            logger.info("room %s cannot deal round %s: entry pool too small", room.code, room.current_round + 1)
            return False
        self._announce_round(room, boards, "new_round")
        return True

    def _announce_round(self, room: Room, boards: dict[str, list[str]], event: str) -> None:
        for pid, board in boards.items():
            self._emit("shuffled_card", board_cells(board), to=pid)
        self._emit(
            event,
            {
                "currentRound": room.current_round,
                "totalRounds": room.total_rounds,
                "scores": dict(room.scores),
            },
            to=room.code,
        )
        logger.info("room %s round %s/%s started", room.code, room.current_round, room.total_rounds)

    # -- scoring -------------------------------------------------------------

    def declare_win(self, code: str, player_id: str, win_type: str, player_name: str | None = None) -> bool:
        with self.registry.lock:
            room = self._room_for(code, player_id)
            if room is None or not room.game_started or room.game_over:
                return False
            if player_id in room.round_winners:
                logger.debug("repeat win from %s in room %s round %s ignored", player_id, code, room.current_round)
                return False

            rounds.record_win(room, player_id)
            name = room.players[player_id].name or player_name or ""
            self._emit(
                "player_scored",
                {
                    "playerId": player_id,
                    "playerName": name,
                    "winType": win_type,
                    "scores": dict(room.scores),
                    "currentRound": room.current_round,
                },
                to=room.code,
            )
            logger.info("room %s round %s won by %s (%s)", room.code, room.current_round, name, win_type)

            if self.history is not None:
                self.history.record(
                    room.code,
                    room.settings.card_title if room.settings else None,
                    room.player_names(),
                    name,
                    win_type,
                )

            self._schedule(room, self.round_delay_sec, self._advance_after_win)
            return True

    def _advance_after_win(self, room: Room) -> None:
        if rounds.is_final_round(room):
            rounds.finish_game(room)
            self._emit("game_over", {"scores": dict(room.scores)}, to=room.code)
            logger.info("room %s game over: %s", room.code, room.scores)
            return
        self._begin_next_round(room)

    # -- caller --------------------------------------------------------------

    def next_call(self, code: str, player_id: str) -> str | None:
        with self.registry.lock:
            room = self._host_room(code, player_id)
            if room is None or not caller.caller_active(room):
                return None
            return self._draw(room)

    def _auto_draw(self, room: Room) -> None:
        if caller.caller_active(room):
            self._draw(room)

    def _draw(self, room: Room) -> str | None:
        entry = caller.draw(room)
        if entry is None:
            return None
        self._cancel_pending(room)
        self._emit(
            "entry_called",
            {
                "entry": entry,
                "calledEntries": list(room.called_entries),
                "remaining": caller.remaining(room),
            },
            to=room.code,
        )
        logger.info("room %s called %r (%s left)", room.code, entry, caller.remaining(room))

        if not caller.holders(room, entry) and caller.remaining(room) > 0:
            self._schedule(room, self.caller_delay_sec, self._auto_draw)
        return entry

    def cell_marked(self, code: str, player_id: str, entry: str) -> bool:
        with self.registry.lock:
            room = self._room_for(code, player_id)
            if room is None or not caller.caller_active(room):
                return False
            if not caller.acknowledge(room, player_id, entry):
                logger.debug("stale mark %r from %s in room %s dropped", entry, player_id, code)
                return False
            if room.pending_advance is None and caller.call_settled(room) and caller.remaining(room) > 0:
                self._schedule(room, self.caller_delay_sec, self._auto_draw)
            return True

    def reset_calls(self, code: str, player_id: str) -> bool:
        with self.registry.lock:
            room = self._host_room(code, player_id)
            if room is None or not caller.caller_active(room):
                return False
            self._cancel_pending(room)
            caller.reset(room, self._rng)
            self._emit("calls_reset", {"roomId": room.code}, to=room.code)
            return True

    # -- chat ----------------------------------------------------------------

    def send_message(self, code: str, player_id: str, player_name: str, message: str) -> dict | None:
        with self.registry.lock:
            room = self._room_for(code, player_id)
            if room is None:
                return None
            msg = {
                "id": uuid.uuid4().hex,
                "senderId": player_id,
                "senderName": player_name or room.players[player_id].name,
                "message": message,
                "timestamp": now_ms(),
            }
            self._emit("chat_message", msg, to=room.code)
            return msg
