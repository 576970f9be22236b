from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..game.models import WIN_MODES, RoomSettings


MAX_GRID_SIZE = 10
MAX_TOTAL_ROUNDS = 50


class InvalidPayload(ValueError):
    pass


def _text(payload: Any, key: str) -> str:
    if not isinstance(payload, dict):
        raise InvalidPayload("invalid_payload")
    value = payload.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, (str, int)):
        raise InvalidPayload(f"invalid_{key}")
    return str(value).strip()


def _room_code(raw: Any) -> str:
    if isinstance(raw, dict):
        raw = raw.get("roomId", "")
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidPayload("invalid_room")
    return raw.strip().upper()


def validate_name(name: str, max_length: int) -> str:
    n = (name or "").strip()
    if not n or len(n) > max_length:
        raise InvalidPayload("Invalid player name")
    if "<" in n or ">" in n:
        raise InvalidPayload("Invalid player name")
    for ch in n:
        if ord(ch) < 32:
            raise InvalidPayload("Invalid player name")
    return n


def _int(value: Any, default: int, lo: int, hi: int, what: str) -> int:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise InvalidPayload(f"invalid_{what}")
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise InvalidPayload(f"invalid_{what}") from None
    if n < lo or n > hi:
        raise InvalidPayload(f"invalid_{what}")
    return n


@dataclass(frozen=True)
class CreateRoom:
    host_name: str

    @classmethod
    def from_payload(cls, data: Any, max_name_length: int) -> "CreateRoom":
        return cls(host_name=validate_name(_text(data, "hostName"), max_name_length))


@dataclass(frozen=True)
class JoinRoom:
    room_id: str
    player_name: str

    @classmethod
    def from_payload(cls, data: Any, max_name_length: int) -> "JoinRoom":
        return cls(
            room_id=_room_code(data),
            player_name=validate_name(_text(data, "playerName"), max_name_length),
        )


@dataclass(frozen=True)
class UpdateRoomSettings:
    room_id: str
    settings: RoomSettings

    @classmethod
    def from_payload(cls, room_id: Any, data: Any) -> "UpdateRoomSettings":
        if not isinstance(data, dict):
            raise InvalidPayload("invalid_settings")

        win_mode = str(data.get("gameMode") or "any")
        if win_mode not in WIN_MODES:
            raise InvalidPayload("invalid_gameMode")

        entries = data.get("entries", "")
        if isinstance(entries, list):
            entries = ",".join(str(e) for e in entries)
        elif not isinstance(entries, str):
            raise InvalidPayload("invalid_entries")

        settings = RoomSettings(
            grid_size=_int(data.get("size"), 5, 1, MAX_GRID_SIZE, "size"),
            win_mode=win_mode,  # type: ignore[arg-type]
            card_title=str(data.get("cardTitle") or "My Bingo Card"),
            subtitle=str(data.get("subtitle") or ""),
            title_font=str(data.get("titleFont") or "Inter"),
            body_font=str(data.get("bodyFont") or "Inter"),
            all_caps=bool(data.get("allCaps", False)),
            entries=entries,
            total_rounds=_int(data.get("totalRounds"), 1, 1, MAX_TOTAL_ROUNDS, "totalRounds"),
            caller_enabled=bool(data.get("callerEnabled", False)),
        )
        return cls(room_id=_room_code(room_id), settings=settings)


@dataclass(frozen=True)
class RoomCommand:
    """start_game, next_round, next_call, reset_calls and leave_room."""

    room_id: str

    @classmethod
    def from_payload(cls, data: Any) -> "RoomCommand":
        return cls(room_id=_room_code(data))


@dataclass(frozen=True)
class DeclareWin:
    room_id: str
    player_name: str
    win_type: str

    @classmethod
    def from_payload(cls, data: Any) -> "DeclareWin":
        win_type = _text(data, "winType")
        if win_type not in WIN_MODES:
            raise InvalidPayload("invalid_winType")
        return cls(room_id=_room_code(data), player_name=_text(data, "playerName"), win_type=win_type)


@dataclass(frozen=True)
class CellMarked:
    room_id: str
    entry_text: str

    @classmethod
    def from_payload(cls, data: Any) -> "CellMarked":
        entry = _text(data, "entryText")
        if not entry:
            raise InvalidPayload("invalid_entryText")
        return cls(room_id=_room_code(data), entry_text=entry)


@dataclass(frozen=True)
class SendMessage:
    room_id: str
    player_name: str
    message: str

    @classmethod
    def from_payload(cls, data: Any, max_length: int) -> "SendMessage":
        message = _text(data, "message")
        if not message:
            raise InvalidPayload("empty_message")
        return cls(
            room_id=_room_code(data),
            player_name=_text(data, "playerName"),
            message=message[:max_length],
        )
