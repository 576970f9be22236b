from __future__ import annotations

import random

from .dealer import distinct_entries
from .models import Room
from .shuffle import shuffle


def caller_active(room: Room) -> bool:
    return (
        room.settings is not None
        and room.settings.caller_enabled
        and room.game_started
        and not room.game_over
        and not room.round_closing
    )


def rebuild_call_order(room: Room, rng: random.Random | None = None) -> None:
    entries = distinct_entries(room.settings.entries) if room.settings else []
    room.call_order = shuffle(entries, rng)
    room.called_entries = []
    room.marked_for_current_call = set()


def remaining(room: Room) -> int:
    return max(0, len(room.call_order) - len(room.called_entries))


def draw(room: Room) -> str | None:
    """Append the next entry of the round's call order, or None when exhausted."""
    if remaining(room) == 0:
        return None
    entry = room.call_order[len(room.called_entries)]
    room.called_entries.append(entry)
    room.marked_for_current_call = set()
    return entry


def holders(room: Room, entry: str | None) -> set[str]:
    if entry is None:
        return set()
    return {
        pid
        for pid, board in room.dealt_cards.items()
        if pid in room.players and entry in board
    }


def acknowledge(room: Room, player_id: str, entry: str) -> bool:
    """Record a mark for the current call. Returns False for stale marks."""
    current = room.current_call
    if current is None or entry != current:
        return False
    if player_id not in holders(room, current):
        return False
    room.marked_for_current_call.add(player_id)
    return True


def call_settled(room: Room) -> bool:
    """True when every connected holder of the current call has marked it."""
    if room.current_call is None:
        return False
    return holders(room, room.current_call) <= room.marked_for_current_call


def reset(room: Room, rng: random.Random | None = None) -> None:
    rebuild_call_order(room, rng)
