from __future__ import annotations

import random

from . import caller
from .dealer import can_deal, deal_cards
from .models import Room


def start_round(room: Room, rng: random.Random | None = None) -> dict[str, list[str]] | None:
    if not can_deal(room):
        return None

    for pid in room.players:
        room.scores.setdefault(pid, 0)

    room.game_started = True
    room.round_closing = False
    room.round_winners = set()
    room.current_round += 1
    caller.rebuild_call_order(room, rng)
    return deal_cards(room, rng)


def start_game(room: Room, rng: random.Random | None = None) -> dict[str, list[str]] | None:
    if room.settings is None or room.game_started:
        return None
    if not can_deal(room):
        return None
    room.current_round = 0
    return start_round(room, rng)


def record_win(room: Room, player_id: str) -> int:
    room.round_winners.add(player_id)
    room.scores[player_id] = room.scores.get(player_id, 0) + 1
    room.round_closing = True
    return room.scores[player_id]


def is_final_round(room: Room) -> bool:
    return room.current_round >= room.total_rounds


def finish_game(room: Room) -> None:
    room.game_over = True
    room.round_closing = False
    room.marked_for_current_call = set()


def remove_player(room: Room, player_id: str) -> None:
    room.players.pop(player_id, None)
    room.scores.pop(player_id, None)
    room.dealt_cards.pop(player_id, None)
    room.round_winners.discard(player_id)
    room.marked_for_current_call.discard(player_id)
