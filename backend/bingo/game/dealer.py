from __future__ import annotations

import random

from .models import Room
from .shuffle import shuffle


def parse_entries(text: str) -> list[str]:
    """Split a comma-separated entry pool into trimmed, non-empty entries."""
    return [e.strip() for e in (text or "").split(",") if e.strip()]


def distinct_entries(text: str) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for entry in parse_entries(text):
        if entry not in seen:
            seen.add(entry)
            out.append(entry)
    return out


def required_cells(grid_size: int) -> int:
    return grid_size * grid_size


def can_deal(room: Room) -> bool:
    if room.settings is None:
        return False
    return len(parse_entries(room.settings.entries)) >= required_cells(room.settings.grid_size)


def deal_cards(room: Room, rng: random.Random | None = None) -> dict[str, list[str]] | None:
    """Deal every player an independently shuffled board.

    Returns the new ``dealt_cards`` mapping, or None when the pool is too
    small for the grid, in which case the room is left untouched.
    """
    if not can_deal(room):
        return None

    entries = parse_entries(room.settings.entries)
    cells = required_cells(room.settings.grid_size)
    room.dealt_cards = {pid: shuffle(entries, rng)[:cells] for pid in room.players}
    return room.dealt_cards


def board_cells(board: list[str]) -> list[dict]:
    return [{"id": idx, "text": text, "image": None} for idx, text in enumerate(board)]
