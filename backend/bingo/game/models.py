from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal


WinMode = Literal["row", "column", "diagonal", "blackout", "any"]

WIN_MODES: tuple[str, ...] = ("row", "column", "diagonal", "blackout", "any")


@dataclass
class Player:
    id: str
    name: str


@dataclass
class RoomSettings:
    grid_size: int = 5
    win_mode: WinMode = "any"
    card_title: str = "My Bingo Card"
    subtitle: str = ""
    title_font: str = "Inter"
    body_font: str = "Inter"
    all_caps: bool = False
    entries: str = ""
    total_rounds: int = 1
    caller_enabled: bool = False

    def to_dict(self) -> dict[str, Any]:
        # Wire names follow the client's RoomSettings shape.
        return {
            "size": self.grid_size,
            "gameMode": self.win_mode,
            "cardTitle": self.card_title,
            "subtitle": self.subtitle,
            "titleFont": self.title_font,
            "bodyFont": self.body_font,
            "allCaps": self.all_caps,
            "entries": self.entries,
            "totalRounds": self.total_rounds,
            "callerEnabled": self.caller_enabled,
        }


@dataclass
class Room:
    code: str
    host_id: str
    created_at_ms: int = 0
    players: dict[str, Player] = field(default_factory=dict)
    settings: RoomSettings | None = None
    scores: dict[str, int] = field(default_factory=dict)
    current_round: int = 0
    game_started: bool = False
    game_over: bool = False
    # Set once a win is declared; cleared by the next round start.
    round_closing: bool = False
    call_order: list[str] = field(default_factory=list)
    called_entries: list[str] = field(default_factory=list)
    dealt_cards: dict[str, list[str]] = field(default_factory=dict)
    marked_for_current_call: set[str] = field(default_factory=set)
    round_winners: set[str] = field(default_factory=set)
    pending_advance: Any = None

    @property
    def total_rounds(self) -> int:
        return self.settings.total_rounds if self.settings else 1

    @property
    def current_call(self) -> str | None:
        return self.called_entries[-1] if self.called_entries else None

    def player_list(self) -> list[dict[str, str]]:
        return [{"id": p.id, "name": p.name} for p in self.players.values()]

    def player_names(self) -> list[str]:
        return [p.name for p in self.players.values()]
