from __future__ import annotations

import logging
from typing import Any, Callable

import requests


logger = logging.getLogger(__name__)


class HistoryRecorder:
    """Appends finished-round outcomes to the persistence service.

    The call is fire-and-forget: ``spawn`` runs the POST off the handler
    (normally ``socketio.start_background_task``), and failures are only
    logged so scoring never depends on the collaborator being up.
    """

    def __init__(
        self,
        base_url: str = "",
        token: str = "",
        timeout_sec: float = 5,
        spawn: Callable[..., Any] | None = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.token = token
        self.timeout_sec = timeout_sec
        self._spawn = spawn

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    def record(
        self,
        room_code: str,
        card_title: str | None,
        players: list[str],
        winner_name: str,
        win_type: str,
    ) -> None:
        if not self.enabled:
            return

        payload = {
            "roomCode": room_code,
            "cardTitle": card_title,
            "players": list(players),
            "winnerName": winner_name,
            "winType": win_type,
        }
        if self._spawn is not None:
            self._spawn(self._post, payload)
        else:
            self._post(payload)

    def _post(self, payload: dict) -> bool:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            resp = requests.post(
                f"{self.base_url}/games",
                json=payload,
                headers=headers,
                timeout=self.timeout_sec,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("game history append failed for room %s: %s", payload.get("roomCode"), exc)
            return False
        return True
