import logging

import requests

from bingo import history as history_module
from bingo.history import HistoryRecorder


class _Resp:
    def __init__(self, status=201):
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")


def test_disabled_without_url(monkeypatch):
    calls = []
    monkeypatch.setattr(history_module.requests, "post", lambda *a, **kw: calls.append(a))
    HistoryRecorder("").record("AB12", "Card", ["A"], "A", "row")
    assert calls == []


def test_posts_game_record_with_token(monkeypatch):
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append((url, json, headers, timeout))
        return _Resp()

    monkeypatch.setattr(history_module.requests, "post", fake_post)
    recorder = HistoryRecorder("http://persist.local/api/", token="tkn", timeout_sec=2)
    recorder.record("AB12", "Card", ["Ann", "Bob"], "Bob", "column")

    [(url, body, headers, timeout)] = calls
    assert url == "http://persist.local/api/games"
    assert body == {
        "roomCode": "AB12",
        "cardTitle": "Card",
        "players": ["Ann", "Bob"],
        "winnerName": "Bob",
        "winType": "column",
    }
    assert headers == {"Authorization": "Bearer tkn"}
    assert timeout == 2


def test_uses_spawn_when_given(monkeypatch):
    spawned = []
    monkeypatch.setattr(history_module.requests, "post", lambda *a, **kw: _Resp())
    recorder = HistoryRecorder("http://persist.local", spawn=lambda fn, *args: spawned.append((fn, args)))
    recorder.record("AB12", None, [], "Bob", "any")
    assert len(spawned) == 1


def test_failures_are_logged_not_raised(monkeypatch, caplog):
    def boom(*a, **kw):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(history_module.requests, "post", boom)
    recorder = HistoryRecorder("http://persist.local")
    with caplog.at_level(logging.WARNING, logger="bingo.history"):
        assert recorder._post({"roomCode": "AB12"}) is False
    assert "AB12" in caplog.text

    monkeypatch.setattr(history_module.requests, "post", lambda *a, **kw: _Resp(500))
    assert recorder._post({"roomCode": "AB12"}) is False
