from __future__ import annotations

import logging

from flask import current_app, request
from flask_socketio import SocketIO, join_room, leave_room

from ..game.session import BingoSession
from . import events
from .events import InvalidPayload


logger = logging.getLogger(__name__)


def register_socketio_handlers(socketio: SocketIO, session: BingoSession) -> None:
    def _drop(event: str, exc: InvalidPayload) -> None:
        logger.debug("dropped %s from %s: %s", event, request.sid, exc)

    @socketio.on("connect")
    def on_connect(auth=None):
        logger.debug("client connected: %s", request.sid)

    @socketio.on("create_room")
    def create_room(data=None):
        try:
            msg = events.CreateRoom.from_payload(data, current_app.config["MAX_NAME_LENGTH"])
        except InvalidPayload as exc:
            _drop("create_room", exc)
            return {"error": str(exc)}

        room = session.create_room(request.sid, msg.host_name)
        join_room(room.code)
        return {"roomId": room.code, "playerId": request.sid}

    @socketio.on("join_room")
    def on_join_room(data=None):
        try:
            msg = events.JoinRoom.from_payload(data, current_app.config["MAX_NAME_LENGTH"])
        except InvalidPayload as exc:
            _drop("join_room", exc)
            return {"error": str(exc)}

        snapshot = session.join_room(msg.room_id, request.sid, msg.player_name)
        if snapshot is None:
            return {"error": "Room not found"}

        join_room(msg.room_id)
        return snapshot

    @socketio.on("leave_room")
    def on_leave_room(data=None):
        try:
            msg = events.RoomCommand.from_payload(data)
        except InvalidPayload as exc:
            _drop("leave_room", exc)
            return

        if session.leave_room(msg.room_id, request.sid):
            leave_room(msg.room_id)

    @socketio.on("update_room_settings")
    def update_room_settings(room_id=None, settings=None):
        try:
            msg = events.UpdateRoomSettings.from_payload(room_id, settings)
        except InvalidPayload as exc:
            _drop("update_room_settings", exc)
            return

        session.update_settings(msg.room_id, request.sid, msg.settings)

    @socketio.on("start_game")
    def start_game(data=None):
        try:
            msg = events.RoomCommand.from_payload(data)
        except InvalidPayload as exc:
            _drop("start_game", exc)
            return

        session.start_game(msg.room_id, request.sid)

    @socketio.on("next_round")
    def next_round(data=None):
        try:
            msg = events.RoomCommand.from_payload(data)
        except InvalidPayload as exc:
            _drop("next_round", exc)
            return

        session.next_round(msg.room_id, request.sid)

    @socketio.on("declare_win")
    def declare_win(data=None):
        try:
            msg = events.DeclareWin.from_payload(data)
        except InvalidPayload as exc:
            _drop("declare_win", exc)
            return

        session.declare_win(msg.room_id, request.sid, msg.win_type, player_name=msg.player_name)

    @socketio.on("next_call")
    def next_call(data=None):
        try:
            msg = events.RoomCommand.from_payload(data)
        except InvalidPayload as exc:
            _drop("next_call", exc)
            return

        session.next_call(msg.room_id, request.sid)

    @socketio.on("cell_marked")
    def cell_marked(data=None):
        try:
            msg = events.CellMarked.from_payload(data)
        except InvalidPayload as exc:
            _drop("cell_marked", exc)
            return

        session.cell_marked(msg.room_id, request.sid, msg.entry_text)

    @socketio.on("reset_calls")
    def reset_calls(data=None):
        try:
            msg = events.RoomCommand.from_payload(data)
        except InvalidPayload as exc:
            _drop("reset_calls", exc)
            return

        session.reset_calls(msg.room_id, request.sid)

    @socketio.on("send_message")
    def send_message(data=None):
        try:
            msg = events.SendMessage.from_payload(data, current_app.config["MAX_CHAT_LENGTH"])
        except InvalidPayload as exc:
            _drop("send_message", exc)
            return

        session.send_message(msg.room_id, request.sid, msg.player_name, msg.message)

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        left = session.disconnect(request.sid)
        if left:
            logger.info("%s disconnected, left rooms %s", request.sid, ", ".join(left))
