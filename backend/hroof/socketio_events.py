from flask_socketio import join_room, leave_room, emit
from flask import request
from hroof import socketio
from typing import Dict

NAMESPACE = '/ws'

_sid_to_room: Dict[str, str] = {}


def room_channel(room_id: str) -> str:
    return f"game:{room_id}"


def notify_room(room_id: str, topic: str) -> None:
    """Tell every socket in the room that one of its records changed.

    Clients answer by refreshing that record; the payload carries no state.
    """
    socketio.emit('state_update', {'game_code': room_id, 'topic': topic},
                  to=room_channel(room_id), namespace=NAMESPACE)


def end_room(room_id: str) -> None:
    socketio.emit('session_ended', {'game_code': room_id}, to=room_channel(room_id), namespace=NAMESPACE)


def handle_connect():
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def handle_disconnect(*args):
    # Leaving needs no teardown: the room lives until the host deletes it
    _sid_to_room.pop(_get_sid(), None)


def handle_join_game(data):
    game_code = str((data or {}).get('game_code') or '').strip()
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    room = room_channel(game_code)
    join_room(room)
    _sid_to_room[_get_sid()] = game_code
    emit('joined', {'room': room})


def handle_leave_game(data):
    game_code = str((data or {}).get('game_code') or '').strip()
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    room = room_channel(game_code)
    leave_room(room)
    _sid_to_room.pop(_get_sid(), None)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def _get_sid() -> str:
    return request.sid  # type: ignore


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = (
        ('connect', handle_connect),
        ('disconnect', handle_disconnect),
        ('join_game', handle_join_game),
        ('leave_game', handle_leave_game),
        ('ping', handle_ping),
    )
    for event, handler in handlers:
        socketio.on_event(event, handler, namespace=NAMESPACE)

    if testing:
        for event, handler in handlers:
            socketio.on_event(event, handler, namespace='/')
