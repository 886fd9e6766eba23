from flask_socketio import join_room, leave_room, emit
from memory_match import socketio


def _room_for(data):
    session_key = (data or {}).get('sessionKey')
    if not session_key or not isinstance(session_key, str):
        emit('error', {'error': 'sessionKey is required', 'code': 'invalid_input'})
        return None
    return f"game:{session_key}"


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_game(data):
    room = _room_for(data)
    if not room:
        return
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_game(data):
    room = _room_for(data)
    if not room:
        return
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'join_game': handle_join_game,
        'leave_game': handle_leave_game,
        'ping': handle_ping,
    }
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace=namespace)
