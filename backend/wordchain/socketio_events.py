from flask import current_app, request
from flask_socketio import ConnectionRefusedError

NAMESPACE = '/ws'


class SocketIOBroadcaster:
    """Sends session events to every client connected to the namespace.

    Safe to call from background tasks: uses ``socketio.emit`` rather than
    the request-bound ``flask_socketio.emit``.
    """

    def __init__(self, socketio, namespace: str = NAMESPACE):
        self.socketio = socketio
        self.namespace = namespace

    def emit(self, event: str, payload) -> None:
        self.socketio.emit(event, payload, namespace=self.namespace)


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _get_session():
    from wordchain import SESSION_EXTENSION
    return current_app.extensions[SESSION_EXTENSION]


def handle_connect(auth=None):
    name = auth.get('name') if isinstance(auth, dict) else None
    if not isinstance(name, str) or not name.strip():
        raise ConnectionRefusedError('a display name is required')
    session = _get_session()
    if not session.can_join():
        raise ConnectionRefusedError('game in progress or lobby is full')
    if not session.join(_get_sid(), name):
        raise ConnectionRefusedError('could not join the lobby')


def handle_disconnect(reason=None):
    _get_session().leave(_get_sid())


def handle_start_game(data=None):
    _get_session().start_game(_get_sid())


def handle_submit_guess(data=None):
    _get_session().submit_guess(_get_sid(), data)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    from wordchain import socketio

    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('start_game', handle_start_game, namespace=NAMESPACE)
    socketio.on_event('submit_guess', handle_submit_guess, namespace=NAMESPACE)
