from flask import Blueprint, jsonify, current_app
from wordchain import SESSION_EXTENSION


session_api = Blueprint('session_api', __name__)


@session_api.route('/state', methods=['GET'])
def get_session_state():
    """Read-only snapshot of the shared session, as broadcast in `game_state`."""
    session = current_app.extensions[SESSION_EXTENSION]
    payload = session.snapshot()
    # Include durations so clients can show countdowns before the first tick
    cfg = current_app.config
    payload['durations'] = {
        'turn': int(cfg.get('TURN_DURATION_SEC', 30)),
        'tick': float(cfg.get('TIMER_TICK_SEC', 1.0)),
    }
    payload['capacity'] = int(cfg.get('MAX_PLAYERS', 50))
    return jsonify(payload)
