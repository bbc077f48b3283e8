from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

SESSION_EXTENSION = 'word_chain'


def _allowed_origins(config):
    raw = config.get('CORS_ORIGINS') or '*'
    if raw.strip() == '*':
        return '*'
    return [o.strip() for o in raw.split(',') if o.strip()]


def _timer_task_starter(flask_app):
    # Mirrors the stage scheduler: no background countdowns in TESTING unless asked for
    if flask_app.config.get('TESTING') and not flask_app.config.get('ENABLE_TIMER_IN_TESTS'):
        def _skip(fn, *args):
            flask_app.logger.info("[timer-skip] background timers disabled in tests")
        return _skip
    return socketio.start_background_task


def create_app(config_class=Config, oracle=None, rng=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _allowed_origins(flask_app.config)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from wordchain.main import main
    flask_app.register_blueprint(main)

    from wordchain.api.session import session_api
    flask_app.register_blueprint(session_api, url_prefix='/api/session')

    from wordchain.services.game import GameSession, OpenAIScoringOracle, TurnTimer
    from wordchain.socketio_events import NAMESPACE, SocketIOBroadcaster, register_socketio_handlers

    if oracle is None:
        oracle = OpenAIScoringOracle(
            api_key=flask_app.config.get('OPENAI_API_KEY'),
            model=flask_app.config.get('OPENAI_MODEL', 'gpt-3.5-turbo'),
            timeout=float(flask_app.config.get('ORACLE_TIMEOUT_SEC', 20)),
        )
    timer = TurnTimer(
        start_task=_timer_task_starter(flask_app),
        sleep=socketio.sleep,
        tick_interval=float(flask_app.config.get('TIMER_TICK_SEC', 1.0)),
    )
    flask_app.extensions[SESSION_EXTENSION] = GameSession.from_config(
        flask_app.config,
        broadcaster=SocketIOBroadcaster(socketio, namespace=NAMESPACE),
        oracle=oracle,
        timer=timer,
        rng=rng,
        logger=flask_app.logger,
    )

    register_socketio_handlers()

    return flask_app
