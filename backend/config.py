import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Listening port for run.py
    PORT = int(os.environ.get('PORT', '10000'))
    # Comma-separated list of allowed origins ("*" allows any)
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    # Turn timer (seconds)
    TURN_DURATION_SEC = int(os.environ.get('TURN_DURATION_SEC', '30'))
    TIMER_TICK_SEC = float(os.environ.get('TIMER_TICK_SEC', '1.0'))
    MAX_TURNS = int(os.environ.get('MAX_TURNS', '10'))
    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '50'))
    # Scoring rules
    CONNECTION_THRESHOLD = int(os.environ.get('CONNECTION_THRESHOLD', '57'))
    CONNECTION_POINTS = int(os.environ.get('CONNECTION_POINTS', '2'))
    WINNER_BONUS = int(os.environ.get('WINNER_BONUS', '5'))
    # Display name that claims the host slot (case-insensitive)
    HOST_NAME = os.environ.get('HOST_NAME', 'LIDER')
    # Scoring oracle
    OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY')
    OPENAI_MODEL = os.environ.get('OPENAI_MODEL', 'gpt-3.5-turbo')
    ORACLE_TIMEOUT_SEC = float(os.environ.get('ORACLE_TIMEOUT_SEC', '20'))
