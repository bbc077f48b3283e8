"""Game domain services: roster, turn timer, scoring and the session controller.

This package contains the game mechanics. Socket handlers and HTTP routes
talk to ``GameSession`` only, keeping transport concerns separated from
core game rules.
"""

from .oracle import OpenAIScoringOracle, OracleResult
from .roster import Roster
from .session import GameSession
from .timer import TurnTimer

__all__ = ['GameSession', 'OpenAIScoringOracle', 'OracleResult', 'Roster', 'TurnTimer']
