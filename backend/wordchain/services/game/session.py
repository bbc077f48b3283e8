"""Session controller: the lobby -> playing -> finished state machine.

``GameSession`` is the only writer of the session state and the roster.
Every mutation runs under one re-entrant lock, so whichever thread wins the
lock decides the outcome of a race (for example the last submission and the
timer expiring in the same instant). The one call made without the lock held
is the scoring oracle request inside round evaluation.

Outbound events go through ``broadcaster.emit(event, payload)``; payloads are
always fresh dict snapshots.
"""

import logging
import random
import threading
from typing import Optional

from wordchain.models import FINISHED, LOBBY, PLAYING, SEED_WORDS, ChainNode, SessionState
from .oracle import OracleResult
from .roster import Roster
from .scoring import (
    Submission,
    assign_points,
    choose_next_node,
    compose_summary,
    distinct_candidates,
    no_participation_message,
    points_by_player,
    rank_submissions,
)

MAX_GUESS_LENGTH = 64


def normalize_guess(word) -> Optional[str]:
    if isinstance(word, dict):
        word = word.get('word')
    if not isinstance(word, str):
        return None
    word = word.strip()
    if not word or len(word) > MAX_GUESS_LENGTH:
        return None
    return word


class GameSession:
    def __init__(self, broadcaster, oracle, timer, rng=None, logger=None,
                 max_turns: int = 10, turn_duration: int = 30, capacity: int = 50,
                 connection_threshold: int = 57, connection_points: int = 2,
                 winner_bonus: int = 5, host_name: str = 'LIDER'):
        self._broadcaster = broadcaster
        self._oracle = oracle
        self._timer = timer
        self._rng = rng or random.Random()
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()

        self.turn_duration = turn_duration
        self.connection_threshold = connection_threshold
        self.connection_points = connection_points
        self.winner_bonus = winner_bonus
        self.host_name = host_name

        self._roster = Roster(capacity=capacity)
        self.state = SessionState(max_turns=max_turns)

    @classmethod
    def from_config(cls, config, broadcaster, oracle, timer, rng=None, logger=None):
        return cls(
            broadcaster, oracle, timer, rng=rng, logger=logger,
            max_turns=int(config.get('MAX_TURNS', 10)),
            turn_duration=int(config.get('TURN_DURATION_SEC', 30)),
            capacity=int(config.get('MAX_PLAYERS', 50)),
            connection_threshold=int(config.get('CONNECTION_THRESHOLD', 57)),
            connection_points=int(config.get('CONNECTION_POINTS', 2)),
            winner_bonus=int(config.get('WINNER_BONUS', 5)),
            host_name=config.get('HOST_NAME', 'LIDER'),
        )

    # ---- read-only views ----

    @property
    def status(self) -> str:
        return self.state.status

    @property
    def player_count(self) -> int:
        with self._lock:
            return len(self._roster)

    def snapshot(self) -> dict:
        with self._lock:
            payload = self.state.to_dict()
            payload['players'] = self._roster.to_list()
            return payload

    def lobby_snapshot(self) -> dict:
        with self._lock:
            return {'players': self._roster.to_list(), 'host_id': self.state.host_id}

    def standings(self) -> dict:
        with self._lock:
            return {
                'players': [p.to_dict() for p in self._roster.standings()],
                'host_id': self.state.host_id,
            }

    def _emit(self, event: str, payload) -> None:
        self._broadcaster.emit(event, payload)

    # ---- roster ----

    def can_join(self) -> bool:
        with self._lock:
            return self.state.status == LOBBY and not self._roster.is_full

    def join(self, identity: str, name: str) -> bool:
        name = (name or '').strip() if isinstance(name, str) else ''
        with self._lock:
            if not name:
                self.logger.info(f"[join-reject] sid={identity} reason=no-name")
                return False
            if self.state.status != LOBBY:
                self.logger.info(f"[join-reject] sid={identity} reason=status:{self.state.status}")
                return False
            player = self._roster.join(identity, name)
            if player is None:
                self.logger.info(f"[join-reject] sid={identity} reason=full-or-duplicate size={len(self._roster)}")
                return False
            if self.state.host_id is None and name.upper() == self.host_name.upper():
                self.state.host_id = identity
            self.logger.info(f"[join] sid={identity} name={name!r} color={player.color} host={self.state.host_id == identity}")
            self._emit('lobby_state', self.lobby_snapshot())
            return True

    def leave(self, identity: str) -> bool:
        with self._lock:
            player = self._roster.leave(identity)
            if player is None:
                return False
            if self.state.host_id == identity:
                self.state.host_id = None
            self.logger.info(f"[leave] sid={identity} name={player.name!r} remaining={len(self._roster)}")
            self._emit('lobby_state', self.lobby_snapshot())
            if self.state.status == PLAYING:
                self._emit('game_state', self.snapshot())
            return True

    # ---- state machine ----

    def start_game(self, identity: str) -> bool:
        with self._lock:
            if self.state.status != LOBBY:
                self.logger.info(f"[start-reject] sid={identity} reason=status:{self.state.status}")
                return False
            if identity is None or identity != self.state.host_id:
                self.logger.info(f"[start-reject] sid={identity} reason=not-host host={self.state.host_id}")
                return False
            self._roster.reset_scores()
            seed = self._rng.choice(SEED_WORDS)
            self.state = SessionState(
                status=PLAYING,
                turn=1,
                max_turns=self.state.max_turns,
                is_round_active=True,
                chain=[ChainNode(word=seed)],
                host_id=self.state.host_id,
            )
            self.logger.info(f"[start] players={len(self._roster)} seed={seed!r} max_turns={self.state.max_turns}")
            self._emit('game_state', self.snapshot())
            self._start_turn_timer()
            return True

    def submit_guess(self, identity: str, word) -> bool:
        with self._lock:
            if not self.state.accepting_submissions:
                self.logger.debug(f"[submit-ignore] sid={identity} reason=not-accepting")
                return False
            word = normalize_guess(word)
            if word is None or not self._roster.record_submission(identity, word):
                self.logger.debug(f"[submit-ignore] sid={identity} reason=invalid-or-duplicate")
                return False
            turn = self.state.turn
            self._emit('game_state', self.snapshot())
            everyone_in = self._roster.all_submitted()
        if everyone_in:
            self.evaluate_round(turn=turn)
        return True

    def _start_turn_timer(self) -> None:
        self.state.time_left = self.turn_duration
        self._emit('timer', self.state.time_left)
        self._timer.start(self.turn_duration, self._on_timer_tick, self._on_timer_expired)
        self.logger.info(f"[timer-set] turn={self.state.turn} duration={self.turn_duration}s")

    def _on_timer_tick(self, generation: int, remaining: int) -> None:
        with self._lock:
            if not self._timer.is_current(generation):
                return
            self.state.time_left = remaining
            self._emit('timer', remaining)

    def _on_timer_expired(self, generation: int) -> None:
        self.logger.info(f"[timer-fire] turn={self.state.turn}")
        self._evaluate(timer_generation=generation)

    # ---- round evaluation ----

    def evaluate_round(self, turn: Optional[int] = None) -> bool:
        """Score the current turn and advance.

        Returns False without side effects when another evaluation already
        owns this turn, or when ``turn`` is given and the session has moved
        past it.
        """
        return self._evaluate(expected_turn=turn)

    def _evaluate(self, timer_generation: Optional[int] = None, expected_turn: Optional[int] = None) -> bool:
        with self._lock:
            if timer_generation is not None and not self._timer.is_current(timer_generation):
                self.logger.info(f"[evaluate-skip] turn={self.state.turn} reason=stale-timer")
                return False
            if expected_turn is not None and expected_turn != self.state.turn:
                self.logger.info(f"[evaluate-skip] turn={self.state.turn} reason=turn-moved expected={expected_turn}")
                return False
            if self.state.status != PLAYING or self.state.is_evaluating:
                self.logger.info(f"[evaluate-skip] turn={self.state.turn} status={self.state.status} evaluating={self.state.is_evaluating}")
                return False
            self.state.is_evaluating = True
            self.state.is_round_active = False
            self._timer.cancel()
            turn = self.state.turn
            target = self.state.target_word
            submissions = [Submission(p.id, p.name, p.last_guess) for p in self._roster.submissions()]
            self._emit('game_state', self.snapshot())
        self.logger.info(f"[evaluate] turn={turn} target={target!r} submissions={len(submissions)}")

        try:
            self._score_round(turn, target, submissions)
        except Exception as exc:
            self.logger.exception(f"[evaluate-error] turn={turn}: {exc}")
            self._emit('round_error', {'message': 'Something went wrong while scoring this turn. Skipping.'})
        finally:
            self._advance_turn()
        return True

    def _score_round(self, turn: int, target: str, submissions) -> None:
        if not submissions:
            self._emit('round_result', no_participation_message(turn))
            return

        candidates = distinct_candidates(submissions)
        try:
            result = self._oracle.score(target, candidates)
        except Exception as exc:
            result = OracleResult.failure(str(exc) or exc.__class__.__name__)
        if not result.ok:
            self.logger.warning(f"[oracle-error] turn={turn} error={result.error}")
            self._emit('round_error', {'message': f'Could not reach the scoring oracle: {result.error}'})

        ranked = rank_submissions(submissions, result.scores)
        winner = assign_points(ranked, self.connection_threshold, self.connection_points, self.winner_bonus)
        next_node = choose_next_node(submissions, self._rng)

        with self._lock:
            for player_id, points in points_by_player(ranked).items():
                self._roster.award(player_id, points)
            self.state.chain.append(next_node)
            summary = compose_summary(turn, ranked, next_node, error=result.error)
            self.logger.info(
                f"[round-scored] turn={turn} winner={winner.name!r} score={winner.score} next={next_node.word!r}"
            )
            self._emit('round_result', summary)

    def _advance_turn(self) -> None:
        with self._lock:
            if self.state.status != PLAYING:
                return
            if self.state.turn >= self.state.max_turns:
                self.state.status = FINISHED
                self.state.is_round_active = False
                self.state.is_evaluating = False
                self._timer.cancel()
                self.logger.info(f"[finish] finished at turn={self.state.turn} chain={len(self.state.chain)}")
                self._emit('game_over', self.standings())
                return
            prev_turn = self.state.turn
            self.state.turn += 1
            self.state.is_evaluating = False
            self.state.is_round_active = True
            self._roster.clear_submissions()
            self.logger.info(f"[next_turn] advance turn {prev_turn} -> {self.state.turn}")
            self._emit('game_state', self.snapshot())
            self._start_turn_timer()
