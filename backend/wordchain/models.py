from dataclasses import dataclass, field
from typing import List, Optional

LOBBY = 'lobby'
PLAYING = 'playing'
FINISHED = 'finished'

COLORS = ["#E53935", "#1E88E5", "#43A047", "#FDD835", "#8E24AA", "#D81B60", "#F4511E", "#3949AB"]
SEED_WORDS = ["Futuro", "Natureza", "Arte", "Sociedade", "Conhecimento", "Justiça"]


@dataclass
class Player:
    id: str
    name: str
    color: str
    score: int = 0
    submitted: bool = False
    last_guess: Optional[str] = None
    # Position of this turn's submission; breaks score ties
    submission_order: Optional[int] = None

    def clear_submission(self):
        self.submitted = False
        self.last_guess = None
        self.submission_order = None

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'color': self.color,
            'score': self.score,
            'submitted': self.submitted,
            'last_guess': self.last_guess,
        }


@dataclass(frozen=True)
class ChainNode:
    word: str
    player_id: Optional[str] = None

    def to_dict(self):
        return {'word': self.word, 'player_id': self.player_id}


@dataclass
class SessionState:
    status: str = LOBBY
    turn: int = 0
    max_turns: int = 10
    is_round_active: bool = False
    is_evaluating: bool = False
    time_left: int = 0
    chain: List[ChainNode] = field(default_factory=list)
    host_id: Optional[str] = None

    @property
    def accepting_submissions(self) -> bool:
        return self.status == PLAYING and self.is_round_active and not self.is_evaluating

    @property
    def target_word(self) -> Optional[str]:
        return self.chain[-1].word if self.chain else None

    def to_dict(self):
        return {
            'status': self.status,
            'turn': self.turn,
            'max_turns': self.max_turns,
            'is_round_active': self.is_round_active,
            'is_evaluating': self.is_evaluating,
            'time_left': self.time_left,
            'chain': [node.to_dict() for node in self.chain],
            'host_id': self.host_id,
        }
