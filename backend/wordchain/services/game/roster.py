from typing import Dict, List, Optional

from wordchain.models import COLORS, Player


class Roster:
    """Connection id -> Player, in join order.

    Gating on session status is the caller's job; the roster only enforces
    capacity, identity uniqueness and the one-submission-per-turn rule.
    """

    def __init__(self, capacity: int = 50, colors: Optional[List[str]] = None):
        self.capacity = capacity
        self._colors = list(colors or COLORS)
        self._players: Dict[str, Player] = {}
        self._color_cursor = 0
        self._submission_seq = 0

    def __len__(self) -> int:
        return len(self._players)

    def get(self, identity: str) -> Optional[Player]:
        return self._players.get(identity)

    def players(self) -> List[Player]:
        return list(self._players.values())

    @property
    def is_full(self) -> bool:
        return len(self._players) >= self.capacity

    def join(self, identity: str, name: str) -> Optional[Player]:
        if self.is_full or identity in self._players:
            return None
        color = self._colors[self._color_cursor % len(self._colors)]
        self._color_cursor += 1
        player = Player(id=identity, name=name, color=color)
        self._players[identity] = player
        return player

    def leave(self, identity: str) -> Optional[Player]:
        return self._players.pop(identity, None)

    def record_submission(self, identity: str, word: str) -> bool:
        player = self._players.get(identity)
        if not player or player.submitted:
            return False
        self._submission_seq += 1
        player.last_guess = word
        player.submitted = True
        player.submission_order = self._submission_seq
        return True

    def all_submitted(self) -> bool:
        return bool(self._players) and all(p.submitted for p in self._players.values())

    def submissions(self) -> List[Player]:
        """Players who submitted this turn, earliest first."""
        submitted = [p for p in self._players.values() if p.submitted]
        return sorted(submitted, key=lambda p: p.submission_order or 0)

    def clear_submissions(self) -> None:
        for p in self._players.values():
            p.clear_submission()
        self._submission_seq = 0

    def reset_scores(self) -> None:
        for p in self._players.values():
            p.score = 0
        self.clear_submissions()

    def award(self, identity: str, points: int) -> bool:
        player = self._players.get(identity)
        if not player:
            return False
        player.score += points
        return True

    def standings(self) -> List[Player]:
        return sorted(self._players.values(), key=lambda p: p.score, reverse=True)

    def to_list(self):
        return [p.to_dict() for p in self._players.values()]
