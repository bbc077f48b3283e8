from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from wordchain.models import ChainNode


@dataclass(frozen=True)
class Submission:
    player_id: str
    name: str
    word: str


@dataclass
class RoundEntry:
    player_id: str
    name: str
    word: str
    score: int = 0
    points: int = 0


def distinct_candidates(submissions: List[Submission]) -> List[str]:
    """Submitted words without case-insensitive duplicates, first spelling wins."""
    seen = set()
    words = []
    for sub in submissions:
        key = sub.word.lower()
        if key not in seen:
            seen.add(key)
            words.append(sub.word)
    return words


def lookup_score(scores: Mapping[str, int], word: str) -> int:
    return scores.get(word.lower()) or 0


def rank_submissions(submissions: List[Submission], scores: Mapping[str, int]) -> List[RoundEntry]:
    """Order submissions by oracle score, best first.

    ``submissions`` must already be in submission order; ``sorted`` is stable
    so the earlier submission wins a tie.
    """
    entries = [RoundEntry(s.player_id, s.name, s.word, lookup_score(scores, s.word)) for s in submissions]
    return sorted(entries, key=lambda e: e.score, reverse=True)


def assign_points(ranked: List[RoundEntry], threshold: int = 57, connection_points: int = 2,
                  winner_bonus: int = 5) -> Optional[RoundEntry]:
    """Fill in ``points`` on each entry and return the round winner.

    A score at or above ``threshold`` earns ``connection_points``; the winner
    gets ``winner_bonus`` on top, whatever their score.
    """
    if not ranked:
        return None
    winner = ranked[0]
    for entry in ranked:
        entry.points = connection_points if entry.score >= threshold else 0
        if entry is winner:
            entry.points += winner_bonus
    return winner


def choose_next_node(submissions: List[Submission], rng) -> ChainNode:
    """Semantic jump: any submission may become the next target, not just the winner."""
    picked = rng.choice(submissions)
    return ChainNode(word=picked.word, player_id=picked.player_id)


def points_by_player(ranked: List[RoundEntry]) -> Dict[str, int]:
    return {e.player_id: e.points for e in ranked}


def compose_summary(turn: int, ranked: List[RoundEntry], next_node: ChainNode,
                    error: Optional[str] = None) -> str:
    winner = ranked[0]
    lines = [f"End of turn {turn}!", ""]
    if error:
        lines += [f"Scoring unavailable this round ({error}). Every word scores 0%.", ""]
    lines.append(f'Best connection: "{winner.word}" ({winner.score}%) by {winner.name}!')
    lines += ["", "--- ROUND POINTS ---"]
    for e in ranked:
        lines.append(f'{e.name} ("{e.word}"): {e.score}% -> +{e.points} points')
    lines += ["", "--- SEMANTIC JUMP! ---", f'The next word is: "{next_node.word}"!']
    return "\n".join(lines)


def no_participation_message(turn: int) -> str:
    return f"Nobody played in turn {turn}. Skipping..."
