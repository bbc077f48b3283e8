"""Semantic scoring oracle backed by the OpenAI Chat Completions API.

The oracle rates how strongly each candidate word connects to a target
word on a 0-100 scale. ``score`` never raises: failures come back as an
``OracleResult`` carrying an error message and no scores, and the caller
treats every candidate as 0.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import openai

from wordchain.errors import OracleError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    'You are a semantic analysis engine. Rate the strength of the connection between a '
    '"target term" and each "candidate term". Consider every kind of connection: meaning, '
    'association, culture, sound. Words may be in any language. Return a score from 0 to 100. '
    'Reply ONLY with a valid JSON object with the key "results", holding an array of objects '
    'with "word" and "score". Example: {"results": [{"word": "Futuro", "score": 92}]}'
)


@dataclass
class OracleResult:
    scores: Dict[str, int] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, message: str) -> 'OracleResult':
        return cls(scores={}, error=message)


def build_user_prompt(target: str, candidates: List[str]) -> str:
    quoted = ', '.join(f'"{c}"' for c in candidates)
    return f'Target: "{target}". Candidates: [{quoted}].'


def parse_scores(content) -> Dict[str, int]:
    """Parse the oracle's JSON reply into a lower-cased word -> score map.

    Entries without a usable word are skipped; unusable scores become 0 and
    everything is clamped to [0, 100].
    """
    try:
        data = json.loads(content)
    except (TypeError, ValueError) as exc:
        raise OracleError(f'invalid JSON from oracle: {exc}') from exc
    if not isinstance(data, dict):
        raise OracleError('oracle reply is not a JSON object')
    results = data.get('results') or []
    if not isinstance(results, list):
        raise OracleError('"results" is not a list')

    scores: Dict[str, int] = {}
    for item in results:
        if not isinstance(item, dict):
            continue
        word = item.get('word')
        if not isinstance(word, str) or not word.strip():
            continue
        try:
            score = int(item.get('score') or 0)
        except (TypeError, ValueError):
            score = 0
        scores[word.strip().lower()] = max(0, min(100, score))
    return scores


class OpenAIScoringOracle:
    def __init__(self, api_key: Optional[str] = None, model: str = 'gpt-3.5-turbo',
                 timeout: float = 20.0, client=None):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client = client

    def _get_client(self):
        # Built lazily so a missing API key only fails the round, not app start-up
        if self._client is None:
            self._client = openai.OpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def score(self, target: str, candidates: List[str]) -> OracleResult:
        if not candidates:
            return OracleResult()
        try:
            completion = self._get_client().chat.completions.create(
                model=self.model,
                messages=[
                    {'role': 'system', 'content': SYSTEM_PROMPT},
                    {'role': 'user', 'content': build_user_prompt(target, candidates)},
                ],
                response_format={'type': 'json_object'},
            )
            content = completion.choices[0].message.content
            return OracleResult(scores=parse_scores(content))
        except (openai.OpenAIError, OracleError) as exc:
            logger.warning(f"[oracle-error] target={target!r} candidates={len(candidates)} error={exc}")
            return OracleResult.failure(str(exc))
        except (AttributeError, IndexError) as exc:
            logger.warning(f"[oracle-error] target={target!r} malformed completion: {exc}")
            return OracleResult.failure(f'malformed completion: {exc}')
