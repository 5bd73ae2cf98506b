"""Scoring of candidate titles against a search string.

The query layer only needs a function ``(query, candidate) -> int`` that
returns 0 for "no match" and a larger number for a better match. Hosts that
embed codelaunch usually bring their own; ``subsequence_score`` is the one
the CLI uses.

Scoring Rules (``subsequence_score``):
    - Every query character must appear in the candidate, in order,
      case-insensitively; otherwise the score is 0.
    - Each matched character scores 1, +5 when it directly follows the
      previous match, +3 when it starts a word.
    - A candidate that starts with the query gets +10.
"""

from __future__ import annotations

from typing import Protocol

_WORD_SEPARATORS = frozenset(" -_./\\:[]()@")


class Matcher(Protocol):
    """Scores a candidate title against a query; 0 means no match."""

    def __call__(self, query: str, candidate: str) -> int: ...


def subsequence_score(query: str, candidate: str) -> int:
    """Score ``candidate`` against ``query`` (see module docstring).

    An empty query matches everything with score 1.
    """
    if not query:
        return 1
    q = query.lower()
    c = candidate.lower()

    score = 0
    position = 0
    previous = -2
    for char in q:
        index = c.find(char, position)
        if index < 0:
            return 0
        score += 1
        if index == previous + 1:
            score += 5
        if index == 0 or c[index - 1] in _WORD_SEPARATORS:
            score += 3
        previous = index
        position = index + 1

    if c.startswith(q):
        score += 10
    return score
