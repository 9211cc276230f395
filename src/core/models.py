"""Core domain models.

These types are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class ResultsMessage:
    """Minimal inbound chat message used by the core processing pipeline."""

    source_key: str
    chat_id: int
    message_id: int
    sender_key: Optional[str]
    date: datetime
    text: str


class DailyResult:
    """Scores parsed from one results message, keyed by player id.

    Each player holds exactly one score; recording a player again replaces
    the earlier score.
    """

    def __init__(self, scores: Optional[Dict[str, int]] = None) -> None:
        self._scores: Dict[str, int] = dict(scores or {})

    def record(self, player_id: str, score: int) -> None:
        self._scores[player_id] = score

    def score_for(self, player_id: str) -> Optional[int]:
        return self._scores.get(player_id)

    def players(self) -> set[str]:
        return set(self._scores)

    def items(self) -> List[Tuple[str, int]]:
        return sorted(self._scores.items())

    def as_dict(self) -> Dict[str, int]:
        return dict(self._scores)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._scores

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._scores))

    def __len__(self) -> int:
        return len(self._scores)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DailyResult):
            return self._scores == other._scores
        if isinstance(other, dict):
            return self._scores == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"DailyResult({self._scores!r})"


@dataclass(frozen=True)
class LedgerEntry:
    """Persisted cumulative statistics for one player."""

    player_id: str
    total_score: int
    days_played: int

    @property
    def average(self) -> Optional[float]:
        if self.days_played <= 0:
            return None
        return self.total_score / self.days_played


@dataclass(frozen=True)
class RankedEntry:
    """A ledger entry with its 1-based leaderboard position."""

    rank: int
    entry: LedgerEntry


@dataclass
class ScoringReport:
    """What a single scoring run changed in the ledger."""

    scored: Dict[str, int] = field(default_factory=dict)
    penalized: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped_duplicate: bool = False
