"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet

# "X/6" lines are scored as one attempt past the maximum.
FAILURE_SCORE = 7

# Added to a known player who is missing from a day's results. Kept separate
# from FAILURE_SCORE even though both are 7 today.
ABSENCE_PENALTY = 7


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring policy applied by the engine."""

    failure_score: int = FAILURE_SCORE
    absence_penalty: int = ABSENCE_PENALTY
    excluded_players: FrozenSet[str] = field(default_factory=frozenset)

    def is_excluded(self, player_id: str) -> bool:
        """Return True when the player never receives absence penalties."""

        return player_id in self.excluded_players


@dataclass(frozen=True)
class DedupConfig:
    """Idempotence key settings for results processing."""

    mode: str = "message"
    ttl_days: int = 365


@dataclass(frozen=True)
class LeaderboardConfig:
    """Text settings consumed by the leaderboard formatter."""

    title: str = "📊 **Wordle Leaderboard (Average Score)** 📊"
    empty_notice: str = "No results available yet!"
    acknowledgement: str = "Daily results successfully processed!"
    mention_format: str = "@{player}"
