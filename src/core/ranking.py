"""Leaderboard ranking rule (core domain).

Lower averages rank higher. Ties go to the player with more days played,
then to the lexicographically smaller player id.
"""

from __future__ import annotations

from typing import Iterable, List

from core.models import LedgerEntry, RankedEntry

MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


def _sort_key(entry: LedgerEntry) -> tuple[float, int, str]:
    return (entry.total_score / entry.days_played, -entry.days_played, entry.player_id)


def rank_entries(entries: Iterable[LedgerEntry]) -> List[RankedEntry]:
    """Return ranked entries, leaving out players with no days played."""

    eligible = [entry for entry in entries if entry.days_played > 0]
    eligible.sort(key=_sort_key)
    return [RankedEntry(rank=index, entry=entry) for index, entry in enumerate(eligible, start=1)]


def rank_marker(rank: int) -> str:
    """Medal for the podium, "N." for everyone else."""

    return MEDALS.get(rank, f"{rank}.")
