from __future__ import annotations

from typing import List, Optional

import pytest

from core.errors import StorageError
from core.models import LedgerEntry


class FakeStorage:
    """In-memory StoragePort with switchable failures."""

    def __init__(self) -> None:
        self.rows: dict[str, tuple[int, int]] = {}
        self.processed: set[str] = set()
        self.fail_list = False
        self.fail_writes_for: set[str] = set()
        self.writes: list[str] = []

    def seed(self, player_id: str, total_score: int, days_played: int) -> None:
        self.rows[player_id] = (total_score, days_played)

    def list_players(self) -> set[str]:
        if self.fail_list:
            raise StorageError("list failed")
        return set(self.rows)

    def get_entry(self, player_id: str) -> Optional[LedgerEntry]:
        if player_id not in self.rows:
            return None
        total, days = self.rows[player_id]
        return LedgerEntry(player_id=player_id, total_score=total, days_played=days)

    def upsert_entry(self, player_id: str, total_score: int, days_played: int) -> None:
        if player_id in self.fail_writes_for:
            raise StorageError(f"write failed for {player_id}")
        self.writes.append(player_id)
        self.rows[player_id] = (total_score, days_played)

    def list_entries(self) -> List[LedgerEntry]:
        if self.fail_list:
            raise StorageError("list failed")
        return [
            LedgerEntry(player_id=player_id, total_score=total, days_played=days)
            for player_id, (total, days) in self.rows.items()
        ]

    def is_processed(self, results_key: str) -> bool:
        return results_key in self.processed

    def mark_processed(self, results_key: str) -> None:
        self.processed.add(results_key)


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()
