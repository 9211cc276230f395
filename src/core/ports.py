"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for storage and reply adapters so that
the core can be reused with different backends.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from core.models import LedgerEntry, ResultsMessage


class LedgerPort(Protocol):
    """Ledger reads and writes required by scoring and rendering."""

    def list_players(self) -> set[str]:
        ...

    def get_entry(self, player_id: str) -> Optional[LedgerEntry]:
        ...

    def upsert_entry(self, player_id: str, total_score: int, days_played: int) -> None:
        ...

    def list_entries(self) -> List[LedgerEntry]:
        ...


class StoragePort(LedgerPort, Protocol):
    """Ledger plus the registry of already applied results messages."""

    def is_processed(self, results_key: str) -> bool:
        ...

    def mark_processed(self, results_key: str) -> None:
        ...


class ReplierPort(Protocol):
    """Reply delivery required by the core pipeline."""

    format_mode: str

    async def send(self, message: ResultsMessage, text: str) -> None:
        ...
