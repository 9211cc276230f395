"""SQLite storage adapter.

Implements the core StoragePort using a simple SQLite database. Every
sqlite3 error is re-raised as StorageError so the core can absorb it
without importing sqlite3.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from core.errors import StorageError
from core.models import LedgerEntry


class SQLiteStorage:
    """Thin SQLite wrapper that satisfies the StoragePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - leaderboard: cumulative score and days played per player
        - processed_results: keys of results messages already applied
        """

        try:
            with self._connect() as conn:
                # Fields:
                # - player_id: normalized mention, unique per player
                # - total_score: sum of daily scores and absence penalties
                # - days_played: days with a posted result (penalties excluded)
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS leaderboard (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        player_id TEXT NOT NULL UNIQUE,
                        total_score INTEGER NOT NULL,
                        days_played INTEGER NOT NULL DEFAULT 0
                    )
                    """
                )
                # processed_results guards against applying a results message twice
                # after a reconnect or a catch-up scan.
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS processed_results (
                        results_key TEXT PRIMARY KEY,
                        processed_at TIMESTAMP NOT NULL
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise StorageError(f"Could not initialize database {self._db_path}") from exc

    def list_players(self) -> set[str]:
        """Return every player id present in the ledger."""

        try:
            with self._connect() as conn:
                rows = conn.execute("SELECT player_id FROM leaderboard").fetchall()
        except sqlite3.Error as exc:
            raise StorageError("Error querying ledger players") from exc
        return {row["player_id"] for row in rows}

    def get_entry(self, player_id: str) -> Optional[LedgerEntry]:
        """Return one player's ledger entry, if any."""

        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT player_id, total_score, days_played FROM leaderboard WHERE player_id = ?",
                    (player_id,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Error querying ledger entry for {player_id}") from exc
        return _entry_from_row(row) if row else None

    def upsert_entry(self, player_id: str, total_score: int, days_played: int) -> None:
        """Overwrite a player's totals, inserting the row when absent."""

        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO leaderboard (player_id, total_score, days_played)
                    VALUES (?, ?, ?)
                    ON CONFLICT(player_id) DO UPDATE SET
                        total_score = excluded.total_score,
                        days_played = excluded.days_played
                    """,
                    (player_id, total_score, days_played),
                )
        except sqlite3.Error as exc:
            raise StorageError(f"Error writing ledger entry for {player_id}") from exc

    def list_entries(self) -> List[LedgerEntry]:
        """Return every ledger entry, including players with zero days."""

        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT player_id, total_score, days_played FROM leaderboard ORDER BY player_id"
                ).fetchall()
        except sqlite3.Error as exc:
            raise StorageError("Error fetching leaderboard") from exc
        return [_entry_from_row(row) for row in rows]

    def is_processed(self, results_key: str) -> bool:
        """Check if a results message key has already been applied."""

        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT 1 FROM processed_results WHERE results_key = ?",
                    (results_key,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError("Error querying processed results") from exc
        return row is not None

    def mark_processed(self, results_key: str) -> None:
        """Record a results message key if it does not exist."""

        now = datetime.now(timezone.utc)
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT OR IGNORE INTO processed_results (results_key, processed_at)
                    VALUES (?, ?)
                    """,
                    (results_key, now.isoformat()),
                )
        except sqlite3.Error as exc:
            raise StorageError("Error recording processed results") from exc

    def cleanup_processed(self, ttl_days: int) -> int:
        """Delete old results keys and return the number removed."""

        cutoff = datetime.now(timezone.utc) - timedelta(days=ttl_days)
        try:
            with self._connect() as conn:
                cur = conn.execute(
                    "DELETE FROM processed_results WHERE processed_at < ?",
                    (cutoff.isoformat(),),
                )
                return cur.rowcount
        except sqlite3.Error as exc:
            raise StorageError("Error cleaning processed results") from exc


def _entry_from_row(row: sqlite3.Row) -> LedgerEntry:
    return LedgerEntry(
        player_id=row["player_id"],
        total_score=int(row["total_score"]),
        days_played=int(row["days_played"]),
    )
