"""Scoring engine: folds a DailyResult into the cumulative ledger.

The engine performs a full outer join between the players already in the
ledger and the players in the day's results:

- in both, or only in the results: score added, one day played
- only in the ledger: absence penalty added, days unchanged

Storage failures never abort a run. A failed read degrades to an empty view
and a failed write loses only that player's update for this run.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from core.config import ScoringConfig
from core.errors import StorageError
from core.models import DailyResult, ScoringReport
from core.ports import StoragePort

LOGGER = logging.getLogger(__name__)


class ScoringEngine:
    """Apply daily results to a ledger, one batch at a time."""

    def __init__(self, storage: StoragePort, config: Optional[ScoringConfig] = None) -> None:
        self._storage = storage
        self._config = config or ScoringConfig()
        # Serializes the read-known-then-write sequence across callers.
        self._lock = threading.Lock()

    @property
    def config(self) -> ScoringConfig:
        return self._config

    def apply(self, daily: DailyResult, results_key: Optional[str] = None) -> ScoringReport:
        """Apply one day's results and return what changed.

        With a results_key, a batch that was already applied is refused.
        Without one, applying the same batch twice counts it twice.
        """

        with self._lock:
            report = ScoringReport()
            if results_key and self._already_applied(results_key):
                LOGGER.info("Results %s already applied, skipping", results_key[:12])
                report.skipped_duplicate = True
                return report

            known = self._known_players()

            for player_id, score in daily.items():
                if self._add(player_id, score, count_day=True):
                    report.scored[player_id] = score
                else:
                    report.failed.append(player_id)

            absent = sorted(known - daily.players())
            for player_id in absent:
                if self._config.is_excluded(player_id):
                    continue
                LOGGER.info("Adding penalty for %s (absent in daily results)", player_id)
                if self._add(player_id, self._config.absence_penalty, count_day=False):
                    report.penalized.append(player_id)
                else:
                    report.failed.append(player_id)

            if results_key:
                self._record_applied(results_key)

        LOGGER.info(
            "Scoring run complete: scored=%s, penalized=%s, failed=%s",
            len(report.scored),
            len(report.penalized),
            len(report.failed),
        )
        return report

    def _already_applied(self, results_key: str) -> bool:
        try:
            return self._storage.is_processed(results_key)
        except StorageError:
            LOGGER.exception("Could not check results key, applying anyway")
            return False

    def _record_applied(self, results_key: str) -> None:
        try:
            self._storage.mark_processed(results_key)
        except StorageError:
            LOGGER.exception("Could not record results key %s", results_key[:12])

    def _known_players(self) -> set[str]:
        try:
            return set(self._storage.list_players())
        except StorageError:
            # Penalties for absent players are skipped when this happens.
            LOGGER.exception("Error querying ledger for players")
            return set()

    def _add(self, player_id: str, points: int, count_day: bool) -> bool:
        """Add points (and optionally a day) to one player. Returns success."""

        day = 1 if count_day else 0
        try:
            entry = self._storage.get_entry(player_id)
            if entry is None:
                self._storage.upsert_entry(player_id, points, day)
            else:
                self._storage.upsert_entry(
                    player_id,
                    entry.total_score + points,
                    entry.days_played + day,
                )
        except StorageError:
            LOGGER.exception("Error updating ledger entry for %s", player_id)
            return False
        return True
