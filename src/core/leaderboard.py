"""Leaderboard rendering on top of the ledger port."""

from __future__ import annotations

import logging
from typing import Callable, List

from core.errors import StorageError
from core.models import RankedEntry
from core.ports import LedgerPort
from core.ranking import rank_entries

LOGGER = logging.getLogger(__name__)

Formatter = Callable[[List[RankedEntry]], str]


class LeaderboardRenderer:
    """Read the ledger, rank it, and format the result as text."""

    def __init__(self, ledger: LedgerPort, formatter: Formatter) -> None:
        self._ledger = ledger
        self._formatter = formatter

    def ranked(self) -> List[RankedEntry]:
        try:
            entries = self._ledger.list_entries()
        except StorageError:
            LOGGER.exception("Error fetching leaderboard")
            entries = []
        return rank_entries(entries)

    def render(self) -> str:
        return self._formatter(self.ranked())
