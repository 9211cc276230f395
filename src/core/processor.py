"""Core results processing pipeline.

This module is integration-agnostic. It only relies on ports for storage and
replies, enabling other chat frontends or adapters without changes here.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from core.config import DedupConfig
from core.dedup import compute_results_key
from core.extractor import extract_daily_result, is_results_message
from core.leaderboard import LeaderboardRenderer
from core.models import ResultsMessage, ScoringReport
from core.ports import ReplierPort
from core.scoring import ScoringEngine

LOGGER = logging.getLogger(__name__)


class ResultsProcessor:
    """Orchestrates gating, extraction, scoring, and replies."""

    def __init__(
        self,
        engine: ScoringEngine,
        renderer: LeaderboardRenderer,
        replier: ReplierPort,
        allowed_sources: set[str],
        result_posters: Iterable[str],
        dedup_config: DedupConfig,
        acknowledgement: str,
        results_marker: str = "results",
        leaderboard_command: str = "!leaderboard",
    ) -> None:
        self._engine = engine
        self._renderer = renderer
        self._replier = replier
        self._allowed_sources = allowed_sources
        self._result_posters = {poster.lower() for poster in result_posters}
        self._dedup = dedup_config
        self._acknowledgement = acknowledgement
        self._results_marker = results_marker
        self._leaderboard_command = leaderboard_command.lower()

    async def handle(self, message: ResultsMessage) -> Optional[ScoringReport]:
        """Process one inbound message. Returns the report when results were scored."""

        if message.source_key not in self._allowed_sources:
            return None

        text = message.text
        if not text.strip():
            return None

        if self._leaderboard_command and text.strip().lower().startswith(self._leaderboard_command):
            await self._replier.send(message, self._renderer.render())
            return None

        sender = (message.sender_key or "").lower()
        if sender not in self._result_posters:
            LOGGER.debug("Message %s ignored, sender %s is not a results poster", message.message_id, sender)
            return None

        if not is_results_message(text, self._results_marker):
            return None

        LOGGER.info("Processing results message %s from %s", message.message_id, message.source_key)
        results_key = compute_results_key(message, self._dedup.mode)
        daily = extract_daily_result(text, self._engine.config.failure_score)
        LOGGER.info("Daily results: %s", daily.as_dict())

        report = self._engine.apply(daily, results_key=results_key)
        if report.skipped_duplicate:
            return report

        # Replies go out even if some ledger writes failed.
        try:
            await self._replier.send(message, self._acknowledgement)
        except Exception:
            LOGGER.exception("Could not send acknowledgement for message %s", message.message_id)
        await self._replier.send(message, self._renderer.render())
        return report
