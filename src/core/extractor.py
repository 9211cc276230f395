"""Results message parsing (core domain).

A results message lists one outcome per line, for example::

    Here are yesterday's results:
    3/6: @alice @bob
    X/6: @carol

Each line carries at most one score token and any number of mentions.
"""

from __future__ import annotations

import logging
import re

from core.config import FAILURE_SCORE
from core.models import DailyResult

LOGGER = logging.getLogger(__name__)

SCORE_PATTERN = re.compile(r"(\d+)/6|X/6", re.ASCII)
MENTION_PATTERN = re.compile(r"@\S+", re.ASCII)

_ID_DELIMITERS = "@<>"


def normalize_player_id(token: str) -> str:
    """Strip whitespace and mention delimiters from a raw mention token."""

    return token.strip().strip(_ID_DELIMITERS)


def is_results_message(text: str, marker: str = "results") -> bool:
    """Return True when the text announces results (case-insensitive)."""

    return marker.lower() in text.lower()


def _score_from_match(match: re.Match, failure_score: int) -> int:
    digits = match.group(1)
    if digits is None:
        return failure_score
    try:
        return int(digits)
    except ValueError:
        return 0


def extract_daily_result(message: str, failure_score: int = FAILURE_SCORE) -> DailyResult:
    """Parse one results message into a DailyResult.

    Only the first score token of a line counts. Every mention on that line
    receives the line's score; later lines overwrite earlier ones for the
    same player. Lines without a score or without mentions are skipped.
    """

    daily = DailyResult()
    for line in message.split("\n"):
        match = SCORE_PATTERN.search(line)
        if not match:
            continue

        score = _score_from_match(match, failure_score)
        players = [normalize_player_id(token) for token in MENTION_PATTERN.findall(line)]
        players = [player for player in players if player]
        if not players:
            LOGGER.debug("Score line without mentions skipped: %r", line)
            continue

        for player in players:
            daily.record(player, score)

    return daily
