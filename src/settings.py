"""Static configuration for the results ledger.

All user-editable settings (sources, result posters, scoring, dedup,
leaderboard text, replies) live in a single JSON file for quick edits
without touching Python.
"""

import json
import os

from core.config import ABSENCE_PENALTY, FAILURE_SCORE
from core.source_keys import expand_source_key_variants

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Where to store the SQLite database. LEDGER_DB_PATH overrides the default.
DB_PATH = os.getenv("LEDGER_DB_PATH") or os.path.join(os.path.dirname(__file__), "leaderboard.db")

# Everything else is loaded from config.json at the project root.
CONFIG_PATH = os.getenv("LEDGER_CONFIG_PATH") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _normalize_sources(raw_sources: list[dict]) -> set[str]:
    """Collect enabled source keys, including equivalent chat_id forms."""

    sources: set[str] = set()
    for entry in raw_sources:
        source_key = entry.get("source_key")
        if not source_key:
            continue
        if not entry.get("enabled", True):
            continue
        sources.update(expand_source_key_variants(source_key))
    return sources


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Chats the watcher listens to.
SOURCES = _normalize_sources(_CONFIG.get("sources", []))

# Who may post results, and how to recognize a results message.
# - POSTERS: sender keys, "@username" or "user_id:<id>"
# - RESULTS_MARKER: case-insensitive text that must appear in the message
# - LEADERBOARD_COMMAND: prefix that asks for the current leaderboard
_results = _CONFIG.get("results", {})
RESULT_POSTERS = set(_results.get("posters", []))
RESULTS_MARKER = _results.get("marker", "results")
LEADERBOARD_COMMAND = _results.get("command", "!leaderboard")

# Scoring policy. Excluded players never receive absence penalties.
_scoring = _CONFIG.get("scoring", {})
FAILURE_SCORE_VALUE = int(_scoring.get("failure_score", FAILURE_SCORE))
ABSENCE_PENALTY_VALUE = int(_scoring.get("absence_penalty", ABSENCE_PENALTY))
EXCLUDED_PLAYERS = frozenset(_scoring.get("excluded_players", []))

# Idempotence keys stop a results message from being applied twice.
# - DEDUP_MODE: "off", "message", or "content"
# - DEDUP_TTL_DAYS: cleanup horizon for stored keys
_dedup = _CONFIG.get("dedup", {})
DEDUP_MODE = _dedup.get("mode", "message")
DEDUP_TTL_DAYS = int(_dedup.get("ttl_days", 365))

# Leaderboard text. Missing keys fall back to LeaderboardConfig defaults.
LEADERBOARD = _CONFIG.get("leaderboard", {})

# Reply method switches adapters without changing core logic.
_replies = _CONFIG.get("replies", {})
REPLY_METHOD = _replies.get("method", "chat")
# Only used when method=bot; defaults to the chat the results came from.
BOT_CHAT_ID = _replies.get("bot_chat_id")

# Catch-up scan settings for startup backfill.
_catch_up = _CONFIG.get("catch_up", {})
CATCH_UP_ENABLED = bool(_catch_up.get("enabled", False))
CATCH_UP_MESSAGES_PER_SOURCE = int(_catch_up.get("messages_per_source", 20))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
