"""Application entry point for the results ledger watcher."""

from __future__ import annotations

import argparse
import logging
import os
from functools import partial
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv
from telethon import events

import settings
from adapters.leaderboard_formatting import format_acknowledgement, format_leaderboard
from adapters.sqlite_storage import SQLiteStorage
from adapters.telegram_bot_replier import TelegramBotReplier
from adapters.telegram_mapper import build_message
from adapters.telegram_replier import TelegramChatReplier
from core.config import DedupConfig, LeaderboardConfig, ScoringConfig
from core.dedup import DEDUP_MODES
from core.errors import ConfigError
from core.leaderboard import LeaderboardRenderer
from core.models import ResultsMessage
from core.processor import ResultsProcessor
from core.scoring import ScoringEngine
from get_session import build_client, open_session

NAME = "LEDGER"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = _RedactingFormatter(_collect_redaction_values(config), fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/ledger.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        file_handler = RotatingFileHandler(
            path,
            maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
            backupCount=int(file_cfg.get("backup_count", 5)),
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _leaderboard_config() -> LeaderboardConfig:
    known = {"title", "empty_notice", "acknowledgement", "mention_format"}
    values = {key: value for key, value in settings.LEADERBOARD.items() if key in known}
    return LeaderboardConfig(**values)


def _scoring_config() -> ScoringConfig:
    return ScoringConfig(
        failure_score=settings.FAILURE_SCORE_VALUE,
        absence_penalty=settings.ABSENCE_PENALTY_VALUE,
        excluded_players=settings.EXCLUDED_PLAYERS,
    )


def _open_storage() -> SQLiteStorage:
    storage = SQLiteStorage(settings.DB_PATH)
    storage.init_db()
    return storage


def _build_replier(client):
    if settings.REPLY_METHOD == "bot":
        bot_token = os.getenv("BOT_API")
        if not bot_token:
            raise ConfigError("BOT_API is required when replies.method=bot")
        chat_id = str(settings.BOT_CHAT_ID) if settings.BOT_CHAT_ID else None
        return TelegramBotReplier(bot_token=bot_token, chat_id=chat_id)
    if settings.REPLY_METHOD == "chat":
        return TelegramChatReplier(client)
    raise ConfigError("replies.method must be 'chat' or 'bot'")


def _build_processor(storage: SQLiteStorage, replier, engine: ScoringEngine) -> ResultsProcessor:
    board_config = _leaderboard_config()
    formatter = partial(format_leaderboard, config=board_config, mode=replier.format_mode)
    return ResultsProcessor(
        engine=engine,
        renderer=LeaderboardRenderer(storage, formatter),
        replier=replier,
        allowed_sources=settings.SOURCES,
        result_posters=settings.RESULT_POSTERS,
        dedup_config=DedupConfig(mode=settings.DEDUP_MODE, ttl_days=settings.DEDUP_TTL_DAYS),
        acknowledgement=format_acknowledgement(board_config, replier.format_mode),
        results_marker=settings.RESULTS_MARKER,
        leaderboard_command=settings.LEADERBOARD_COMMAND,
    )


class _SilentReplier:
    """Swallow replies during the catch-up scan, counting them instead."""

    def __init__(self, format_mode: str) -> None:
        self.format_mode = format_mode
        self.replies = 0

    async def send(self, message: ResultsMessage, text: str) -> None:
        self.replies += 1


async def _catch_up_scan(client, processor: ResultsProcessor) -> None:
    """Replay recent history so results posted while offline are counted.

    Already applied messages are refused by their results key, so the scan
    is safe to repeat on every start.
    """

    logger = logging.getLogger(__name__)
    if not settings.CATCH_UP_ENABLED:
        return
    if settings.DEDUP_MODE == "off":
        logger.warning("Catch-up scan skipped: dedup mode 'off' would double count results")
        return

    messages_checked = 0
    runs = 0
    for entry in settings.CONFIG.get("sources", []):
        source_key = entry.get("source_key")
        if not source_key or not entry.get("enabled", True):
            continue
        try:
            if source_key.startswith("@"):
                entity = await client.get_entity(source_key)
            else:
                entity = await client.get_entity(int(source_key.split("chat_id:", 1)[1]))
        except Exception:
            logger.exception("Failed to resolve source %s during catch-up", source_key)
            continue

        messages = []
        async for message in client.iter_messages(entity, limit=settings.CATCH_UP_MESSAGES_PER_SOURCE):
            messages.append(message)

        # Oldest first so days are applied in posting order.
        for message in reversed(messages):
            messages_checked += 1
            report = await processor.handle(await build_message(message))
            if report is not None and not report.skipped_duplicate:
                runs += 1

    logger.info("Catch-up scan complete: messages=%s, results applied=%s", messages_checked, runs)


def _validate_settings() -> None:
    if settings.DEDUP_MODE not in DEDUP_MODES:
        raise ConfigError(f"dedup.mode must be one of {sorted(DEDUP_MODES)}")
    if not settings.SOURCES:
        raise ConfigError("config.json has no enabled sources")
    if not settings.RESULT_POSTERS:
        raise ConfigError("results.posters must list at least one sender")


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting results ledger")
    _validate_settings()

    storage = _open_storage()
    if settings.DEDUP_MODE != "off":
        removed = storage.cleanup_processed(settings.DEDUP_TTL_DAYS)
        logger.info("Dedup cleanup removed %s results keys", removed)

    engine = ScoringEngine(storage, _scoring_config())
    logger.info("Excluded from absence penalties: %s", sorted(engine.config.excluded_players) or "none")

    client = build_client(os.path.dirname(settings.DB_PATH))
    client.loop.run_until_complete(open_session(client))

    replier = _build_replier(client)
    logger.info("Selected reply method - %s", settings.REPLY_METHOD)
    processor = _build_processor(storage, replier, engine)

    # Run catch-up before wiring real-time handlers; replies stay silent so
    # old days do not flood the chat.
    catch_up_processor = _build_processor(storage, _SilentReplier(replier.format_mode), engine)
    client.loop.run_until_complete(_catch_up_scan(client, catch_up_processor))

    @client.on(events.NewMessage(incoming=True))
    async def handler(event) -> None:
        try:
            message = await build_message(event.message)
            await processor.handle(message)
        except Exception:
            logger.exception("Error while processing message")

    client.start()
    logger.info("Client connected. Listening for results...")
    client.run_until_disconnected()


def _login() -> None:
    _print_banner()
    client = build_client(os.path.dirname(settings.DB_PATH))

    async def _run_login() -> None:
        await open_session(client)
        await client.disconnect()

    client.loop.run_until_complete(_run_login())


def _print_leaderboard() -> None:
    storage = _open_storage()
    formatter = partial(format_leaderboard, config=_leaderboard_config(), mode="plain")
    print(LeaderboardRenderer(storage, formatter).render())


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="ledger")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the watcher")
    subparsers.add_parser("login", help="Authorize the Telegram user session")
    subparsers.add_parser("leaderboard", help="Print the current leaderboard")

    args = parser.parse_args(argv)
    if args.command == "login":
        _login()
        return
    if args.command == "leaderboard":
        _print_leaderboard()
        return
    _run()


if __name__ == "__main__":
    main()
