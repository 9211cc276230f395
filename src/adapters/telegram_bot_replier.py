"""Telegram Bot API reply adapter.

Uses the Bot API for delivery so leaderboards can be posted by a bot
account while the watcher itself runs under a user session.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from typing import Optional

from core.models import ResultsMessage


class TelegramBotReplier:
    """Replier adapter that sends messages via the Telegram Bot API."""

    format_mode = "html"

    def __init__(self, bot_token: str, chat_id: Optional[str] = None) -> None:
        self._bot_token = bot_token
        self._chat_id = chat_id

    def _endpoint(self) -> str:
        return f"https://api.telegram.org/bot{self._bot_token}/sendMessage"

    def _target_chat(self, message: ResultsMessage) -> str:
        # A fixed chat wins; otherwise answer where the results were posted.
        if self._chat_id:
            return self._chat_id
        return str(message.chat_id)

    async def send(self, message: ResultsMessage, text: str) -> None:
        """Send the text via the Bot API."""

        payload = {
            "chat_id": self._target_chat(message),
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        data = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(self._endpoint(), data=data, method="POST")
        request.add_header("Content-Type", "application/json")
        # Blocking call; replies are two short messages per results run.
        try:
            with urllib.request.urlopen(request, timeout=10):
                pass
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise RuntimeError(f"Bot API error {e.code}: {body}") from e
