"""Telegram reply adapter using the logged-in Telethon client.

Replies are posted into the same chat the results came from.
"""

from __future__ import annotations

from core.models import ResultsMessage


class TelegramChatReplier:
    """Replier adapter that answers in the originating chat."""

    format_mode = "markdown"

    def __init__(self, client) -> None:
        self._client = client

    async def send(self, message: ResultsMessage, text: str) -> None:
        """Send text to the chat of the given message."""

        await self._client.send_message(message.chat_id, text, parse_mode="md")
