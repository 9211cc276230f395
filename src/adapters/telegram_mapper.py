"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline.
"""

from __future__ import annotations

from typing import Optional

from telethon.tl.custom import Message

from core.models import ResultsMessage
from core.source_keys import sender_key_from_parts, source_key_from_parts


def source_key_from_message(message: Message) -> str:
    """Normalize a source key using a single rule enforced across the app."""

    chat = getattr(message, "chat", None)
    username = getattr(chat, "username", None)
    if not isinstance(username, str):
        username = None
    return source_key_from_parts(username, message.chat_id)


def sender_key_from_message(message: Message) -> Optional[str]:
    """Return the sender key, preferring the public username."""

    sender = getattr(message, "sender", None)
    username = getattr(sender, "username", None)
    if not isinstance(username, str):
        username = None
    return sender_key_from_parts(username, getattr(message, "sender_id", None))


async def build_message(message: Message) -> ResultsMessage:
    """Build a core ResultsMessage from a Telethon Message."""

    # Events do not always carry the sender entity; fetch it once if missing.
    if getattr(message, "sender", None) is None and hasattr(message, "get_sender"):
        await message.get_sender()

    return ResultsMessage(
        source_key=source_key_from_message(message),
        chat_id=message.chat_id,
        message_id=message.id,
        sender_key=sender_key_from_message(message),
        date=message.date,
        text=message.raw_text or "",
    )
