"""Helpers for working with chat source keys and sender keys.

Sources are written as ``@username`` for public chats or ``chat_id:<id>``
otherwise. Telegram reports the same chat under several numeric forms, so
configured ``chat_id:`` keys are expanded to every equivalent variant.
"""

from __future__ import annotations

from typing import Optional


def source_key_from_parts(username: Optional[str], chat_id: int) -> str:
    """Return the normalized source key for a chat."""

    if username:
        return f"@{username.lower()}"
    return f"chat_id:{chat_id}"


def sender_key_from_parts(username: Optional[str], user_id: Optional[int]) -> Optional[str]:
    """Return the normalized key for a message sender, if known."""

    if username:
        return f"@{username.lower()}"
    if user_id is None:
        return None
    return f"user_id:{user_id}"


def _expand_chat_id_variants(raw_chat_id: int) -> set[int]:
    """Return equivalent chat id variants (peer id, chat id, channel id)."""

    variants: set[int] = {raw_chat_id}
    if raw_chat_id < 0:
        raw_text = str(raw_chat_id)
        if raw_text.startswith("-100"):
            # Channel/supergroup peer id: -100<channel_id>
            channel_part = raw_text[4:]
            if channel_part.isdigit():
                variants.add(int(channel_part))
        else:
            variants.add(abs(raw_chat_id))
        return variants

    variants.add(-raw_chat_id)
    variants.add(-1000000000000 - raw_chat_id)
    return variants


def expand_source_key_variants(source_key: str) -> set[str]:
    """Expand a source key to include equivalent chat_id variants."""

    if not source_key.startswith("chat_id:"):
        return {source_key.lower()} if source_key.startswith("@") else {source_key}

    try:
        raw_chat_id = int(source_key.split("chat_id:", 1)[1])
    except ValueError:
        return {source_key}

    return {f"chat_id:{variant}" for variant in _expand_chat_id_variants(raw_chat_id)}
