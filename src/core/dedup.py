"""Idempotence keys for results messages (core domain)."""

from __future__ import annotations

import hashlib
import re
from typing import Optional

from core.models import ResultsMessage

DEDUP_MODES = frozenset({"off", "message", "content"})


def _collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def normalize_for_fingerprint(text: str) -> str:
    """Normalize text for deterministic fingerprinting."""

    return _collapse_whitespace(text).lower()


def compute_results_key(message: ResultsMessage, mode: str) -> Optional[str]:
    """Return the key that marks a results message as applied.

    - off: no key, every delivery is applied
    - message: one key per chat message (source + message id)
    - content: one key per distinct text within a source
    """

    if mode == "off":
        return None

    if mode == "message":
        payload = f"{message.source_key}\n{message.message_id}"
    elif mode == "content":
        payload = f"{message.source_key}\n{normalize_for_fingerprint(message.text)}"
    else:
        raise ValueError(f"Unsupported dedup mode: {mode}")

    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
