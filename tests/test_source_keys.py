from __future__ import annotations

from core.source_keys import (
    expand_source_key_variants,
    sender_key_from_parts,
    source_key_from_parts,
)


def test_source_key_prefers_username() -> None:
    assert source_key_from_parts("WordleGroup", -100123) == "@wordlegroup"
    assert source_key_from_parts(None, -100123) == "chat_id:-100123"


def test_sender_key_variants() -> None:
    assert sender_key_from_parts("Wordle_Bot", 42) == "@wordle_bot"
    assert sender_key_from_parts(None, 42) == "user_id:42"
    assert sender_key_from_parts(None, None) is None


def test_expand_chat_id_variants_positive() -> None:
    variants = expand_source_key_variants("chat_id:123")
    assert "chat_id:123" in variants
    assert "chat_id:-123" in variants
    assert "chat_id:-1000000000123" in variants


def test_expand_chat_id_variants_negative_100() -> None:
    variants = expand_source_key_variants("chat_id:-100987654321")
    assert variants == {"chat_id:-100987654321", "chat_id:987654321"}


def test_username_sources_are_lowercased() -> None:
    assert expand_source_key_variants("@WordleGroup") == {"@wordlegroup"}
