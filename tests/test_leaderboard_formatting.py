from __future__ import annotations

import pytest

from adapters.leaderboard_formatting import format_acknowledgement, format_leaderboard
from core.config import LeaderboardConfig
from core.models import LedgerEntry
from core.ranking import rank_entries


def _ranked():
    return rank_entries(
        [
            LedgerEntry("alice", 6, 3),
            LedgerEntry("bob", 9, 3),
            LedgerEntry("carol", 12, 3),
            LedgerEntry("dave", 13, 3),
        ]
    )


def test_markdown_board_lines() -> None:
    text = format_leaderboard(_ranked(), LeaderboardConfig(), mode="markdown")
    lines = text.split("\n")
    assert lines[0] == "📊 **Wordle Leaderboard (Average Score)** 📊"
    assert lines[1:] == [
        "🥇 @alice - 2.00",
        "🥈 @bob - 3.00",
        "🥉 @carol - 4.00",
        "4. @dave - 4.33",
    ]


def test_empty_board_shows_notice() -> None:
    text = format_leaderboard([], LeaderboardConfig(), mode="markdown")
    assert text.endswith("No results available yet!")
    assert "🥇" not in text


def test_html_board_escapes_and_bolds_title() -> None:
    config = LeaderboardConfig(mention_format="<@{player}>")
    text = format_leaderboard(_ranked()[:1], config, mode="html")
    assert text.startswith("<b>📊 Wordle Leaderboard (Average Score) 📊</b>")
    assert "🥇 &lt;@alice&gt; - 2.00" in text


def test_plain_board_has_no_markup() -> None:
    text = format_leaderboard(_ranked()[:1], LeaderboardConfig(), mode="plain")
    assert "**" not in text


def test_unknown_mode_rejected() -> None:
    with pytest.raises(ValueError):
        format_leaderboard([], LeaderboardConfig(), mode="rtf")


def test_acknowledgement_text() -> None:
    assert format_acknowledgement(LeaderboardConfig(), "markdown") == "Daily results successfully processed!"
