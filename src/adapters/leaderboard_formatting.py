"""Shared leaderboard formatting helpers.

Keeping formatting here prevents drift between repliers and keeps messages
consistent regardless of delivery channel.
"""

from __future__ import annotations

import html
from typing import List

from core.config import LeaderboardConfig
from core.models import RankedEntry
from core.ranking import rank_marker


def escape_md(value: str) -> str:
    for ch in r"*[`":
        value = value.replace(ch, f"\\{ch}")
    return value


def _strip_md_bold(value: str) -> str:
    return value.replace("**", "")


def _entry_line(ranked: RankedEntry, config: LeaderboardConfig, escape) -> str:
    entry = ranked.entry
    mention = escape(config.mention_format.format(player=entry.player_id))
    return f"{rank_marker(ranked.rank)} {mention} - {entry.average:.2f}"


def _format_markdown(ranked: List[RankedEntry], config: LeaderboardConfig) -> str:
    # Telethon's Markdown parser understands **bold** in the title as is.
    lines = [config.title]
    lines.extend(_entry_line(item, config, escape_md) for item in ranked)
    if not ranked:
        lines.append(config.empty_notice)
    return "\n".join(lines)


def _format_html(ranked: List[RankedEntry], config: LeaderboardConfig) -> str:
    title = html.escape(_strip_md_bold(config.title))
    lines = [f"<b>{title}</b>"]
    lines.extend(_entry_line(item, config, html.escape) for item in ranked)
    if not ranked:
        lines.append(html.escape(config.empty_notice))
    return "\n".join(lines)


def _format_plain(ranked: List[RankedEntry], config: LeaderboardConfig) -> str:
    lines = [_strip_md_bold(config.title)]
    lines.extend(_entry_line(item, config, str) for item in ranked)
    if not ranked:
        lines.append(config.empty_notice)
    return "\n".join(lines)


def format_leaderboard(ranked: List[RankedEntry], config: LeaderboardConfig, mode: str) -> str:
    """Return the leaderboard formatted for the requested mode."""

    if mode == "markdown":
        return _format_markdown(ranked, config)
    if mode == "html":
        return _format_html(ranked, config)
    if mode == "plain":
        return _format_plain(ranked, config)
    raise ValueError(f"Unsupported leaderboard format: {mode}")


def format_acknowledgement(config: LeaderboardConfig, mode: str) -> str:
    """Return the acknowledgement sent after a results run."""

    if mode == "html":
        return html.escape(config.acknowledgement)
    return config.acknowledgement
