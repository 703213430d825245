from __future__ import annotations

import logging
from typing import Iterable, Sequence

import aiohttp
import discord

from questrunner.domain.models.RunReportModel import RunReport

# Discord rejects embed field values longer than this.
FIELD_VALUE_LIMIT = 1024


def _clip(value: str) -> str:
    if len(value) <= FIELD_VALUE_LIMIT:
        return value
    return value[: FIELD_VALUE_LIMIT - 1] + "…"


def build_report_embed(report: RunReport) -> discord.Embed:
    """Describe a finished run as a Discord embed."""
    failed = bool(report.failed_submissions)
    embed = discord.Embed(
        title=f"Quest run for {report.owner_address}",
        color=discord.Color.red() if failed else discord.Color.blurple(),
    )
    for name, value in _iter_fields(report):
        embed.add_field(name=name, value=_clip(value), inline=False)
    return embed


def _hero_label(hero_id: int | None) -> str:
    return "no heroes" if hero_id is None else f"hero {hero_id}"


def _iter_fields(report: RunReport) -> Iterable[tuple[str, str]]:
    counts = "\n".join(f"{name}: {count}" for name, count in report.stats.items())
    yield "Active quests", counts or "none"

    if report.completions:
        yield "Completions", "\n".join(
            f"{c.quest_name} ({_hero_label(c.hero_id)}): {'ok' if c.succeeded else c.error}"
            for c in report.completions
        )

    started: Sequence[str] = [
        f"{o.entry.quest_type} x{o.entry.attempts}: "
        f"{', '.join(str(h) for h in o.entry.hero_ids)}"
        for o in report.submissions
        if o.succeeded
    ]
    if started:
        yield "Started", "\n".join(started)

    if report.failed_submissions:
        yield "Failed", "\n".join(
            f"{o.entry.quest_type}: {o.error}" for o in report.failed_submissions
        )

    yield "Questing heroes", str(len(report.allocation.questing_hero_ids))


class DiscordRunNotifier:
    """Posts run summaries to a Discord channel webhook."""

    def __init__(
        self,
        webhook_url: str,
        *,
        username: str = "Quest Runner",
        logger: logging.Logger | None = None,
    ) -> None:
        self._webhook_url = webhook_url
        self._username = username
        self._log = logger or logging.getLogger(__name__)

    async def send_report(self, report: RunReport) -> None:
        embed = build_report_embed(report)
        try:
            async with aiohttp.ClientSession() as session:
                webhook = discord.Webhook.from_url(self._webhook_url, session=session)
                await webhook.send(embed=embed, username=self._username)
        except Exception as exc:
            self._log.warning(
                "Failed to publish run summary",
                exc_info=exc,
                extra={"owner_address": report.owner_address},
            )


__all__ = ["DiscordRunNotifier", "build_report_embed"]
