from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal, localcontext
from typing import Optional

from questrunner.domain.models.QuestModel import QuestEvent
from questrunner.domain.usecase.ports import QuestGateway


def format_units(amount: int, decimals: int) -> str:
    """Render an integer amount of base units as a decimal string.

    Always keeps at least one fractional digit, e.g. ``format_units(10**18, 18)``
    is ``"1.0"``.
    """
    if decimals <= 0:
        return f"{amount}.0"
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(str(abs(amount))))
        value = Decimal(amount).scaleb(-decimals)
    text = format(value, "f")
    if "." not in text:
        return f"{text}.0"
    whole, fraction = text.split(".")
    fraction = fraction.rstrip("0") or "0"
    return f"{whole}.{fraction}"


def _format_time(value: Optional[datetime]) -> str:
    if value is None:
        return "unknown"
    return value.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def format_quest_event(event: QuestEvent) -> list[str]:
    """Human-readable lines for one quest event and its rewards."""
    heroes = ", ".join(str(hero_id) for hero_id in event.heroes)
    lines = [
        f"Quest: {event.status.label} {event.name}, "
        f"start date: {_format_time(event.start_at)}, "
        f"end date: {_format_time(event.complete_at)}, "
        f"heroes: {heroes}, attempts: {event.attempts}"
    ]
    for reward in event.rewards or []:
        items = ", ".join(
            f"{item.name}: {format_units(item.amount, item.decimals)}"
            for item in reward.items
        )
        lines.append(
            f"* heroId: {reward.hero_id}, xp: {reward.xp}, "
            f"skillup: {reward.skill_up / 10}, items: {items}"
        )
    return lines


class QuestMonitor:
    """Reports quest lifecycle events for a watched address."""

    def __init__(
        self,
        *,
        gateway: QuestGateway,
        owner_address: str,
        block_history: int,
        logger: logging.Logger | None = None,
    ) -> None:
        self._gateway = gateway
        self._owner = owner_address
        self._block_history = block_history
        self._log = logger or logging.getLogger(__name__)

    def log_event(self, event: QuestEvent) -> None:
        for line in format_quest_event(event):
            self._log.info(line)

    async def report_history(self) -> int:
        """Log quests completed in the recent block window; returns how many."""
        try:
            events = await self._gateway.get_quest_completed_events(
                self._owner, self._block_history
            )
        except Exception:
            self._log.exception(
                "error trying to get historical quest completed events"
            )
            return 0
        for event in events:
            self.log_event(event)
        return len(events)

    def subscribe(self) -> None:
        self._gateway.on_quest_started(self._owner, self.log_event)
        self._gateway.on_quest_completed(self._owner, self.log_event)
        self._log.info("Watching quest events for %s", self._owner)

    async def start(self) -> None:
        await self.report_history()
        self.subscribe()


__all__ = ["QuestMonitor", "format_quest_event", "format_units"]
