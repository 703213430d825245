from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from questrunner.domain.models.PlanModel import PlanEntry
from questrunner.domain.models.PolicyModel import AllocationPolicy
from questrunner.domain.models.RunReportModel import RunReport, SubmissionOutcome
from questrunner.domain.usecase.ports import QuestGateway
from questrunner.domain.usecase.questing import allocate_heroes, reduce_active_quests

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .run_notifier import DiscordRunNotifier


class QuestRunnerService:
    """Runs one read-decide-act questing cycle for an owner address."""

    def __init__(
        self,
        *,
        gateway: QuestGateway,
        owner_address: str,
        policy: AllocationPolicy,
        logger: logging.Logger | None = None,
        notifier: "DiscordRunNotifier | None" = None,
    ) -> None:
        self._gateway = gateway
        self._owner = owner_address
        self._policy = policy
        self._log = logger or logging.getLogger(__name__)
        self._notifier = notifier

    async def run(self) -> RunReport:
        """Complete finished quests, then start new ones.

        Read failures propagate before anything is submitted. Completion and
        submission failures are logged and recorded in the report.
        """
        report = RunReport(owner_address=self._owner)

        active_quests = await self._gateway.get_active_quests(self._owner)
        reduction = await reduce_active_quests(self._gateway, active_quests)
        report.stats = reduction.stats
        report.completions = reduction.completions
        self._log.info("Active Quest Counts %s", reduction.stats or "{}")

        heroes = await self._gateway.get_heroes(self._owner)
        report.allocation = allocate_heroes(
            heroes, reduction.stats, self._policy, self._gateway.addresses
        )

        for entry in report.allocation.plan:
            report.submissions.append(await self._submit(entry))

        self._log.info(
            "%d currently questing heroes", len(report.allocation.questing_hero_ids)
        )
        if report.failed_submissions:
            self._log.warning(
                "%d of %d quest starts failed",
                len(report.failed_submissions),
                len(report.submissions),
            )

        if self._notifier is not None:
            await self._notifier.send_report(report)
        return report

    async def _submit(self, entry: PlanEntry) -> SubmissionOutcome:
        extra = {
            "quest_type": entry.quest_type,
            "hero_ids": list(entry.hero_ids),
            "attempts": entry.attempts,
            "quest_level": entry.quest_level.value,
        }
        try:
            result = await self._gateway.start_quest(
                entry.hero_ids, entry.quest_address, entry.attempts, entry.quest_level
            )
        except Exception as exc:
            self._log.exception(
                "Failed to start %s quest for heroes %s",
                entry.quest_type,
                ", ".join(str(h) for h in entry.hero_ids),
                extra=extra,
            )
            return SubmissionOutcome(entry=entry, error=str(exc) or exc.__class__.__name__)

        self._log.info(
            "Started %s quest for heroes %s (%d attempts)",
            entry.quest_type,
            ", ".join(str(h) for h in entry.hero_ids),
            entry.attempts,
            extra=extra,
        )
        return SubmissionOutcome(entry=entry, result=result)


__all__ = ["QuestRunnerService"]
