from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from questrunner.domain.models.PlanModel import QuestingStats
from questrunner.domain.models.QuestModel import ActiveQuest
from questrunner.domain.models.RunReportModel import CompletionOutcome
from questrunner.domain.usecase.ports import QuestGateway

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QuestStateReduction:
    stats: QuestingStats = field(default_factory=lambda: {})
    completions: list[CompletionOutcome] = field(default_factory=lambda: [])


def _add_running(stats: QuestingStats, quest: ActiveQuest) -> None:
    stats[quest.name] = stats.get(quest.name, 0) + len(quest.heroes)


def count_questing(active_quests: Iterable[ActiveQuest]) -> QuestingStats:
    """Heroes held per quest type, ignoring quests that are ready to complete."""
    stats: QuestingStats = {}
    for quest in active_quests:
        if not quest.is_completable:
            _add_running(stats, quest)
    return stats


async def reduce_active_quests(
    gateway: QuestGateway, active_quests: Sequence[ActiveQuest]
) -> QuestStateReduction:
    """Complete finished quests and count the ones still running.

    A completable quest is finished with a single request for its first hero
    and never counted. A completion that yields nothing, or a quest without
    heroes, is logged and left for the next run.
    """
    reduction = QuestStateReduction()
    for quest in active_quests:
        if not quest.is_completable:
            _add_running(reduction.stats, quest)
            continue

        if not quest.heroes:
            logger.warning("Completable %s quest has no heroes; skipping", quest.name)
            reduction.completions.append(
                CompletionOutcome(quest_name=quest.name, hero_id=None, error="no heroes")
            )
            continue

        hero_id = quest.leader_id
        logger.info(
            "completing %s quest for %s on %s",
            quest.name,
            ", ".join(str(h) for h in quest.heroes),
            quest.complete_at.isoformat() if quest.complete_at else "unknown",
        )
        outcome = CompletionOutcome(quest_name=quest.name, hero_id=hero_id)
        try:
            outcome.rewards = await gateway.complete_quest(hero_id)
        except Exception as exc:
            logger.warning(
                "Completing %s quest for hero %s failed",
                quest.name,
                hero_id,
                exc_info=exc,
            )
            outcome.error = str(exc) or exc.__class__.__name__
        else:
            if outcome.rewards is None:
                logger.warning(
                    "Quest %s for hero %s was not completed; will retry next run",
                    quest.name,
                    hero_id,
                )
                outcome.error = "no result"
            else:
                logger.info("Completed %s quest for hero %s", quest.name, hero_id)
        reduction.completions.append(outcome)

    return reduction
