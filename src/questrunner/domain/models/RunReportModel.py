from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from questrunner.domain.models.PlanModel import Allocation, PlanEntry, QuestingStats

__all__ = ["CompletionOutcome", "RunReport", "SubmissionOutcome"]


@dataclass(slots=True)
class CompletionOutcome:
    quest_name: str
    hero_id: Optional[int]
    rewards: Optional[Any] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.rewards is not None


@dataclass(slots=True)
class SubmissionOutcome:
    entry: PlanEntry
    result: Optional[Any] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class RunReport:
    owner_address: str
    stats: QuestingStats = field(default_factory=lambda: {})
    completions: list[CompletionOutcome] = field(default_factory=lambda: [])
    allocation: Allocation = field(default_factory=Allocation)
    submissions: list[SubmissionOutcome] = field(default_factory=lambda: [])

    @property
    def failed_submissions(self) -> list[SubmissionOutcome]:
        return [outcome for outcome in self.submissions if not outcome.succeeded]

    def summary_lines(self) -> list[str]:
        """Per-run textual summary: counts per quest type and submission results."""
        lines: list[str] = []
        if self.stats:
            counts = ", ".join(f"{name}: {count}" for name, count in self.stats.items())
        else:
            counts = "none"
        lines.append(f"Active quest counts: {counts}")

        for completion in self.completions:
            state = "completed" if completion.succeeded else "not completed"
            if completion.hero_id is None:
                lines.append(f"{completion.quest_name} quest without heroes {state}")
                continue
            lines.append(
                f"{completion.quest_name} quest for hero {completion.hero_id} {state}"
            )

        for outcome in self.submissions:
            entry = outcome.entry
            heroes = ", ".join(str(hero_id) for hero_id in entry.hero_ids)
            if outcome.succeeded:
                lines.append(
                    f"Started {entry.quest_type} x{entry.attempts} for heroes {heroes}"
                )
            else:
                lines.append(
                    f"Failed to start {entry.quest_type} for heroes {heroes}: {outcome.error}"
                )

        for skip in self.allocation.skipped:
            lines.append(f"Skipped {skip.bucket} ({skip.hero_count} heroes): {skip.reason}")

        lines.append(
            f"{len(self.allocation.questing_hero_ids)} currently questing heroes"
        )
        return lines
