from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from questrunner.domain.models.HeroModel import Profession, TrainingStat
from questrunner.domain.models.QuestModel import QuestLevel

__all__ = [
    "Allocation",
    "BucketKey",
    "BucketSkip",
    "PlanEntry",
    "ProfessionBucket",
    "QuestingStats",
    "TrainingBucket",
]

# quest type name -> heroes currently held by running quests of that type
QuestingStats = dict[str, int]


@dataclass(frozen=True, slots=True)
class ProfessionBucket:
    profession: Profession

    @property
    def quest_type(self) -> str:
        return self.profession.value

    def __str__(self) -> str:
        return self.quest_type


@dataclass(frozen=True, slots=True)
class TrainingBucket:
    stat: TrainingStat

    @property
    def quest_type(self) -> str:
        return self.stat.value

    def __str__(self) -> str:
        return self.quest_type


BucketKey = Union[ProfessionBucket, TrainingBucket]


@dataclass(frozen=True, slots=True)
class PlanEntry:
    """One start-quest submission decided for this run."""

    hero_ids: tuple[int, ...]
    quest_type: str
    quest_address: str
    attempts: int
    quest_level: QuestLevel


@dataclass(frozen=True, slots=True)
class BucketSkip:
    bucket: BucketKey
    hero_count: int
    reason: str


@dataclass(slots=True)
class Allocation:
    plan: list[PlanEntry] = field(default_factory=lambda: [])
    questing_hero_ids: list[int] = field(default_factory=lambda: [])
    skipped: list[BucketSkip] = field(default_factory=lambda: [])

    @property
    def planned_hero_ids(self) -> list[int]:
        return [hero_id for entry in self.plan for hero_id in entry.hero_ids]
