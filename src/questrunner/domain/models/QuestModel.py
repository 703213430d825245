from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

__all__ = [
    "ActiveQuest",
    "QuestEvent",
    "QuestEventStatus",
    "QuestLevel",
    "QuestReward",
    "RewardItem",
]


class QuestLevel(Enum):
    PROFESSION = 0
    TRAINING = 1


class QuestEventStatus(Enum):
    START = 1
    COMPLETE = 2

    @property
    def label(self) -> str:
        return "Start" if self is QuestEventStatus.START else "Complete"


def _ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(slots=True)
class ActiveQuest:
    # Quest type name, e.g. "fishing" or "miningLocked"
    name: str
    heroes: list[int]
    start_at: Optional[datetime] = None
    complete_at: Optional[datetime] = None
    is_completable: bool = False
    attempts: int = 0
    rewards: Optional[list[QuestReward]] = None

    def __post_init__(self) -> None:
        self.heroes = list(self.heroes)
        self.start_at = _ensure_utc(self.start_at)
        self.complete_at = _ensure_utc(self.complete_at)

    @property
    def leader_id(self) -> int:
        """Hero id the chain expects when completing the quest."""
        if not self.heroes:
            raise ValueError(f"Active quest {self.name} has no heroes")
        return self.heroes[0]


@dataclass(slots=True)
class RewardItem:
    name: str
    amount: int
    decimals: int = 0


@dataclass(slots=True)
class QuestReward:
    hero_id: int
    xp: int
    skill_up: int
    items: list[RewardItem] = field(default_factory=lambda: [])


@dataclass(slots=True)
class QuestEvent:
    status: QuestEventStatus
    name: str
    heroes: list[int]
    attempts: int
    start_at: Optional[datetime] = None
    complete_at: Optional[datetime] = None
    rewards: Optional[list[QuestReward]] = None

    def __post_init__(self) -> None:
        self.heroes = list(self.heroes)
        self.start_at = _ensure_utc(self.start_at)
        self.complete_at = _ensure_utc(self.complete_at)
