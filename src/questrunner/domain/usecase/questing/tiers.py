from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar

from questrunner.domain.models.PlanModel import QuestingStats

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Tier:
    """A quest a bucket may be sent on, given enough heroes and a free slot.

    Tiers are evaluated in priority order; the first one that matches wins.
    """

    name: str
    quest_type: str
    group_size: int

    def matches(self, members: Sequence[object], stats: QuestingStats) -> bool:
        if len(members) < self.group_size:
            return False
        return not stats.get(self.quest_type)

    def select(self, members: Sequence[T]) -> list[T]:
        return list(members[: self.group_size])


def first_matching_tier(
    tiers: Sequence[Tier], members: Sequence[object], stats: QuestingStats
) -> Optional[Tier]:
    for tier in tiers:
        if tier.matches(members, stats):
            return tier
    return None


def mining_tiers(
    *,
    locked_quest: str,
    locked_size: int,
    gold_quest: str,
    gold_size: int,
) -> tuple[Tier, ...]:
    # Locked tokens take priority over gold.
    return (
        Tier(name="locked", quest_type=locked_quest, group_size=locked_size),
        Tier(name="gold", quest_type=gold_quest, group_size=gold_size),
    )


def gardening_tiers(pools: Sequence[str], *, group_size: int) -> tuple[Tier, ...]:
    return tuple(
        Tier(name=pool, quest_type=pool, group_size=group_size) for pool in pools
    )


__all__ = ["Tier", "first_matching_tier", "gardening_tiers", "mining_tiers"]
