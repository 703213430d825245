from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

__all__ = ["AllocationPolicy", "AttemptRule", "DEFAULT_GARDENING_POOLS"]

DEFAULT_GARDENING_POOLS: tuple[str, ...] = ("gardeningCrystalEth", "gardeningJewelBtc")


class AttemptRule(Enum):
    # floor(min_stamina_to_quest / 5)
    THRESHOLD = "threshold"
    # floor(lowest stamina among the selected heroes / 5)
    SELECTED = "selected"


@dataclass(frozen=True, slots=True)
class AllocationPolicy:
    """Thresholds and overrides steering which heroes go on which quest."""

    min_stamina_to_quest: int = 25
    # Stat boosts are already folded into the hero's best training stat value.
    min_training_stat_value: int = 25
    max_group_size: int = 6
    heroes_required_to_mine_locked: int = 3
    heroes_required_to_mine_gold: int = 6
    heroes_required_to_garden: int = 2
    mining_locked_quest: str = "miningLocked"
    mining_gold_quest: str = "miningGold"
    gardening_pools: tuple[str, ...] = DEFAULT_GARDENING_POOLS
    force_training_hero_ids: frozenset[int] = field(default_factory=frozenset)
    force_profession_hero_ids: frozenset[int] = field(default_factory=frozenset)
    training_attempt_rule: AttemptRule = AttemptRule.THRESHOLD
    stamina_per_attempt: int = 5

    def __post_init__(self) -> None:
        for name in (
            "max_group_size",
            "heroes_required_to_mine_locked",
            "heroes_required_to_mine_gold",
            "heroes_required_to_garden",
            "stamina_per_attempt",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        for name in (
            "heroes_required_to_mine_locked",
            "heroes_required_to_mine_gold",
            "heroes_required_to_garden",
        ):
            if getattr(self, name) > self.max_group_size:
                raise ValueError(
                    f"{name} must not exceed max_group_size ({self.max_group_size})"
                )
        if self.min_stamina_to_quest < 0:
            raise ValueError("min_stamina_to_quest must not be negative")
        object.__setattr__(self, "gardening_pools", tuple(self.gardening_pools))
        object.__setattr__(
            self, "force_training_hero_ids", frozenset(self.force_training_hero_ids)
        )
        object.__setattr__(
            self, "force_profession_hero_ids", frozenset(self.force_profession_hero_ids)
        )

    @property
    def threshold_attempts(self) -> int:
        return self.min_stamina_to_quest // self.stamina_per_attempt
