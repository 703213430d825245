from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ["Hero", "Profession", "TrainingStat"]


class Profession(Enum):
    MINING = "mining"
    GARDENING = "gardening"
    FISHING = "fishing"
    FORAGING = "foraging"


class TrainingStat(Enum):
    STRENGTH = "strength"
    AGILITY = "agility"
    ENDURANCE = "endurance"
    WISDOM = "wisdom"
    DEXTERITY = "dexterity"
    VITALITY = "vitality"
    INTELLIGENCE = "intelligence"
    LUCK = "luck"


@dataclass(frozen=True, slots=True)
class Hero:
    """Read-only snapshot of a hero as reported by the chain for one run."""

    hero_id: int
    current_stamina: int
    profession: Profession
    best_training_stat: TrainingStat
    best_training_stat_value: int
    quest_address: str

    def __post_init__(self) -> None:
        if self.current_stamina < 0:
            raise ValueError(f"Hero {self.hero_id} has negative stamina")

    def is_idle(self, none_address: str) -> bool:
        return self.quest_address.lower() == none_address.lower()
