"""Quest-state reduction and hero allocation for a single scheduling run."""

from .allocate_heroes import allocate_heroes, bucket_for, bucket_heroes, resolve_bucket
from .reduce_active_quests import (
    QuestStateReduction,
    count_questing,
    reduce_active_quests,
)
from .tiers import Tier, first_matching_tier, gardening_tiers, mining_tiers

__all__ = [
    "QuestStateReduction",
    "Tier",
    "allocate_heroes",
    "bucket_for",
    "bucket_heroes",
    "count_questing",
    "first_matching_tier",
    "gardening_tiers",
    "mining_tiers",
    "reduce_active_quests",
    "resolve_bucket",
]
