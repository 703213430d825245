from __future__ import annotations

import logging
from typing import Iterable, Sequence, Union

from questrunner.domain.models.AddressBookModel import (
    QuestAddressBook,
    UnknownQuestTypeError,
)
from questrunner.domain.models.HeroModel import Hero, Profession
from questrunner.domain.models.PlanModel import (
    Allocation,
    BucketKey,
    BucketSkip,
    PlanEntry,
    ProfessionBucket,
    QuestingStats,
    TrainingBucket,
)
from questrunner.domain.models.PolicyModel import AllocationPolicy, AttemptRule
from questrunner.domain.models.QuestModel import QuestLevel

from .tiers import Tier, first_matching_tier, gardening_tiers, mining_tiers

logger = logging.getLogger(__name__)

QuestBuckets = dict[BucketKey, list[Hero]]
Resolution = Union[PlanEntry, BucketSkip]


def bucket_for(hero: Hero, policy: AllocationPolicy) -> BucketKey:
    """Pick the single bucket an idle hero is considered for this run."""
    if hero.hero_id in policy.force_training_hero_ids:
        return TrainingBucket(hero.best_training_stat)
    if (
        hero.hero_id not in policy.force_profession_hero_ids
        and hero.best_training_stat_value >= policy.min_training_stat_value
    ):
        return TrainingBucket(hero.best_training_stat)
    return ProfessionBucket(hero.profession)


def bucket_heroes(
    heroes: Iterable[Hero], policy: AllocationPolicy, none_address: str
) -> tuple[QuestBuckets, list[int]]:
    """Group rested, idle heroes by bucket and collect the ones already questing.

    Heroes below the stamina threshold are dropped without a trace. Buckets
    and their members keep the order in which heroes were encountered.
    """
    buckets: QuestBuckets = {}
    questing: list[int] = []
    for hero in heroes:
        if hero.current_stamina < policy.min_stamina_to_quest:
            continue
        if not hero.is_idle(none_address):
            questing.append(hero.hero_id)
            continue
        buckets.setdefault(bucket_for(hero, policy), []).append(hero)
    return buckets, questing


def _min_stamina(selected: Sequence[Hero]) -> int:
    return min(hero.current_stamina for hero in selected)


def _entry(
    selected: Sequence[Hero],
    quest_type: str,
    quest_address: str,
    attempts: int,
    quest_level: QuestLevel,
) -> PlanEntry:
    return PlanEntry(
        hero_ids=tuple(hero.hero_id for hero in selected),
        quest_type=quest_type,
        quest_address=quest_address,
        attempts=attempts,
        quest_level=quest_level,
    )


def _resolve_tiered(
    key: BucketKey,
    members: Sequence[Hero],
    tiers: Sequence[Tier],
    stats: QuestingStats,
    addresses: QuestAddressBook,
    *,
    exhausted: str,
) -> Resolution:
    tier = first_matching_tier(tiers, members, stats)
    if tier is None:
        return BucketSkip(key, len(members), exhausted)
    selected = tier.select(members)
    try:
        address = addresses[tier.quest_type]
    except UnknownQuestTypeError:
        return BucketSkip(key, len(members), f"no quest address for {tier.quest_type}")
    return _entry(
        selected,
        tier.quest_type,
        address,
        _min_stamina(selected),
        QuestLevel.PROFESSION,
    )


def _resolve_profession(
    key: ProfessionBucket,
    members: Sequence[Hero],
    stats: QuestingStats,
    policy: AllocationPolicy,
    addresses: QuestAddressBook,
) -> Resolution:
    if key.profession is Profession.MINING:
        tiers = mining_tiers(
            locked_quest=policy.mining_locked_quest,
            locked_size=policy.heroes_required_to_mine_locked,
            gold_quest=policy.mining_gold_quest,
            gold_size=policy.heroes_required_to_mine_gold,
        )
        return _resolve_tiered(
            key, members, tiers, stats, addresses, exhausted="no mining tier available"
        )

    if key.profession is Profession.GARDENING:
        if len(members) < policy.heroes_required_to_garden:
            return BucketSkip(key, len(members), "not enough heroes to garden")
        tiers = gardening_tiers(
            policy.gardening_pools, group_size=policy.heroes_required_to_garden
        )
        return _resolve_tiered(
            key, members, tiers, stats, addresses, exhausted="all gardening pools running"
        )

    # fishing and foraging
    selected = list(members[: policy.max_group_size])
    try:
        address = addresses[key.quest_type]
    except UnknownQuestTypeError:
        return BucketSkip(key, len(members), f"no quest address for {key.quest_type}")
    return _entry(
        selected,
        key.quest_type,
        address,
        policy.threshold_attempts,
        QuestLevel.PROFESSION,
    )


def _resolve_training(
    key: TrainingBucket,
    members: Sequence[Hero],
    policy: AllocationPolicy,
    addresses: QuestAddressBook,
) -> Resolution:
    selected = list(members[: policy.max_group_size])
    try:
        address = addresses[key.quest_type]
    except UnknownQuestTypeError:
        return BucketSkip(key, len(members), f"no quest address for {key.quest_type}")
    if policy.training_attempt_rule is AttemptRule.SELECTED:
        attempts = _min_stamina(selected) // policy.stamina_per_attempt
    else:
        attempts = policy.threshold_attempts
    return _entry(selected, key.quest_type, address, attempts, QuestLevel.TRAINING)


def resolve_bucket(
    key: BucketKey,
    members: Sequence[Hero],
    stats: QuestingStats,
    policy: AllocationPolicy,
    addresses: QuestAddressBook,
) -> Resolution:
    """Turn one bucket into a plan entry, or explain why it sits out this run."""
    if isinstance(key, TrainingBucket):
        return _resolve_training(key, members, policy, addresses)
    if isinstance(key, ProfessionBucket):
        return _resolve_profession(key, members, stats, policy, addresses)
    raise TypeError(f"Unsupported bucket key: {key!r}")


def allocate_heroes(
    heroes: Iterable[Hero],
    stats: QuestingStats,
    policy: AllocationPolicy,
    addresses: QuestAddressBook,
) -> Allocation:
    buckets, questing = bucket_heroes(heroes, policy, addresses.none)
    allocation = Allocation(questing_hero_ids=questing)

    for key, members in buckets.items():
        logger.info("%d heroes ready for %s quest", len(members), key)
        resolution = resolve_bucket(key, members, stats, policy, addresses)
        if isinstance(resolution, BucketSkip):
            log_level = (
                logging.WARNING
                if resolution.reason.startswith("no quest address")
                else logging.INFO
            )
            logger.log(
                log_level,
                "Skipping %s quest: %s",
                key,
                resolution.reason,
                extra={"bucket": str(key), "hero_count": resolution.hero_count},
            )
            allocation.skipped.append(resolution)
            continue
        allocation.plan.append(resolution)

    return allocation


__all__ = [
    "QuestBuckets",
    "allocate_heroes",
    "bucket_for",
    "bucket_heroes",
    "resolve_bucket",
]
