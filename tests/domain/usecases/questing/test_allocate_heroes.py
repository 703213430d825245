from __future__ import annotations

import logging

import pytest

from questrunner.domain.models.AddressBookModel import QuestAddressBook
from questrunner.domain.models.HeroModel import Profession, TrainingStat
from questrunner.domain.models.PlanModel import ProfessionBucket, TrainingBucket
from questrunner.domain.models.PolicyModel import AllocationPolicy, AttemptRule
from questrunner.domain.models.QuestModel import QuestLevel
from questrunner.domain.usecase.questing.allocate_heroes import (
    allocate_heroes,
    bucket_for,
    bucket_heroes,
)

MINING = Profession.MINING
GARDENING = Profession.GARDENING
FISHING = Profession.FISHING
FORAGING = Profession.FORAGING


def test_low_stamina_heroes_are_left_out_of_every_bucket(hero_factory, addresses):
    heroes = [
        hero_factory(1, stamina=24),
        hero_factory(2, stamina=0, stat_value=80),
        hero_factory(3, stamina=24, profession=MINING),
    ]

    buckets, questing = bucket_heroes(heroes, AllocationPolicy(), addresses.none)
    allocation = allocate_heroes(heroes, {}, AllocationPolicy(), addresses)

    assert buckets == {}
    assert questing == []
    assert allocation.plan == []
    assert allocation.skipped == []


def test_questing_heroes_are_reported_but_never_planned(hero_factory, addresses):
    busy = addresses["fishing"]
    heroes = [hero_factory(i, quest_address=busy) for i in range(1, 4)]
    heroes += [hero_factory(i) for i in range(4, 6)]

    allocation = allocate_heroes(heroes, {}, AllocationPolicy(), addresses)

    assert allocation.questing_hero_ids == [1, 2, 3]
    assert allocation.planned_hero_ids == [4, 5]


def test_nine_heroes_yield_fishing_and_locked_mining_entries(hero_factory, addresses):
    heroes = [hero_factory(i, stamina=30, profession=FISHING) for i in range(1, 7)]
    heroes += [hero_factory(i, stamina=30, profession=MINING) for i in range(7, 10)]
    policy = AllocationPolicy(heroes_required_to_mine_locked=3)

    allocation = allocate_heroes(heroes, {}, policy, addresses)

    assert len(allocation.plan) == 2
    fishing, mining = allocation.plan
    assert fishing.hero_ids == (1, 2, 3, 4, 5, 6)
    assert fishing.quest_address == addresses["fishing"]
    assert fishing.attempts == 25 // 5
    assert fishing.quest_level is QuestLevel.PROFESSION

    assert mining.hero_ids == (7, 8, 9)
    assert mining.quest_type == "miningLocked"
    assert mining.quest_address == addresses["miningLocked"]
    assert mining.attempts == 30
    assert mining.quest_level is QuestLevel.PROFESSION


def test_mining_one_short_of_locked_and_gold_is_skipped(hero_factory, addresses):
    policy = AllocationPolicy(
        heroes_required_to_mine_locked=3, heroes_required_to_mine_gold=6
    )
    heroes = [hero_factory(i, profession=MINING) for i in range(1, 3)]

    allocation = allocate_heroes(heroes, {}, policy, addresses)

    assert allocation.plan == []
    assert len(allocation.skipped) == 1
    assert allocation.skipped[0].bucket == ProfessionBucket(MINING)
    assert allocation.skipped[0].hero_count == 2


def test_mining_falls_back_to_gold_when_locked_is_running(hero_factory, addresses):
    policy = AllocationPolicy(
        heroes_required_to_mine_locked=3, heroes_required_to_mine_gold=4
    )
    heroes = [
        hero_factory(i, stamina=20 + i * 5, profession=MINING) for i in range(1, 7)
    ]
    stats = {"miningLocked": 3}

    allocation = allocate_heroes(heroes, stats, policy, addresses)

    assert len(allocation.plan) == 1
    entry = allocation.plan[0]
    assert entry.quest_type == "miningGold"
    # the gold tier takes exactly its own group size
    assert entry.hero_ids == (1, 2, 3, 4)
    assert entry.attempts == 25


def test_mining_skipped_when_both_tiers_are_running(hero_factory, addresses):
    heroes = [hero_factory(i, profession=MINING) for i in range(1, 8)]
    stats = {"miningLocked": 3, "miningGold": 6}

    allocation = allocate_heroes(heroes, stats, AllocationPolicy(), addresses)

    assert allocation.plan == []


def test_gardening_uses_lowest_stamina_of_the_pair(hero_factory, addresses):
    heroes = [
        hero_factory(1, stamina=25, profession=GARDENING),
        hero_factory(2, stamina=40, profession=GARDENING),
    ]

    allocation = allocate_heroes(heroes, {}, AllocationPolicy(), addresses)

    assert len(allocation.plan) == 1
    entry = allocation.plan[0]
    assert entry.quest_type == "gardeningCrystalEth"
    assert entry.hero_ids == (1, 2)
    assert entry.attempts == 25
    assert entry.quest_level is QuestLevel.PROFESSION


def test_gardening_moves_to_next_pool_when_first_is_running(hero_factory, addresses):
    heroes = [hero_factory(i, profession=GARDENING) for i in range(1, 5)]

    allocation = allocate_heroes(
        heroes, {"gardeningCrystalEth": 2}, AllocationPolicy(), addresses
    )

    assert [entry.quest_type for entry in allocation.plan] == ["gardeningJewelBtc"]
    assert allocation.plan[0].hero_ids == (1, 2)


def test_gardening_skipped_when_every_pool_is_running(hero_factory, addresses):
    heroes = [hero_factory(i, profession=GARDENING) for i in range(1, 4)]
    stats = {"gardeningCrystalEth": 2, "gardeningJewelBtc": 2}

    allocation = allocate_heroes(heroes, stats, AllocationPolicy(), addresses)

    assert allocation.plan == []
    assert allocation.skipped[0].reason == "all gardening pools running"


def test_single_gardener_is_skipped(hero_factory, addresses):
    allocation = allocate_heroes(
        [hero_factory(1, profession=GARDENING)], {}, AllocationPolicy(), addresses
    )

    assert allocation.plan == []
    assert allocation.skipped[0].reason == "not enough heroes to garden"


def test_gardening_pool_order_follows_policy(hero_factory, addresses):
    policy = AllocationPolicy(gardening_pools=("gardeningJewelBtc", "gardeningCrystalEth"))
    heroes = [hero_factory(i, profession=GARDENING) for i in range(1, 3)]

    allocation = allocate_heroes(heroes, {}, policy, addresses)

    assert allocation.plan[0].quest_type == "gardeningJewelBtc"


def test_profession_buckets_are_capped_in_encounter_order(hero_factory, addresses):
    heroes = [hero_factory(i, profession=FORAGING) for i in range(10, 2, -1)]

    allocation = allocate_heroes(heroes, {}, AllocationPolicy(), addresses)

    assert allocation.plan[0].quest_type == "foraging"
    assert allocation.plan[0].hero_ids == (10, 9, 8, 7, 6, 5)


def test_fishing_is_started_even_if_already_running(hero_factory, addresses):
    heroes = [hero_factory(1, profession=FISHING)]

    allocation = allocate_heroes(heroes, {"fishing": 6}, AllocationPolicy(), addresses)

    assert allocation.planned_hero_ids == [1]


def test_training_buckets_are_keyed_by_best_stat(hero_factory, addresses):
    heroes = [
        hero_factory(1, stat=TrainingStat.WISDOM, stat_value=30),
        hero_factory(2, stat=TrainingStat.LUCK, stat_value=25),
        hero_factory(3, stat=TrainingStat.WISDOM, stat_value=40, profession=MINING),
        hero_factory(4, stat=TrainingStat.LUCK, stat_value=24),
    ]

    allocation = allocate_heroes(heroes, {}, AllocationPolicy(), addresses)

    by_type = {entry.quest_type: entry for entry in allocation.plan}
    assert list(by_type) == ["wisdom", "luck", "fishing"]
    assert by_type["wisdom"].hero_ids == (1, 3)
    assert by_type["wisdom"].quest_level is QuestLevel.TRAINING
    assert by_type["wisdom"].attempts == 5
    assert by_type["luck"].hero_ids == (2,)
    assert by_type["fishing"].hero_ids == (4,)


def test_training_attempts_can_follow_selected_stamina(hero_factory, addresses):
    policy = AllocationPolicy(training_attempt_rule=AttemptRule.SELECTED)
    heroes = [
        hero_factory(1, stamina=42, stat_value=50),
        hero_factory(2, stamina=37, stat_value=50),
    ]

    allocation = allocate_heroes(heroes, {}, policy, addresses)

    assert allocation.plan[0].attempts == 37 // 5


def test_training_bucket_is_capped(hero_factory, addresses):
    heroes = [hero_factory(i, stat_value=60) for i in range(1, 9)]

    allocation = allocate_heroes(heroes, {}, AllocationPolicy(), addresses)

    assert allocation.plan[0].hero_ids == (1, 2, 3, 4, 5, 6)


@pytest.mark.parametrize(
    ("hero_id", "expected"),
    [
        (1, TrainingBucket(TrainingStat.DEXTERITY)),
        (2, ProfessionBucket(GARDENING)),
        (3, ProfessionBucket(GARDENING)),
    ],
)
def test_override_lists_force_buckets(hero_factory, hero_id, expected):
    policy = AllocationPolicy(
        force_training_hero_ids=frozenset({1}),
        force_profession_hero_ids=frozenset({2}),
    )
    stat_values = {1: 5, 2: 90, 3: 5}
    hero = hero_factory(
        hero_id,
        profession=GARDENING,
        stat=TrainingStat.DEXTERITY,
        stat_value=stat_values[hero_id],
    )

    assert bucket_for(hero, policy) == expected


def test_bucket_without_quest_address_is_skipped(hero_factory, addresses, caplog):
    book = QuestAddressBook.from_mapping(
        {"none": addresses.none, "fishing": addresses["fishing"]}
    )
    heroes = [hero_factory(1, profession=FORAGING), hero_factory(2, profession=FISHING)]

    with caplog.at_level(logging.INFO):
        allocation = allocate_heroes(heroes, {}, AllocationPolicy(), book)

    assert allocation.planned_hero_ids == [2]
    assert allocation.skipped[0].reason == "no quest address for foraging"
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert [r.getMessage() for r in warnings] == [
        "Skipping foraging quest: no quest address for foraging"
    ]


def test_training_and_mining_buckets_without_quest_address_are_skipped(
    hero_factory, addresses
):
    book = QuestAddressBook.from_mapping({"none": addresses.none})
    heroes = [hero_factory(1, stat_value=40)]
    heroes += [hero_factory(i, profession=MINING) for i in range(2, 5)]

    allocation = allocate_heroes(heroes, {}, AllocationPolicy(), book)

    assert allocation.plan == []
    assert [s.reason for s in allocation.skipped] == [
        "no quest address for strength",
        "no quest address for miningLocked",
    ]


def test_mining_groups_never_exceed_the_group_cap(hero_factory, addresses):
    heroes = [hero_factory(i, profession=MINING) for i in range(1, 11)]

    allocation = allocate_heroes(
        heroes, {"miningLocked": 3}, AllocationPolicy(), addresses
    )

    assert len(allocation.plan) == 1
    entry = allocation.plan[0]
    assert entry.quest_type == "miningGold"
    assert entry.hero_ids == (1, 2, 3, 4, 5, 6)


def test_skipped_buckets_are_not_logged_as_errors(hero_factory, addresses, caplog):
    heroes = [hero_factory(1, profession=MINING), hero_factory(2, profession=GARDENING)]

    with caplog.at_level(logging.DEBUG):
        allocation = allocate_heroes(heroes, {}, AllocationPolicy(), addresses)

    assert len(allocation.skipped) == 2
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
