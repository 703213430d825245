from .AddressBookModel import NONE_KEY, QuestAddressBook, UnknownQuestTypeError
from .HeroModel import Hero, Profession, TrainingStat
from .PolicyModel import DEFAULT_GARDENING_POOLS, AllocationPolicy, AttemptRule
from .PlanModel import (
    Allocation,
    BucketKey,
    BucketSkip,
    PlanEntry,
    ProfessionBucket,
    QuestingStats,
    TrainingBucket,
)
from .QuestModel import (
    ActiveQuest,
    QuestEvent,
    QuestEventStatus,
    QuestLevel,
    QuestReward,
    RewardItem,
)
from .RunReportModel import CompletionOutcome, RunReport, SubmissionOutcome

__all__ = [
    "ActiveQuest",
    "AllocationPolicy",
    "AttemptRule",
    "DEFAULT_GARDENING_POOLS",
    "Allocation",
    "BucketKey",
    "BucketSkip",
    "CompletionOutcome",
    "Hero",
    "NONE_KEY",
    "PlanEntry",
    "Profession",
    "ProfessionBucket",
    "QuestAddressBook",
    "QuestEvent",
    "QuestEventStatus",
    "QuestLevel",
    "QuestReward",
    "QuestingStats",
    "RewardItem",
    "RunReport",
    "SubmissionOutcome",
    "TrainingBucket",
    "TrainingStat",
    "UnknownQuestTypeError",
]
