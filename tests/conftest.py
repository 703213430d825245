from __future__ import annotations

from typing import Any, Optional, Sequence

import pytest

from questrunner.domain.models.AddressBookModel import QuestAddressBook
from questrunner.domain.models.HeroModel import Hero, Profession, TrainingStat
from questrunner.domain.models.QuestModel import ActiveQuest, QuestEvent, QuestLevel
from questrunner.domain.usecase.ports import GatewayReadError

NONE_ADDRESS = "0x0000000000000000000000000000000000000000"

QUEST_TYPES = [
    "fishing",
    "foraging",
    "miningGold",
    "miningLocked",
    "gardeningCrystalEth",
    "gardeningJewelBtc",
    *(stat.value for stat in TrainingStat),
]
QUEST_ADDRESSES = {"none": NONE_ADDRESS}
for _index, _quest_type in enumerate(QUEST_TYPES, start=1):
    QUEST_ADDRESSES[_quest_type] = f"0x{_index:040x}"


def make_hero(
    hero_id: int,
    *,
    stamina: int = 30,
    profession: Profession = Profession.FISHING,
    stat: TrainingStat = TrainingStat.STRENGTH,
    stat_value: int = 10,
    quest_address: str = NONE_ADDRESS,
) -> Hero:
    return Hero(
        hero_id=hero_id,
        current_stamina=stamina,
        profession=profession,
        best_training_stat=stat,
        best_training_stat_value=stat_value,
        quest_address=quest_address,
    )


class RecordingGateway:
    """In-memory quest gateway recording every call it receives."""

    def __init__(
        self,
        *,
        heroes: Sequence[Hero] = (),
        active_quests: Sequence[ActiveQuest] = (),
        completion_result: Any = "rewards",
        fail_reads: bool = False,
        fail_starts_for: Sequence[str] = (),
    ) -> None:
        self.heroes = list(heroes)
        self.active_quests = list(active_quests)
        self.completion_result = completion_result
        self.fail_reads = fail_reads
        self.fail_starts_for = set(fail_starts_for)
        self.completed: list[int] = []
        self.started: list[tuple[tuple[int, ...], str, int, QuestLevel]] = []
        self.started_callbacks: list[Any] = []
        self.completed_callbacks: list[Any] = []
        self.history: list[QuestEvent] = []
        self._addresses = QuestAddressBook.from_mapping(QUEST_ADDRESSES)

    @property
    def addresses(self) -> QuestAddressBook:
        return self._addresses

    async def get_active_quests(self, owner: str) -> list[ActiveQuest]:
        if self.fail_reads:
            raise GatewayReadError("rpc unavailable")
        return list(self.active_quests)

    async def get_heroes(self, owner: str) -> list[Hero]:
        if self.fail_reads:
            raise GatewayReadError("rpc unavailable")
        return list(self.heroes)

    async def complete_quest(self, hero_id: int) -> Optional[Any]:
        self.completed.append(hero_id)
        if isinstance(self.completion_result, Exception):
            raise self.completion_result
        return self.completion_result

    async def start_quest(
        self,
        hero_ids: Sequence[int],
        quest_address: str,
        attempts: int,
        quest_level: QuestLevel,
    ) -> Any:
        quest_type = self._addresses.quest_type_for(quest_address)
        self.started.append((tuple(hero_ids), quest_address, attempts, quest_level))
        if quest_type in self.fail_starts_for:
            raise RuntimeError(f"execution reverted: {quest_type}")
        return {"tx": f"0x{len(self.started):064x}"}

    async def get_quest_completed_events(
        self, owner: str, block_history: int
    ) -> list[QuestEvent]:
        if self.fail_reads:
            raise GatewayReadError("rpc unavailable")
        return list(self.history)

    def on_quest_started(self, owner: str, callback: Any) -> None:
        self.started_callbacks.append(callback)

    def on_quest_completed(self, owner: str, callback: Any) -> None:
        self.completed_callbacks.append(callback)


@pytest.fixture
def addresses() -> QuestAddressBook:
    return QuestAddressBook.from_mapping(QUEST_ADDRESSES)


@pytest.fixture
def hero_factory():
    return make_hero


@pytest.fixture
def gateway_factory():
    return RecordingGateway
