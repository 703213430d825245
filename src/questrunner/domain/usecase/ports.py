from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, Sequence

from questrunner.domain.models.AddressBookModel import (
    QuestAddressBook,
    UnknownQuestTypeError,
)
from questrunner.domain.models.HeroModel import Hero
from questrunner.domain.models.QuestModel import ActiveQuest, QuestEvent, QuestLevel

__all__ = [
    "GatewayReadError",
    "QuestEventCallback",
    "QuestGateway",
    "QuestGatewayError",
    "QuestSubmissionError",
    "UnknownQuestTypeError",
]

QuestEventCallback = Callable[[QuestEvent], None]


class QuestGatewayError(Exception):
    """Base class for failures reported by the quest/hero collaborator."""


class GatewayReadError(QuestGatewayError):
    """Quest or hero state could not be read (transport or contract read)."""


class QuestSubmissionError(QuestGatewayError):
    """The chain rejected a start-quest transaction."""


class QuestGateway(Protocol):
    """Quest, hero and event access for one signer.

    Implementations own the signer and any RPC transport; callers only pass
    game-level identifiers.
    """

    @property
    def addresses(self) -> QuestAddressBook: ...

    async def get_active_quests(self, owner: str) -> list[ActiveQuest]: ...

    async def get_heroes(self, owner: str) -> list[Hero]: ...

    async def complete_quest(self, hero_id: int) -> Optional[Any]: ...

    async def start_quest(
        self,
        hero_ids: Sequence[int],
        quest_address: str,
        attempts: int,
        quest_level: QuestLevel,
    ) -> Any: ...

    async def get_quest_completed_events(
        self, owner: str, block_history: int
    ) -> list[QuestEvent]: ...

    def on_quest_started(self, owner: str, callback: QuestEventCallback) -> None: ...

    def on_quest_completed(self, owner: str, callback: QuestEventCallback) -> None: ...
