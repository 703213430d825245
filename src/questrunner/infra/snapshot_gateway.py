from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from questrunner.domain.models.AddressBookModel import QuestAddressBook
from questrunner.domain.models.HeroModel import Hero
from questrunner.domain.models.QuestModel import (
    ActiveQuest,
    QuestEvent,
    QuestEventStatus,
    QuestLevel,
)
from questrunner.domain.usecase.ports import (
    GatewayReadError,
    QuestEventCallback,
    QuestSubmissionError,
)
from questrunner.infra.serialization import from_document

logger = logging.getLogger(__name__)

# Seconds a started quest stays active per attempt when the snapshot does not say.
DEFAULT_SECONDS_PER_ATTEMPT = 600


@dataclass(slots=True)
class OwnerSnapshot:
    heroes: list[Hero] = field(default_factory=lambda: [])
    active_quests: list[ActiveQuest] = field(default_factory=lambda: [])
    completed_events: list[QuestEvent] = field(default_factory=lambda: [])


@dataclass(slots=True)
class GatewayCall:
    method: str
    args: tuple[Any, ...]


class SnapshotQuestGateway:
    """Quest gateway backed by an in-memory snapshot of chain state.

    Serves heroes and active quests loaded from a JSON document, applies
    start/complete requests to that state the way the chain would, and records
    every call. Nothing is signed or broadcast.
    """

    def __init__(
        self,
        *,
        addresses: QuestAddressBook,
        owners: Mapping[str, OwnerSnapshot] | None = None,
        seconds_per_attempt: int = DEFAULT_SECONDS_PER_ATTEMPT,
        clock: Any = None,
    ) -> None:
        self._addresses = addresses
        self._owners: dict[str, OwnerSnapshot] = {
            owner.lower(): snapshot for owner, snapshot in (owners or {}).items()
        }
        self._seconds_per_attempt = seconds_per_attempt
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._started_callbacks: dict[str, list[QuestEventCallback]] = {}
        self._completed_callbacks: dict[str, list[QuestEventCallback]] = {}
        self.calls: list[GatewayCall] = []

    # ------- Loading -------
    @classmethod
    def from_document(
        cls, document: Mapping[str, Any], **kwargs: Any
    ) -> "SnapshotQuestGateway":
        raw_addresses = document.get("addresses")
        if not isinstance(raw_addresses, Mapping):
            raise ValueError("Snapshot is missing an 'addresses' object")
        addresses = QuestAddressBook.from_mapping(raw_addresses)

        owners: dict[str, OwnerSnapshot] = {}
        for owner, raw in (document.get("owners") or {}).items():
            owners[owner] = OwnerSnapshot(
                heroes=[from_document(Hero, h) for h in raw.get("heroes", [])],
                active_quests=[
                    from_document(ActiveQuest, q) for q in raw.get("active_quests", [])
                ],
                completed_events=[
                    from_document(QuestEvent, e)
                    for e in raw.get("completed_events", [])
                ],
            )
        return cls(addresses=addresses, owners=owners, **kwargs)

    @classmethod
    def from_path(cls, path: Path | str, **kwargs: Any) -> "SnapshotQuestGateway":
        path = Path(path)
        with path.open("r", encoding="utf-8") as handle:
            document = json.load(handle)
        logger.info("Loaded quest snapshot from %s", path)
        return cls.from_document(document, **kwargs)

    # ------- Reads -------
    @property
    def addresses(self) -> QuestAddressBook:
        return self._addresses

    def _owner(self, owner: str) -> OwnerSnapshot:
        snapshot = self._owners.get(owner.lower())
        if snapshot is None:
            raise GatewayReadError(f"No snapshot for owner {owner}")
        return snapshot

    def _refresh_completable(self, snapshot: OwnerSnapshot) -> None:
        now = self._clock()
        for quest in snapshot.active_quests:
            if not quest.is_completable and quest.complete_at and quest.complete_at <= now:
                quest.is_completable = True

    async def get_active_quests(self, owner: str) -> list[ActiveQuest]:
        self.calls.append(GatewayCall("get_active_quests", (owner,)))
        snapshot = self._owner(owner)
        self._refresh_completable(snapshot)
        return list(snapshot.active_quests)

    async def get_heroes(self, owner: str) -> list[Hero]:
        self.calls.append(GatewayCall("get_heroes", (owner,)))
        return list(self._owner(owner).heroes)

    async def get_quest_completed_events(
        self, owner: str, block_history: int
    ) -> list[QuestEvent]:
        self.calls.append(
            GatewayCall("get_quest_completed_events", (owner, block_history))
        )
        return list(self._owner(owner).completed_events)

    # ------- Writes -------
    def _find_owner_of(self, hero_id: int) -> tuple[str, OwnerSnapshot, int]:
        for owner, snapshot in self._owners.items():
            for index, hero in enumerate(snapshot.heroes):
                if hero.hero_id == hero_id:
                    return owner, snapshot, index
        raise QuestSubmissionError(f"Hero {hero_id} is not owned by this wallet")

    async def complete_quest(self, hero_id: int) -> Optional[Any]:
        self.calls.append(GatewayCall("complete_quest", (hero_id,)))
        for owner, snapshot in self._owners.items():
            for quest in snapshot.active_quests:
                if hero_id not in quest.heroes:
                    continue
                if not quest.is_completable:
                    logger.debug("Quest %s for hero %s not finished yet", quest.name, hero_id)
                    return None
                snapshot.active_quests.remove(quest)
                for index, hero in enumerate(snapshot.heroes):
                    if hero.hero_id in quest.heroes:
                        snapshot.heroes[index] = replace(
                            hero, quest_address=self._addresses.none
                        )
                rewards = quest.rewards if quest.rewards is not None else []
                self._emit(
                    self._completed_callbacks,
                    owner,
                    QuestEvent(
                        status=QuestEventStatus.COMPLETE,
                        name=quest.name,
                        heroes=quest.heroes,
                        attempts=quest.attempts,
                        start_at=quest.start_at,
                        complete_at=quest.complete_at,
                        rewards=quest.rewards,
                    ),
                )
                return rewards
        return None

    async def start_quest(
        self,
        hero_ids: Sequence[int],
        quest_address: str,
        attempts: int,
        quest_level: QuestLevel,
    ) -> Any:
        self.calls.append(
            GatewayCall(
                "start_quest", (tuple(hero_ids), quest_address, attempts, quest_level)
            )
        )
        if not hero_ids:
            raise QuestSubmissionError("No heroes given")
        if attempts <= 0:
            raise QuestSubmissionError(f"Invalid attempt count {attempts}")
        quest_type = self._addresses.quest_type_for(quest_address)
        if quest_type is None:
            raise QuestSubmissionError(f"Unknown quest address {quest_address}")

        located = [self._find_owner_of(hero_id) for hero_id in hero_ids]
        owners = {owner for owner, _, _ in located}
        if len(owners) != 1:
            raise QuestSubmissionError("Heroes belong to different wallets")
        for _, snapshot, index in located:
            hero = snapshot.heroes[index]
            if not hero.is_idle(self._addresses.none):
                raise QuestSubmissionError(f"Hero {hero.hero_id} is already questing")

        owner = owners.pop()
        snapshot = self._owners[owner]
        for _, _, index in located:
            snapshot.heroes[index] = replace(
                snapshot.heroes[index], quest_address=quest_address
            )
        start_at = self._clock()
        quest = ActiveQuest(
            name=quest_type,
            heroes=list(hero_ids),
            start_at=start_at,
            complete_at=start_at
            + timedelta(seconds=self._seconds_per_attempt * attempts),
            attempts=attempts,
        )
        snapshot.active_quests.append(quest)
        self._emit(
            self._started_callbacks,
            owner,
            QuestEvent(
                status=QuestEventStatus.START,
                name=quest.name,
                heroes=quest.heroes,
                attempts=attempts,
                start_at=quest.start_at,
                complete_at=quest.complete_at,
            ),
        )
        return {"quest": quest_type, "heroes": list(hero_ids), "level": quest_level.value}

    # ------- Events -------
    def on_quest_started(self, owner: str, callback: QuestEventCallback) -> None:
        self._started_callbacks.setdefault(owner.lower(), []).append(callback)

    def on_quest_completed(self, owner: str, callback: QuestEventCallback) -> None:
        self._completed_callbacks.setdefault(owner.lower(), []).append(callback)

    def _emit(
        self,
        registry: dict[str, list[QuestEventCallback]],
        owner: str,
        event: QuestEvent,
    ) -> None:
        for callback in registry.get(owner.lower(), []):
            try:
                callback(event)
            except Exception:
                logger.exception("Quest event callback failed for %s", owner)

    def emit_started(self, owner: str, event: QuestEvent) -> None:
        self._emit(self._started_callbacks, owner, event)

    def emit_completed(self, owner: str, event: QuestEvent) -> None:
        self._emit(self._completed_callbacks, owner, event)


__all__ = ["GatewayCall", "OwnerSnapshot", "SnapshotQuestGateway"]
