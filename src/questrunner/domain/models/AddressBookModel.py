from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Mapping

__all__ = ["NONE_KEY", "QuestAddressBook", "UnknownQuestTypeError"]

NONE_KEY = "none"


class UnknownQuestTypeError(KeyError):
    """Raised when a quest type has no contract address in the book."""


@dataclass(frozen=True, slots=True)
class QuestAddressBook:
    """Quest type name -> quest contract address, plus the idle sentinel."""

    none: str
    quests: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, str]) -> "QuestAddressBook":
        if NONE_KEY not in raw:
            raise ValueError("Address book is missing the 'none' sentinel")
        quests = {key: value for key, value in raw.items() if key != NONE_KEY}
        return cls(none=raw[NONE_KEY], quests=quests)

    def __getitem__(self, quest_type: str) -> str:
        try:
            return self.quests[quest_type]
        except KeyError:
            raise UnknownQuestTypeError(quest_type) from None

    def __contains__(self, quest_type: object) -> bool:
        return quest_type in self.quests

    def __iter__(self) -> Iterator[str]:
        return iter(self.quests)

    def quest_type_for(self, address: str) -> str | None:
        """Reverse lookup used when reporting which quest a hero is locked into."""
        wanted = address.lower()
        for quest_type, candidate in self.quests.items():
            if candidate.lower() == wanted:
                return quest_type
        return None
