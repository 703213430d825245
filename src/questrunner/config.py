from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from questrunner.domain.models.PolicyModel import (
    DEFAULT_GARDENING_POOLS,
    AllocationPolicy,
    AttemptRule,
)

# Public RPCs cap event history at roughly 2048 blocks.
DEFAULT_BLOCK_HISTORY = 2000


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


@dataclass(frozen=True, slots=True)
class QuestRunnerConfig:
    """Runtime configuration for the quest runner and monitor."""

    owner_address: str
    rpc_url: str
    snapshot_path: Optional[Path]
    webhook_url: Optional[str]
    block_history: int
    policy: AllocationPolicy


def _require(key: str) -> str:
    value = os.getenv(key)
    if not value or not value.strip():
        raise ConfigError(f"Missing required environment variable: {key}")
    return value.strip()


def _env_optional(key: str) -> Optional[str]:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from None


def _env_list(key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(key)
    if raw is None:
        return default
    parts = [segment.strip() for segment in raw.split(",")]
    filtered = tuple(part for part in parts if part)
    return filtered or default


def _env_int_set(key: str) -> frozenset[int]:
    values: set[int] = set()
    for part in _env_list(key, ()):
        try:
            values.add(int(part, 0))
        except ValueError:
            raise ConfigError(f"{key} contains a non-numeric hero id: {part!r}") from None
    return frozenset(values)


def _env_attempt_rule(key: str) -> AttemptRule:
    raw = _env_optional(key)
    if raw is None:
        return AttemptRule.THRESHOLD
    try:
        return AttemptRule(raw.lower())
    except ValueError:
        options = ", ".join(rule.value for rule in AttemptRule)
        raise ConfigError(f"{key} must be one of: {options}") from None


def load_policy() -> AllocationPolicy:
    """Build the allocation policy from environment variables."""
    defaults = AllocationPolicy()
    force_training = _env_int_set("FORCE_TRAINING_HERO_IDS")
    force_profession = _env_int_set("FORCE_PROFESSION_HERO_IDS")
    overlap = force_training & force_profession
    if overlap:
        ids = ", ".join(str(hero_id) for hero_id in sorted(overlap))
        raise ConfigError(f"Heroes forced into both training and profession: {ids}")
    try:
        return AllocationPolicy(
            min_stamina_to_quest=_env_int(
                "MIN_STAMINA_TO_QUEST", defaults.min_stamina_to_quest
            ),
            min_training_stat_value=_env_int(
                "MIN_TRAINING_STAT_VALUE", defaults.min_training_stat_value
            ),
            max_group_size=_env_int("MAX_QUEST_GROUP_SIZE", defaults.max_group_size),
            heroes_required_to_mine_locked=_env_int(
                "HEROES_REQUIRED_TO_MINE_LOCKED",
                defaults.heroes_required_to_mine_locked,
            ),
            heroes_required_to_mine_gold=_env_int(
                "HEROES_REQUIRED_TO_MINE_GOLD", defaults.heroes_required_to_mine_gold
            ),
            heroes_required_to_garden=_env_int(
                "HEROES_REQUIRED_TO_GARDEN", defaults.heroes_required_to_garden
            ),
            gardening_pools=_env_list("GARDENING_POOLS", DEFAULT_GARDENING_POOLS),
            force_training_hero_ids=force_training,
            force_profession_hero_ids=force_profession,
            training_attempt_rule=_env_attempt_rule("TRAINING_ATTEMPT_RULE"),
        )
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc


def load_config() -> QuestRunnerConfig:
    """Load configuration from the environment, reading ``.env`` first."""
    load_dotenv()

    snapshot = _env_optional("QUEST_SNAPSHOT_PATH")
    block_history = abs(_env_int("BLOCK_HISTORY", DEFAULT_BLOCK_HISTORY))
    return QuestRunnerConfig(
        owner_address=_require("OWNER_ADDRESS"),
        rpc_url=os.getenv("RPC_URL", "").strip(),
        snapshot_path=Path(snapshot) if snapshot else None,
        webhook_url=_env_optional("DISCORD_WEBHOOK_URL"),
        block_history=block_history,
        policy=load_policy(),
    )


__all__ = ["ConfigError", "QuestRunnerConfig", "load_config", "load_policy"]
