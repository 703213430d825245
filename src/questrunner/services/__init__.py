"""Application services wiring the gateway to the questing use cases."""

from .quest_monitor import QuestMonitor, format_quest_event, format_units
from .quest_runner import QuestRunnerService
from .run_notifier import DiscordRunNotifier, build_report_embed

__all__ = [
    "DiscordRunNotifier",
    "QuestMonitor",
    "QuestRunnerService",
    "build_report_embed",
    "format_quest_event",
    "format_units",
]
