from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Sequence

from questrunner.config import ConfigError, QuestRunnerConfig, load_config
from questrunner.core.logging import configure_logging
from questrunner.domain.usecase.ports import QuestGateway
from questrunner.infra.snapshot_gateway import SnapshotQuestGateway
from questrunner.services.quest_monitor import QuestMonitor
from questrunner.services.quest_runner import QuestRunnerService
from questrunner.services.run_notifier import DiscordRunNotifier

logger = logging.getLogger(__name__)


def build_gateway(config: QuestRunnerConfig) -> QuestGateway:
    if config.snapshot_path is None:
        raise ConfigError(
            "QUEST_SNAPSHOT_PATH is required: no live chain gateway is configured"
        )
    return SnapshotQuestGateway.from_path(config.snapshot_path)


async def run_once(config: QuestRunnerConfig, gateway: QuestGateway) -> int:
    notifier = DiscordRunNotifier(config.webhook_url) if config.webhook_url else None
    service = QuestRunnerService(
        gateway=gateway,
        owner_address=config.owner_address,
        policy=config.policy,
        notifier=notifier,
    )
    report = await service.run()
    for line in report.summary_lines():
        logger.info(line)
    return 0


async def monitor(
    config: QuestRunnerConfig, gateway: QuestGateway, *, once: bool = False
) -> int:
    quest_monitor = QuestMonitor(
        gateway=gateway,
        owner_address=config.owner_address,
        block_history=config.block_history,
    )
    await quest_monitor.start()
    if once:
        return 0
    # Subscriptions deliver events until the process is interrupted.
    await asyncio.Event().wait()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="questrunner", description="Schedule and monitor hero quests"
    )
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("run", help="Complete finished quests and start new ones")
    monitor_parser = sub.add_parser("monitor", help="Report quest lifecycle events")
    monitor_parser.add_argument(
        "--once",
        action="store_true",
        help="Report recent history and exit instead of watching for events",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        config = load_config()
        gateway = build_gateway(config)
        if args.command == "run":
            return asyncio.run(run_once(config, gateway))
        return asyncio.run(monitor(config, gateway, once=args.once))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    except Exception:
        logger.exception("Quest %s failed", args.command)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
