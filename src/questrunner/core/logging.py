from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

_CONFIGURED = False

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Serialize log records as structured JSON."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.default_time_format),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            data[key] = value
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            data["stack_info"] = record.stack_info
        return json.dumps(data, ensure_ascii=False, default=str)


def _resolve_level(raw: str | None) -> int:
    if not raw:
        return logging.INFO
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(*, force: bool = False) -> None:
    """Configure root logging handlers once per process."""
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    log_dir_env = os.getenv("LOG_DIR")
    log_dir = Path(log_dir_env) if log_dir_env else Path.cwd() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    log_format = os.getenv("LOG_FORMAT", "").strip().lower()
    use_json = log_format == "json"

    handlers: list[logging.Handler] = []

    # appended across runs
    file_handler = logging.FileHandler(
        log_dir / "questrunner.log", mode="a", encoding="utf-8"
    )
    stream_handler = logging.StreamHandler()

    if use_json:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    file_handler.setFormatter(formatter)
    stream_handler.setFormatter(formatter)

    handlers.extend([file_handler, stream_handler])

    logging.basicConfig(
        level=_resolve_level(os.getenv("LOG_LEVEL")),
        handlers=handlers,
        force=True,
    )

    _CONFIGURED = True


__all__ = ["JsonFormatter", "configure_logging"]
