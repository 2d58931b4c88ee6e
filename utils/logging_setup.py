from __future__ import annotations

import logging
import os
import sys
from typing import IO, Any

from config.settings import get_settings


_INITIALIZED: bool = False

# Structured extras passed by the store client and the directory flows
EXTRA_KEYS: tuple[str, ...] = ("action", "status", "duration_ms", "company_id", "error")


class SafeExtraFormatter(logging.Formatter):
    """Formatter that appends the extras a record carries as ``key=value`` pairs.

    Missing or ``None`` extras are left out instead of failing the format
    call. ``run_id`` falls back to the RUN_ID environment variable that
    ``cli.main()`` sets for every invocation.
    """

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        line = super().format(record)
        pairs = []
        for key in EXTRA_KEYS:
            value: Any = getattr(record, key, None)
            if value is not None:
                pairs.append(f"{key}={value}")
        run_id = getattr(record, "run_id", None) or os.getenv("RUN_ID")
        if run_id:
            pairs.append(f"run_id={run_id}")
        return f"{line} {' '.join(pairs)}" if pairs else line


def init_logging(level: str | None = None, stream: IO[str] | None = None) -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return

    settings = get_settings()
    log_level_str = (level or settings.log_level).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if not root_logger.handlers:
        # stderr keeps log lines out of rendered tables and CSV on stdout
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setLevel(log_level)
        handler.setFormatter(SafeExtraFormatter(fmt="%(asctime)s %(levelname)s %(name)s %(message)s"))
        root_logger.addHandler(handler)

    # Connection-pool chatter from requests drowns the store call lines at DEBUG
    if log_level > logging.DEBUG:
        logging.getLogger("urllib3").setLevel(logging.WARNING)

    _INITIALIZED = True
