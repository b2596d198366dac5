from __future__ import annotations

import logging
import logging.handlers
import os
import re
from pathlib import Path

_BASIC_AUTH = re.compile(r"Basic\s+[A-Za-z0-9+/=]+")


class RedactAuthFilter(logging.Filter):
    """Mask HTTP Basic credentials in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if "Basic" in message:
            record.msg = _BASIC_AUTH.sub("Basic ***", message)
            record.args = None
        return True


def configure_logging(log_dir: Path | None = None) -> None:
    """Configure console logging and, if ``log_dir`` is given, a rotating log file."""
    level_name = os.environ.get("LUNOREST_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    redact = RedactAuthFilter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Avoid duplicate output when called twice
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(redact)
    root_logger.addHandler(console_handler)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        # 5 MB per file, 3 backups
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "lunorest.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(redact)
        root_logger.addHandler(file_handler)

    # aiohttp access noise
    logging.getLogger("aiohttp").setLevel(max(level, logging.WARNING))
