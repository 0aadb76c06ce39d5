"""Logging configuration for the AgentX training loop.

Training runs write a timestamped log under ``./logs``; test runs log to stderr
at WARNING so the suite output stays readable.
"""

import logging
import os
import sys
from datetime import UTC, datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_LEVEL_CHOICES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "NONE")

# Env vars may not be set at import time, so sys.modules is checked too
_is_testing = (
    "PYTEST_CURRENT_TEST" in os.environ
    or os.environ.get("TESTING") == "1"
    or "pytest" in sys.modules
    or (sys.argv and sys.argv[0].endswith("pytest"))
)

if not _is_testing:
    log_dir = Path.cwd() / "logs"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"training_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S')}.log"

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.basicConfig(format=LOG_FORMAT, handlers=[file_handler])
    except OSError as exc:
        logging.basicConfig(format=LOG_FORMAT, level=logging.WARNING)
        logging.getLogger(__name__).warning(
            "Failed to initialize file logging in %s: %s. Falling back to stderr logging.",
            log_dir,
            exc,
        )
else:
    logging.basicConfig(format=LOG_FORMAT, level=logging.WARNING)

# Third-party chatter
logging.getLogger("matplotlib").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def set_log_level(level: str) -> None:
    """Apply a CLI log level to the package logger and the root handlers.

    ``"NONE"`` disables the package logger entirely.
    """
    level = level.upper()
    if level == "NONE":
        logger.disabled = True
        return

    logger.disabled = False
    logger.setLevel(level)
    for handler in logging.getLogger().handlers:
        handler.setLevel(level)
