"""FuzzyCast logging utilities.

The library only emits records through the package logger; applications that
want the timestamp + abbreviated level output call ``configure_logging``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Final


_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - record is stdlib name
        """Format one log record with an abbreviated level.

        Args:
            record: Logging record.

        Returns:
            Formatted message string.
        """
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("FuzzyCast")
log.addHandler(logging.NullHandler())


def configure_logging(
    *,
    level: str = "INFO",
    session: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
) -> None:
    """Configure the FuzzyCast logger.

    Uses format: mm-dd HH:MM:SS [<LVL>] <message>
    where LVL is one of: DEBG/INFO/WARN/ERRO.

    Args:
        level: Logging level for the console handler (e.g., INFO, DEBUG).
        session: Name used to build the log file path.
        log_to_file: Whether to mirror logs to a file.
        log_dir: Base directory for log files.
    """
    resolved_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    formatter = _AbbrevLevelFormatter(
        fmt="%(asctime)s [%(levelabbr)s] %(message)s",
        datefmt="%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = []

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(resolved_level)
    stream_handler.setFormatter(formatter)
    handlers.append(stream_handler)

    if log_to_file and session:
        timestamp = datetime.now().strftime("%m%d%H%M%S")
        session_dir = Path(log_dir or "log") / session
        session_dir.mkdir(parents=True, exist_ok=True)
        log_path = session_dir / f"{session}_{timestamp}.log"
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    log.handlers.clear()
    for handler in handlers:
        log.addHandler(handler)
    log.setLevel(min(logging.DEBUG, resolved_level) if log_to_file else resolved_level)
    log.propagate = False
