from __future__ import annotations

"""
Logging Configuration Model.

qdir writes diagnostics to stderr and, on request, to a rotating log file.
Stdout is left to run output: summaries, dry-run entries and JSON.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVELS: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Attributes:
        level: Level name; unknown names fall back to INFO.
        console: Write records to stderr.
        log_file: Optional path of a rotating log file.
        max_bytes: Log file size that triggers a rollover.
        backup_count: Rotated log files kept.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 3

    @classmethod
    def for_cli(cls, *, debug: bool, log_file: Optional[str] = None) -> "LoggingConfig":
        """Settings for a CLI run: INFO (DEBUG with --debug) on stderr, plus --log-file."""
        return cls(level="DEBUG" if debug else "INFO", console=True, log_file=log_file)

    @property
    def level_int(self) -> int:
        return _LEVELS.get(str(self.level or "").strip().upper(), logging.INFO)
