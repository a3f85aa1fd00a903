from __future__ import annotations

"""
Logging Configuration.

Record formats, level names and the settings the CLI passes to
configure_logging().
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_LOG_MAX_BYTES = 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 3

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings for one logging setup.

    Attributes:
        level: Minimum severity written by both sinks.
        console: Write status lines to stderr.
        log_file: Also append records to this rotating file.
        max_bytes: Size at which the log file rolls over (--log-max-bytes).
        backup_count: Rolled-over files kept next to it (--log-backups).
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None
    max_bytes: int = DEFAULT_LOG_MAX_BYTES
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT
