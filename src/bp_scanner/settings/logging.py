"""
Console and CSV log file options.

Read by ``bp_scanner.utils.logging_config.setup_logging``; the ``--log-level``
command line option overrides ``console_level`` for a single run.
"""

import logging
from pathlib import Path

from .group import SettingsGroup

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE_PATH = "logs/bp_scanner.csv"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(SettingsGroup):
    """Keys under ``logging/``."""

    prefix = "logging"

    @property
    def console_logging(self) -> bool:
        return self.read("console_enabled", True, bool)

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self.write("console_enabled", value)

    @property
    def console_log_level(self) -> str:
        """Level name as stored; may be invalid if the file was edited by hand."""
        return self.read("console_level", "WARNING", str)

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        level = value.upper()
        if level not in VALID_LEVELS:
            logger.warning(
                f"Invalid console log level: {value}, keeping {self.console_log_level}"
            )
            return
        self.write("console_level", level)

    @property
    def console_use_colors(self) -> bool:
        return self.read("console_use_colors", True, bool)

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self.write("console_use_colors", value)

    @property
    def file_logging(self) -> bool:
        return self.read("file_enabled", False, bool)

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self.write("file_enabled", value)

    @property
    def log_file_path(self) -> str:
        """CSV log location; relative paths resolve against the working directory."""
        return self.read("file_path", DEFAULT_LOG_FILE_PATH, str)

    @log_file_path.setter
    def log_file_path(self, value: str) -> None:
        self.write("file_path", value)

    @property
    def log_file_absolute_path(self) -> Path:
        return Path(self.log_file_path).resolve()
