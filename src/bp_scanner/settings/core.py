"""
Core settings management for bp_scanner.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from PySide6.QtCore import QSettings

from ..errors import ConfigError
from .logging import LoggingSettings
from .migration import CONFIG_VERSION, SettingsMigrator
from .scanner import ScannerSettings
from .validation import SettingsValidator, ValidationResult

logger = logging.getLogger(__name__)

ORGANIZATION = "bp_scanner"
APPLICATION = "bp_scanner"


class AppSettings:
    """
    Configuration management using QSettings.

    Settings live in the platform's native store unless an INI file path is
    given, which is how the command line ``--settings`` option and the tests
    use it.
    """

    def __init__(
        self, profile: str = "default", path: Optional[Union[str, Path]] = None
    ):
        """Initialize settings for a profile.

        Args:
            profile: Settings profile name (default: "default")
            path: Optional INI file to use instead of the native store

        Raises:
            ConfigError: If the settings store cannot be accessed
        """
        if path is not None:
            self.settings = QSettings(str(path), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings(ORGANIZATION, APPLICATION)
        self.profile = profile

        if self.settings.status() != QSettings.Status.NoError:
            raise ConfigError(
                f"Cannot read settings from {self.settings.fileName()}: {self.settings.status()}"
            )

        # Use profile as a group: bp_scanner/<profile>/...
        self.settings.beginGroup(profile)

        self._migrator = SettingsMigrator(self.settings)
        self._validator = SettingsValidator(self)
        self._logging = LoggingSettings(self.settings)
        self._scanner = ScannerSettings(self.settings)

        self._migrator.ensure_version()

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    @property
    def scanner(self) -> ScannerSettings:
        """Access scanner settings subsystem."""
        return self._scanner

    # === VERSION AND FIRST RUN ===

    @property
    def is_first_run(self) -> bool:
        """Check if this is the first run of the application."""
        return bool(self.settings.value("app/first_run", True, type=bool))

    def set_first_run_complete(self) -> None:
        """Mark first run as complete."""
        self.settings.setValue("app/first_run", False)
        self.settings.sync()

    @property
    def version(self) -> str:
        """Get configuration version."""
        return str(self.settings.value("app/version", CONFIG_VERSION))

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        return self._logging.console_logging

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self._logging.console_logging = value

    @property
    def console_log_level(self) -> str:
        return self._logging.console_log_level

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        self._logging.console_log_level = value

    @property
    def console_use_colors(self) -> bool:
        return self._logging.console_use_colors

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self._logging.console_use_colors = value

    @property
    def file_logging(self) -> bool:
        return self._logging.file_logging

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self._logging.file_logging = value

    @property
    def log_file_path(self) -> str:
        return self._logging.log_file_path

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage."""
        self.settings.sync()
