"""
Settings validation system for bp_scanner.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, TYPE_CHECKING

from ..mods.catalog import find_preset
from .logging import VALID_LEVELS
from .migration import CONFIG_VERSION

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Errors make the configuration unusable; warnings are only reported."""

    errors: List[str] = field(default_factory=lambda: [])
    warnings: List[str] = field(default_factory=lambda: [])

    @property
    def is_valid(self) -> bool:
        return not self.errors


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        result = ValidationResult()
        scanner = self.settings.scanner
        log_settings = self.settings.logging

        if self.settings.version != CONFIG_VERSION:
            result.warnings.append(
                f"Unsupported configuration version {self.settings.version}, "
                f"expected {CONFIG_VERSION}"
            )

        preset_name = scanner.default_preset
        if preset_name and find_preset(preset_name) is None:
            result.errors.append(f"Unknown default preset: {preset_name}")

        if scanner.max_workers < 1:
            result.errors.append(f"Max workers must be positive: {scanner.max_workers}")

        level = log_settings.console_log_level
        if level.upper() not in VALID_LEVELS:
            result.warnings.append(f"Unknown console log level, INFO will be used: {level}")

        if log_settings.file_logging:
            log_dir = log_settings.log_file_absolute_path.parent
            if log_dir.exists() and not os.access(log_dir, os.W_OK):
                result.errors.append(f"Log directory is not writable: {log_dir}")

        for message in result.errors:
            logger.debug(f"Settings error: {message}")
        return result
