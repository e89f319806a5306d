"""
Scanner-related settings for bp_scanner.
"""

import logging

from .group import SettingsGroup

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


class ScannerSettings(SettingsGroup):
    """Manages batch scanning and dependency export settings."""

    prefix = "scanner"

    @property
    def max_workers(self) -> int:
        """Thread pool size used when scanning many files."""
        value = self.read("max_workers", DEFAULT_MAX_WORKERS, str)
        try:
            return int(value)
        except ValueError:
            return DEFAULT_MAX_WORKERS

    @max_workers.setter
    def max_workers(self, value: int) -> None:
        if value > 0:
            self.write("max_workers", value)
        else:
            logger.warning(
                f"Invalid max workers: {value}, keeping current: {self.max_workers}"
            )

    @property
    def default_preset(self) -> str:
        """Preset forced on every scan; empty means detect per document."""
        return self.read("default_preset", "", str)

    @default_preset.setter
    def default_preset(self, value: str) -> None:
        self.write("default_preset", value)

    @property
    def include_base_mod(self) -> bool:
        """Whether exported mod lists always contain ``base``."""
        return self.read("include_base_mod", True, bool)

    @include_base_mod.setter
    def include_base_mod(self, value: bool) -> None:
        self.write("include_base_mod", value)
