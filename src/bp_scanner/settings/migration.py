"""
Configuration version stamping for bp_scanner.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

CONFIG_VERSION = "1"


class SettingsMigrator:
    """Stamps the store with the configuration layout version.

    Only one layout exists so far. A store written by another layout is left
    untouched and reported, so a future release can migrate it.
    """

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def ensure_version(self) -> None:
        stored = str(self.settings.value("app/version", "") or "")

        if not stored:
            self.settings.setValue("app/version", CONFIG_VERSION)
            self.settings.setValue("app/first_run", True)
            self.settings.sync()
            logger.info("First run detected, initializing configuration")
        elif stored != CONFIG_VERSION:
            logger.warning(
                f"Settings use configuration version {stored}, "
                f"this release reads version {CONFIG_VERSION}"
            )
