"""
Typed access to one group of keys in the settings store.
"""

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings


class SettingsGroup:
    """Base for settings subsystems; keys are ``<prefix>/<name>``."""

    prefix = ""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def key(self, name: str) -> str:
        return f"{self.prefix}/{name}" if self.prefix else name

    def read(self, name: str, default: Any, kind: type) -> Any:
        """Read a value converted by Qt to ``kind``, or ``default`` if unusable."""
        try:
            value = self.settings.value(self.key(name), default, type=kind)
        except (TypeError, ValueError):
            return default
        return default if value is None else value

    def write(self, name: str, value: Any) -> None:
        self.settings.setValue(self.key(name), value)
        self.settings.sync()
