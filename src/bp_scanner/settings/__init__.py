"""
Settings package for bp_scanner.

Configuration is stored with Qt's QSettings, either in the platform's native
store or in an INI file.

Usage:
    from bp_scanner.settings import AppSettings

    settings = AppSettings(path="scanner.ini")
    result = settings.validate()
"""

from ..errors import ConfigError
from .core import AppSettings
from .logging import LoggingSettings
from .migration import CONFIG_VERSION
from .scanner import ScannerSettings
from .validation import ValidationResult

__all__ = [
    "AppSettings",
    "CONFIG_VERSION",
    "ConfigError",
    "LoggingSettings",
    "ScannerSettings",
    "ValidationResult",
]
