"""
Dependency scanning for blueprint documents.
"""

from .loaders import DocumentFileLoader
from .metadata import (
    META_INFO_KEY,
    get_explicit_mods,
    get_startup_settings,
    has_meta_info,
)
from .resolver import (
    Resolution,
    detect_dependencies,
    extract_startup_settings,
    get_references,
    resolve_dependencies,
    resolve_with_source,
)
from .service import ScannerService, ScanReport, ScanResult

__all__ = [
    "DocumentFileLoader",
    "META_INFO_KEY",
    "Resolution",
    "ScanReport",
    "ScanResult",
    "ScannerService",
    "detect_dependencies",
    "extract_startup_settings",
    "get_explicit_mods",
    "get_references",
    "get_startup_settings",
    "has_meta_info",
    "resolve_dependencies",
    "resolve_with_source",
]
