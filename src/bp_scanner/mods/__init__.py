"""
Mod versions, the preset catalog and mod-list export.
"""

from .catalog import DEFAULT_CATALOG, PackageCatalog, Preset, find_preset
from .mod_list import to_mod_list, write_mod_list
from .versions import (
    Dependency,
    DependencyKind,
    DependencyList,
    DependencyVersion,
    Version,
    VersionComparator,
)

__all__ = [
    "DEFAULT_CATALOG",
    "Dependency",
    "DependencyKind",
    "DependencyList",
    "DependencyVersion",
    "PackageCatalog",
    "Preset",
    "Version",
    "VersionComparator",
    "find_preset",
    "to_mod_list",
    "write_mod_list",
]
