"""
bp_scanner: Factorio blueprint document model and mod dependency scanner

Parses exported blueprint JSON, collects the game objects a blueprint refers
to and works out which mods (and versions) are needed to load it.
"""

__version__ = "0.1.0"
__author__ = "bp_scanner Contributors"

# Document model
from .blueprint import (
    Blueprint,
    Book,
    DeconPlanner,
    Document,
    IndexedVec,
    UpgradePlanner,
    UsedIDs,
    document_to_dict,
    parse_document,
)

# Mods and dependency resolution
from .mods import DEFAULT_CATALOG, DependencyList, Preset, find_preset, to_mod_list
from .scanner import (
    DocumentFileLoader,
    ScannerService,
    extract_startup_settings,
    get_references,
    resolve_dependencies,
)
from .tags import AnyBasic

# Logging
from .utils.logging_config import setup_logging

__all__ = [
    # Document model
    "AnyBasic",
    "Blueprint",
    "Book",
    "DeconPlanner",
    "Document",
    "IndexedVec",
    "UpgradePlanner",
    "UsedIDs",
    "document_to_dict",
    "parse_document",

    # Resolution
    "DEFAULT_CATALOG",
    "DependencyList",
    "Preset",
    "extract_startup_settings",
    "find_preset",
    "get_references",
    "resolve_dependencies",
    "to_mod_list",

    # Services
    "DocumentFileLoader",
    "ScannerService",

    # Logging
    "setup_logging",
]
