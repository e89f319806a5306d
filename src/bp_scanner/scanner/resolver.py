"""
Mod dependency resolution for documents.
"""

import logging
from enum import Enum
from typing import Mapping, Optional, Tuple

from ..blueprint import Document, UsedIDs
from ..mods.catalog import DEFAULT_CATALOG, PackageCatalog, Preset
from ..mods.versions import DependencyList
from ..tags import AnyBasic
from .metadata import get_explicit_mods, get_startup_settings

logger = logging.getLogger(__name__)


def get_references(document: Document) -> UsedIDs:
    """Every game object the document refers to, by category."""
    return document.get_ids()


def detect_dependencies(
    references: UsedIDs, catalog: PackageCatalog = DEFAULT_CATALOG
) -> DependencyList:
    """Match identifiers against the catalog's known prefixes.

    Categories are merged first since prefixes are not category specific.
    Presets are checked in catalog order and every matching preset adds its
    mods; a mod keeps the requirement of the first preset that added it.
    Identifiers matching no preset (base game content) are ignored.
    """
    identifiers = sorted(references.flatten())
    deps = DependencyList()
    for preset in catalog:
        matched = next((i for i in identifiers if preset.matches(i)), None)
        if matched is None:
            continue
        logger.debug(f"Preset {preset.name} matched by '{matched}'")
        deps.extend(preset.used_mods())
    return deps


class Resolution(Enum):
    """Which rule decided a document's dependency list."""

    PRESET = "preset"
    EXPLICIT = "explicit"
    DETECTED = "detected"


def resolve_with_source(
    document: Document,
    catalog: PackageCatalog = DEFAULT_CATALOG,
    preset: Optional[Preset] = None,
    references: Optional[UsedIDs] = None,
) -> Tuple[DependencyList, Resolution]:
    """Resolve dependencies and report which rule produced them.

    Resolution order:
        1. ``preset``, when the caller forces one
        2. the explicit mod list embedded by the author, returned unmodified
        3. prefix detection over all references (see detect_dependencies)

    Args:
        document: Document to resolve
        catalog: Presets used for detection
        preset: Preset forced by the caller
        references: Already collected references of document; collected
            here when omitted

    Never raises; an empty list means only the base game is needed.
    """
    if preset is not None:
        return preset.used_mods(), Resolution.PRESET

    explicit = get_explicit_mods(document)
    if explicit is not None:
        logger.debug(f"Using explicit mod list with {len(explicit)} entries")
        return explicit, Resolution.EXPLICIT

    if references is None:
        references = get_references(document)
    return detect_dependencies(references, catalog), Resolution.DETECTED


def resolve_dependencies(
    document: Document,
    catalog: PackageCatalog = DEFAULT_CATALOG,
    preset: Optional[Preset] = None,
) -> DependencyList:
    """Mods (and versions) needed to load document.

    See resolve_with_source for the resolution order.
    """
    dependencies, _ = resolve_with_source(document, catalog, preset)
    return dependencies


def extract_startup_settings(document: Document) -> Optional[Mapping[str, AnyBasic]]:
    """Startup settings embedded by the author, if any."""
    return get_startup_settings(document)
