"""
Author supplied metadata embedded in blueprints.

Tools that export blueprints can attach a ``bp_meta_info`` table to the tags
of an entity::

    "tags": {
        "bp_meta_info": {
            "mods": {"Krastorio2": "1.3.23"},
            "startup": {"kr-more-realistic-weapon": true}
        }
    }

Only the first entity carrying the marker is consulted. Malformed metadata is
treated as absent: the extractors return None and log at DEBUG level instead
of raising, so foreign or broken metadata never blocks scanning.
"""

import logging
from typing import Mapping, Optional

from ..blueprint import Blueprint, Book, Document, Entity
from ..errors import InvalidVersionError
from ..mods.versions import DependencyList, DependencyVersion, Version
from ..tags import AnyBasic

logger = logging.getLogger(__name__)

META_INFO_KEY = "bp_meta_info"
MODS_KEY = "mods"
STARTUP_KEY = "startup"


def metadata_source(document: Document) -> Optional[Blueprint]:
    """Blueprint whose entities carry the metadata of document.

    Books delegate to their active blueprint; planners have no entities.
    """
    if isinstance(document, Blueprint):
        return document
    if isinstance(document, Book):
        return document.active_blueprint()
    return None


def _first_marked_entity(document: Document) -> Optional[Entity]:
    blueprint = metadata_source(document)
    if blueprint is None:
        return None
    for entity in blueprint.entities:
        if META_INFO_KEY in entity.tags:
            return entity
    return None


def has_meta_info(document: Document) -> bool:
    """Whether any entity of the document carries the metadata marker."""
    return _first_marked_entity(document) is not None


def _meta_section(document: Document, section: str) -> Optional[Mapping[str, AnyBasic]]:
    entity = _first_marked_entity(document)
    if entity is None:
        return None

    info = entity.tags[META_INFO_KEY].as_table()
    if info is None:
        logger.debug(f"Entity {entity.entity_number}: {META_INFO_KEY} is not a table")
        return None

    value = info.get(section)
    if value is None:
        logger.debug(f"Entity {entity.entity_number}: {META_INFO_KEY} has no '{section}'")
        return None

    table = value.as_table()
    if table is None:
        logger.debug(
            f"Entity {entity.entity_number}: {META_INFO_KEY}.{section} is {value.kind.value}, "
            "expected table"
        )
    return table


def get_explicit_mods(document: Document) -> Optional[DependencyList]:
    """Mod list the author pinned in the document.

    Every value of the ``mods`` table must be an ``X.Y.Z`` version string;
    a single bad entry discards the whole list.

    Returns:
        Exact (``=``) requirements per mod, or None if the document has no
        usable explicit list
    """
    mods = _meta_section(document, MODS_KEY)
    if mods is None:
        return None

    result = DependencyList()
    for mod_name, value in mods.items():
        text = value.as_string()
        if text is None:
            logger.debug(f"Explicit mod '{mod_name}' has a {value.kind.value} version, ignoring list")
            return None
        try:
            version = Version.parse(text)
        except InvalidVersionError as e:
            logger.debug(f"Explicit mod '{mod_name}': {e}, ignoring list")
            return None
        result.add(mod_name, DependencyVersion.exact(version))

    return result


def get_startup_settings(document: Document) -> Optional[Mapping[str, AnyBasic]]:
    """Startup mod settings recorded by the author.

    Returns:
        The ``startup`` table of the first marked entity, or None if that
        entity has no well-formed one (later entities are not consulted)
    """
    settings = _meta_section(document, STARTUP_KEY)
    return dict(settings) if settings is not None else None
