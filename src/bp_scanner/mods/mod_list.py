"""
Export dependency lists in the game's ``mod-list.json`` format.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import orjson

from .versions import DependencyList, VersionComparator

logger = logging.getLogger(__name__)

BASE_MOD = "base"
CORE_MOD = "core"

_PINNED_COMPARATORS = (
    VersionComparator.EQUAL,
    VersionComparator.HIGHER_OR_EQUAL,
    VersionComparator.LOWER_OR_EQUAL,
)


def to_mod_list(deps: DependencyList, include_base: bool = True) -> Dict[str, Any]:
    """Build the ``{"mods": [...]}`` structure for a dependency list.

    ``base`` comes first and is always enabled; ``core`` is never listed since
    the game always loads it. Requirements that name an exact or inclusive
    bound version pin that version; other requirements leave it open.

    Args:
        deps: Dependency list to export
        include_base: Whether to add ``base`` when deps does not name it

    Returns:
        JSON-compatible mod list
    """
    mods: List[Dict[str, Any]] = []
    if include_base or BASE_MOD in deps:
        mods.append(_entry(BASE_MOD, deps))

    for name in deps.names():
        if name in (BASE_MOD, CORE_MOD):
            continue
        mods.append(_entry(name, deps))

    return {"mods": mods}


def _entry(name: str, deps: DependencyList) -> Dict[str, Any]:
    entry: Dict[str, Any] = {"name": name, "enabled": True}
    requirement = deps.get(name)
    if requirement is not None and requirement.comparator in _PINNED_COMPARATORS:
        entry["version"] = str(requirement.version)
    return entry


def write_mod_list(path: Path, deps: DependencyList, include_base: bool = True) -> None:
    """Write deps to path as an indented mod-list.json.

    Raises:
        OSError: If the file cannot be written
    """
    data = to_mod_list(deps, include_base)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        f.write(orjson.dumps(data, option=orjson.OPT_INDENT_2))
    logger.info(f"Wrote mod list with {len(data['mods'])} mods to {path}")
