"""
Catalog of known mod packs.

Each preset names the mods (and minimum versions) a mod pack needs, plus the
identifier prefix its content uses, if it has a recognizable one. The
resolver walks the catalog in declaration order, so earlier presets win when
two presets require the same mod.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .versions import DependencyList, DependencyVersion, Version


@dataclass(frozen=True)
class Preset:
    """One catalog entry."""

    name: str
    known_prefix: Optional[str]
    mods: Tuple[Tuple[str, Version], ...]
    aliases: Tuple[str, ...] = ()

    def used_mods(self) -> DependencyList:
        """Requirements implied by this preset, each as a minimum version."""
        return DependencyList(
            (mod_name, DependencyVersion.at_least(version)) for mod_name, version in self.mods
        )

    def matches(self, identifier: str) -> bool:
        """Whether identifier carries this preset's prefix."""
        return self.known_prefix is not None and identifier.startswith(self.known_prefix)

    @property
    def all_names(self) -> Tuple[str, ...]:
        return (self.name,) + self.aliases


_KRASTORIO2 = ("Krastorio2", Version(1, 3, 23))
_SPACE_EXPLORATION = ("space-exploration", Version(0, 6, 119))
_SEABLOCK = ("SeaBlockMetaPack", Version(1, 1, 4))

K2 = Preset("K2", "kr-", (_KRASTORIO2,), ("k2",))
SE = Preset("SE", "se-", (_SPACE_EXPLORATION,), ("se",))
K2SE = Preset(
    "K2SE",
    None,
    (_KRASTORIO2, _SPACE_EXPLORATION),
    ("k2se", "K2+SE", "k2+se", "SEK2", "sek2", "SE+K2", "se+k2"),
)
SEABLOCK = Preset("SeaBlock", None, (_SEABLOCK,), ("seablock", "SB", "sb"))

PackageCatalog = Tuple[Preset, ...]

DEFAULT_CATALOG: PackageCatalog = (K2, SE, K2SE, SEABLOCK)


def find_preset(name: str, catalog: PackageCatalog = DEFAULT_CATALOG) -> Optional[Preset]:
    """Look up a preset by name or alias (exact match).

    Returns:
        The matching preset, or None if the name is unknown
    """
    for preset in catalog:
        if name in preset.all_names:
            return preset
    return None
