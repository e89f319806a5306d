"""
Reference sets and the reference collection capability.

Every node of the document tree implements GetIDs. Calling ``get_ids()`` on a
node returns a fresh UsedIDs holding every external game object the node (and
everything it owns) refers to, bucketed by category.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, Iterable, Iterator, Optional, Set, Tuple


class ReferenceCategory(Enum):
    """Reference buckets. Values match the signal type names used on the wire."""

    RECIPE = "recipe"
    ENTITY = "entity"
    TILE = "tile"
    FLUID = "fluid"
    ITEM = "item"
    EQUIPMENT = "equipment"
    VIRTUAL_SIGNAL = "virtual-signal"
    QUALITY = "quality"
    SPACE_LOCATION = "space-location"
    ASTEROID_CHUNK = "asteroid-chunk"
    OTHER = "other"
    """Unclassified references such as free-form tag keys."""

    @property
    def attribute(self) -> str:
        """Name of the matching UsedIDs field."""
        return self.name.lower()


@dataclass
class UsedIDs:
    """Deduplicated identifiers per reference category."""

    recipe: Set[str] = field(default_factory=set)
    entity: Set[str] = field(default_factory=set)
    tile: Set[str] = field(default_factory=set)
    fluid: Set[str] = field(default_factory=set)
    item: Set[str] = field(default_factory=set)
    equipment: Set[str] = field(default_factory=set)
    virtual_signal: Set[str] = field(default_factory=set)
    quality: Set[str] = field(default_factory=set)
    space_location: Set[str] = field(default_factory=set)
    asteroid_chunk: Set[str] = field(default_factory=set)
    other: Set[str] = field(default_factory=set)

    def add(self, category: ReferenceCategory, identifier: str) -> None:
        """Insert one identifier into its category set."""
        self.get(category).add(identifier)

    def get(self, category: ReferenceCategory) -> Set[str]:
        """Return the (mutable) set for a category."""
        return getattr(self, category.attribute)

    def merge(self, other: "UsedIDs") -> "UsedIDs":
        """Union another reference set into this one in place.

        Returns:
            self, to allow chaining
        """
        for category in ReferenceCategory:
            self.get(category).update(other.get(category))
        return self

    def __or__(self, other: "UsedIDs") -> "UsedIDs":
        return UsedIDs().merge(self).merge(other)

    def flatten(self) -> Set[str]:
        """Combine every category into one set; category information is lost."""
        combined: Set[str] = set()
        for category in ReferenceCategory:
            combined.update(self.get(category))
        return combined

    def categories(self) -> Iterator[Tuple[ReferenceCategory, Set[str]]]:
        """Iterate over (category, identifiers) for non-empty categories."""
        for category in ReferenceCategory:
            ids = self.get(category)
            if ids:
                yield category, ids

    def is_empty(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))

    def to_dict(self) -> Dict[str, list[str]]:
        """Sorted, JSON-friendly view keyed by category value."""
        return {category.value: sorted(ids) for category, ids in self.categories()}


class GetIDs(ABC):
    """Capability implemented by every document tree node."""

    @abstractmethod
    def get_ids(self) -> UsedIDs:
        """Collect the references of this node and everything it owns."""


def collect_ids(*sources: "Optional[GetIDs] | Iterable[GetIDs]") -> UsedIDs:
    """Union the reference sets of several optional nodes or node sequences.

    ``None`` entries contribute nothing, which is how absent optional fields
    are skipped.
    """
    ids = UsedIDs()
    for source in sources:
        if source is None:
            continue
        if isinstance(source, GetIDs):
            ids.merge(source.get_ids())
        else:
            for item in source:
                ids.merge(item.get_ids())
    return ids
