"""
Upgrade and deconstruction planner settings.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Optional

from ..errors import ShapeMismatchError
from .fields import FieldReader, dump_indexed, put_if
from .ids import GetIDs, ReferenceCategory, UsedIDs
from .indexed import IndexedVec
from .signals import NameString, parse_name_string


class MappedKind(Enum):
    ENTITY = "entity"
    ITEM = "item"


@dataclass
class MappedValue(GetIDs):
    """One side of an upgrade mapping: an entity or an item."""

    kind: MappedKind
    name: str

    @classmethod
    def from_dict(cls, raw: Any, path: str = "mapped") -> "MappedValue":
        reader = FieldReader(raw, path, ("type", "name"))
        type_text = reader.text("type")
        try:
            kind = MappedKind(type_text)
        except ValueError:
            raise ShapeMismatchError(
                f"unknown mapping type '{type_text}'", reader.child_path("type")
            ) from None
        return cls(kind=kind, name=reader.text("name"))

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "name": self.name}

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        category = ReferenceCategory.ENTITY if self.kind is MappedKind.ENTITY else ReferenceCategory.ITEM
        ids.add(category, self.name)
        return ids


@dataclass
class MappingEntry(GetIDs):
    source: Optional[MappedValue] = None
    target: Optional[MappedValue] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "mappers") -> "MappingEntry":
        reader = FieldReader(raw, path, ("from", "to"))
        return cls(
            source=reader.optional_node("from", MappedValue.from_dict),
            target=reader.optional_node("to", MappedValue.from_dict),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.source is not None:
            data["from"] = self.source.to_dict()
        if self.target is not None:
            data["to"] = self.target.to_dict()
        return data

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        for side in (self.source, self.target):
            if side is not None:
                ids.merge(side.get_ids())
        return ids


def parse_mapping_entry(raw: Any, path: str) -> MappingEntry:
    return MappingEntry.from_dict(raw, path)


class FilterMode(IntEnum):
    WHITELIST = 0
    BLACKLIST = 1


class TileSelectionMode(IntEnum):
    NORMAL = 0
    ALWAYS = 1
    NEVER = 2
    ONLY = 3


def _read_int_enum(reader: FieldReader, name: str, enum_cls, default):
    value = reader.integer(name, None)
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        raise ShapeMismatchError(f"unknown {name} {value}", reader.child_path(name)) from None


@dataclass
class UpgradeSettings(GetIDs):
    mappers: IndexedVec[MappingEntry] = field(default_factory=lambda: IndexedVec())

    FIELDS = ("mappers",)

    @classmethod
    def read(cls, reader: FieldReader) -> "UpgradeSettings":
        return cls(mappers=reader.indexed("mappers", parse_mapping_entry))

    def dump(self, data: Dict[str, Any]) -> None:
        dump_indexed(data, "mappers", self.mappers, MappingEntry.to_dict)

    def get_ids(self) -> UsedIDs:
        return self.mappers.get_ids()


@dataclass
class DeconSettings(GetIDs):
    """Deconstruction planner filters.

    Entity filters reference entities, tile filters reference tiles.
    """

    entity_filter_mode: FilterMode = FilterMode.WHITELIST
    entity_filters: IndexedVec[NameString] = field(default_factory=lambda: IndexedVec())
    trees_and_rocks_only: bool = False
    tile_filter_mode: FilterMode = FilterMode.WHITELIST
    tile_selection_mode: TileSelectionMode = TileSelectionMode.NORMAL
    tile_filters: IndexedVec[NameString] = field(default_factory=lambda: IndexedVec())

    FIELDS = (
        "entity_filter_mode",
        "entity_filters",
        "trees_and_rocks_only",
        "tile_filter_mode",
        "tile_selection_mode",
        "tile_filters",
    )

    @classmethod
    def read(cls, reader: FieldReader) -> "DeconSettings":
        return cls(
            entity_filter_mode=_read_int_enum(
                reader, "entity_filter_mode", FilterMode, FilterMode.WHITELIST
            ),
            entity_filters=reader.indexed("entity_filters", parse_name_string),
            trees_and_rocks_only=reader.boolean("trees_and_rocks_only", False),
            tile_filter_mode=_read_int_enum(
                reader, "tile_filter_mode", FilterMode, FilterMode.WHITELIST
            ),
            tile_selection_mode=_read_int_enum(
                reader, "tile_selection_mode", TileSelectionMode, TileSelectionMode.NORMAL
            ),
            tile_filters=reader.indexed("tile_filters", parse_name_string),
        )

    def dump(self, data: Dict[str, Any]) -> None:
        put_if(
            data,
            "entity_filter_mode",
            int(self.entity_filter_mode),
            self.entity_filter_mode is not FilterMode.WHITELIST,
        )
        dump_indexed(data, "entity_filters", self.entity_filters, NameString.to_dict)
        put_if(data, "trees_and_rocks_only", True, self.trees_and_rocks_only)
        put_if(
            data,
            "tile_filter_mode",
            int(self.tile_filter_mode),
            self.tile_filter_mode is not FilterMode.WHITELIST,
        )
        put_if(
            data,
            "tile_selection_mode",
            int(self.tile_selection_mode),
            self.tile_selection_mode is not TileSelectionMode.NORMAL,
        )
        dump_indexed(data, "tile_filters", self.tile_filters, NameString.to_dict)

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        for entry in self.entity_filters:
            ids.add(ReferenceCategory.ENTITY, entry.name)
        for entry in self.tile_filters:
            ids.add(ReferenceCategory.TILE, entry.name)
        return ids
