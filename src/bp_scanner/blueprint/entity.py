"""
Entities and tiles placed by a blueprint.

Entity carries the fields shared by every entity plus every entity specific
field that holds references (recipes, filters, requests, inventories,
equipment, circuit settings, infinity settings, speaker signals). Settings
without references (belt priorities, colors, orientations, ...) are preserved
verbatim in ``extra_data``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..tags import TagTable, dump_tag_table, parse_tag_table
from .control import ControlBehavior
from .fields import FieldReader, dump_indexed, dump_number, expect_object, put_if
from .ids import GetIDs, ReferenceCategory, UsedIDs, collect_ids
from .indexed import IndexedVec
from .logistics import LogisticSections
from .signals import NameString, Position, SignalID, parse_name_string, parse_signal

NORMAL_QUALITY = "normal"


@dataclass
class ItemFilter(GetIDs):
    """Inventory slot or inserter filter."""

    name: Optional[str] = None
    quality: Optional[str] = None
    comparator: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "filter") -> "ItemFilter":
        reader = FieldReader(raw, path, ("name", "quality", "comparator"))
        return cls(
            name=reader.text("name", None),
            quality=reader.text("quality", None),
            comparator=reader.text("comparator", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        put_if(data, "name", self.name, self.name is not None)
        put_if(data, "quality", self.quality, self.quality is not None)
        put_if(data, "comparator", self.comparator, self.comparator is not None)
        return data

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        if self.name is not None:
            ids.add(ReferenceCategory.ITEM, self.name)
        if self.quality is not None:
            ids.add(ReferenceCategory.QUALITY, self.quality)
        return ids


def parse_item_filter(raw: Any, path: str) -> ItemFilter:
    return ItemFilter.from_dict(raw, path)


@dataclass
class InventoryWithFilters(GetIDs):
    filters: IndexedVec[ItemFilter] = field(default_factory=lambda: IndexedVec())
    bar: Optional[int] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "inventory") -> "InventoryWithFilters":
        reader = FieldReader(raw, path, ("filters", "bar"))
        return cls(
            filters=reader.indexed("filters", parse_item_filter),
            bar=reader.integer("bar", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        put_if(data, "bar", self.bar, self.bar is not None)
        dump_indexed(data, "filters", self.filters, ItemFilter.to_dict)
        return data

    def get_ids(self) -> UsedIDs:
        return self.filters.get_ids()


@dataclass
class InsertPlan(GetIDs):
    """Items to insert into the entity after it is built.

    Only the item identity is modeled; inventory positions are kept verbatim.
    """

    name: str
    quality: str = NORMAL_QUALITY
    items: Dict[str, Any] = field(default_factory=lambda: {})

    @classmethod
    def from_dict(cls, raw: Any, path: str = "items") -> "InsertPlan":
        reader = FieldReader(raw, path, ("id", "items"))
        id_reader = FieldReader(reader.raw("id"), reader.child_path("id"), ("name", "quality"))
        return cls(
            name=id_reader.text("name"),
            quality=id_reader.text("quality", NORMAL_QUALITY),
            items=expect_object(reader.raw("items"), reader.child_path("items")),
        )

    def to_dict(self) -> Dict[str, Any]:
        item_id: Dict[str, Any] = {"name": self.name}
        put_if(item_id, "quality", self.quality, self.quality != NORMAL_QUALITY)
        return {"id": item_id, "items": self.items}

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        ids.add(ReferenceCategory.ITEM, self.name)
        ids.add(ReferenceCategory.QUALITY, self.quality)
        return ids


@dataclass
class BlueprintEquipment(GetIDs):
    """Equipment placed in a vehicle or armor grid; position kept verbatim."""

    name: str
    position: Any
    quality: str = NORMAL_QUALITY

    @classmethod
    def from_dict(cls, raw: Any, path: str = "grid") -> "BlueprintEquipment":
        reader = FieldReader(raw, path, ("equipment", "position"))
        eq_reader = FieldReader(
            reader.raw("equipment"), reader.child_path("equipment"), ("name", "quality")
        )
        return cls(
            name=eq_reader.text("name"),
            position=reader.raw("position"),
            quality=eq_reader.text("quality", NORMAL_QUALITY),
        )

    def to_dict(self) -> Dict[str, Any]:
        equipment: Dict[str, Any] = {"name": self.name}
        put_if(equipment, "quality", self.quality, self.quality != NORMAL_QUALITY)
        return {"equipment": equipment, "position": self.position}

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        ids.add(ReferenceCategory.EQUIPMENT, self.name)
        ids.add(ReferenceCategory.QUALITY, self.quality)
        return ids


# === ENTITY SPECIFIC SETTINGS ===


@dataclass
class MiningDrillFilter(GetIDs):
    """Resource filter of a mining drill; the filter entries are entity names."""

    filters: IndexedVec[NameString] = field(default_factory=lambda: IndexedVec())
    mode: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "filter") -> "MiningDrillFilter":
        reader = FieldReader(raw, path, ("filters", "mode"))
        return cls(
            filters=reader.indexed("filters", parse_name_string),
            mode=reader.text("mode", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        dump_indexed(data, "filters", self.filters, NameString.to_dict)
        put_if(data, "mode", self.mode, self.mode is not None)
        return data

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        for entry in self.filters:
            ids.add(ReferenceCategory.ENTITY, entry.name)
        return ids


def parse_entity_filter(raw: Any, path: str) -> Union[ItemFilter, MiningDrillFilter]:
    """Splitters carry an item filter, mining drills a list of resources."""
    data = expect_object(raw, path)
    if "filters" in data or "mode" in data:
        return MiningDrillFilter.from_dict(data, path)
    return ItemFilter.from_dict(data, path)


@dataclass
class InfinityPipeFilter(GetIDs):
    name: str
    percentage: Optional[float] = None
    temperature: Optional[float] = None
    mode: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "infinity_settings") -> "InfinityPipeFilter":
        reader = FieldReader(raw, path, ("name", "percentage", "temperature", "mode"))
        return cls(
            name=reader.text("name"),
            percentage=reader.number("percentage", None),
            temperature=reader.number("temperature", None),
            mode=reader.text("mode", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.percentage is not None:
            data["percentage"] = dump_number(self.percentage)
        if self.temperature is not None:
            data["temperature"] = dump_number(self.temperature)
        put_if(data, "mode", self.mode, self.mode is not None)
        return data

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        ids.add(ReferenceCategory.FLUID, self.name)
        return ids


@dataclass
class InfinityInventoryFilter(GetIDs):
    name: str
    quality: str = NORMAL_QUALITY
    count: Optional[int] = None
    mode: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "filter") -> "InfinityInventoryFilter":
        reader = FieldReader(raw, path, ("name", "quality", "count", "mode"))
        return cls(
            name=reader.text("name"),
            quality=reader.text("quality", NORMAL_QUALITY),
            count=reader.integer("count", None),
            mode=reader.text("mode", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        put_if(data, "quality", self.quality, self.quality != NORMAL_QUALITY)
        put_if(data, "count", self.count, self.count is not None)
        put_if(data, "mode", self.mode, self.mode is not None)
        return data

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        ids.add(ReferenceCategory.ITEM, self.name)
        ids.add(ReferenceCategory.QUALITY, self.quality)
        return ids


def parse_infinity_inventory_filter(raw: Any, path: str) -> InfinityInventoryFilter:
    return InfinityInventoryFilter.from_dict(raw, path)


@dataclass
class InfinityInventorySettings(GetIDs):
    filters: IndexedVec[InfinityInventoryFilter] = field(default_factory=lambda: IndexedVec())
    remove_unfiltered_items: bool = False

    @classmethod
    def from_dict(cls, raw: Any, path: str = "infinity_settings") -> "InfinityInventorySettings":
        reader = FieldReader(raw, path, ("filters", "remove_unfiltered_items"))
        return cls(
            filters=reader.indexed("filters", parse_infinity_inventory_filter),
            remove_unfiltered_items=reader.boolean("remove_unfiltered_items", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        dump_indexed(data, "filters", self.filters, InfinityInventoryFilter.to_dict)
        put_if(data, "remove_unfiltered_items", True, self.remove_unfiltered_items)
        return data

    def get_ids(self) -> UsedIDs:
        return self.filters.get_ids()


def parse_infinity_settings(
    raw: Any, path: str
) -> Union[InfinityPipeFilter, InfinityInventorySettings]:
    """Infinity pipes name a fluid; infinity chests and wagons list item filters."""
    data = expect_object(raw, path)
    if "name" in data:
        return InfinityPipeFilter.from_dict(data, path)
    return InfinityInventorySettings.from_dict(data, path)


@dataclass
class SpeakerParameters(GetIDs):
    """Programmable speaker playback settings."""

    playback_volume: Optional[float] = None
    playback_mode: Optional[str] = None
    allow_polyphony: Optional[bool] = None
    volume_controlled_by_signal: Optional[bool] = None
    volume_signal_id: Optional[SignalID] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "parameters") -> "SpeakerParameters":
        reader = FieldReader(
            raw,
            path,
            (
                "playback_volume",
                "playback_mode",
                "allow_polyphony",
                "volume_controlled_by_signal",
                "volume_signal_id",
            ),
        )
        return cls(
            playback_volume=reader.number("playback_volume", None),
            playback_mode=reader.text("playback_mode", None),
            allow_polyphony=reader.boolean("allow_polyphony", None),
            volume_controlled_by_signal=reader.boolean("volume_controlled_by_signal", None),
            volume_signal_id=reader.optional_node("volume_signal_id", parse_signal),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.playback_volume is not None:
            data["playback_volume"] = dump_number(self.playback_volume)
        for name in ("playback_mode", "allow_polyphony", "volume_controlled_by_signal"):
            value = getattr(self, name)
            put_if(data, name, value, value is not None)
        if self.volume_signal_id is not None:
            data["volume_signal_id"] = self.volume_signal_id.to_dict()
        return data

    def get_ids(self) -> UsedIDs:
        return collect_ids(self.volume_signal_id)


@dataclass
class SpeakerAlertParameters(GetIDs):
    show_alert: Optional[bool] = None
    show_on_map: Optional[bool] = None
    icon_signal_id: Optional[SignalID] = None
    alert_message: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any, path: str = "alert_parameters") -> "SpeakerAlertParameters":
        reader = FieldReader(
            raw, path, ("show_alert", "show_on_map", "icon_signal_id", "alert_message")
        )
        return cls(
            show_alert=reader.boolean("show_alert", None),
            show_on_map=reader.boolean("show_on_map", None),
            icon_signal_id=reader.optional_node("icon_signal_id", parse_signal),
            alert_message=reader.text("alert_message", None),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        put_if(data, "show_alert", self.show_alert, self.show_alert is not None)
        put_if(data, "show_on_map", self.show_on_map, self.show_on_map is not None)
        if self.icon_signal_id is not None:
            data["icon_signal_id"] = self.icon_signal_id.to_dict()
        put_if(data, "alert_message", self.alert_message, self.alert_message is not None)
        return data

    def get_ids(self) -> UsedIDs:
        return collect_ids(self.icon_signal_id)


# === ENTITY ===


@dataclass
class Entity(GetIDs):
    """A placed entity (``BlueprintEntity``).

    Tag keys are recorded as OTHER references: mods use them as markers and
    the key names often carry the mod's prefix.

    The entity specific fields below ``grid`` are each written by a few
    entity types only (``filter`` by splitters and mining drills, ``icon`` by
    display panels, ``parameters`` by programmable speakers, ...). Fields
    without references are kept verbatim in ``extra_data``.
    """

    entity_number: int
    name: str
    position: Position
    direction: int = 0
    mirror: bool = False
    quality: str = NORMAL_QUALITY
    items: List[InsertPlan] = field(default_factory=lambda: [])
    tags: TagTable = field(default_factory=lambda: {})
    recipe: Optional[str] = None
    recipe_quality: str = NORMAL_QUALITY
    filters: IndexedVec[ItemFilter] = field(default_factory=lambda: IndexedVec())
    request_filters: Optional[LogisticSections] = None
    burner_fuel_inventory: Optional[InventoryWithFilters] = None
    grid: List[BlueprintEquipment] = field(default_factory=lambda: [])
    control_behavior: Optional[ControlBehavior] = None
    filter: Union[ItemFilter, MiningDrillFilter, None] = None
    chunk_filter: IndexedVec[NameString] = field(default_factory=lambda: IndexedVec())
    priority_list: IndexedVec[NameString] = field(default_factory=lambda: IndexedVec())
    infinity_settings: Union[InfinityPipeFilter, InfinityInventorySettings, None] = None
    fluid_filter: Optional[str] = None
    icon: Optional[SignalID] = None
    parameters: Optional[SpeakerParameters] = None
    alert_parameters: Optional[SpeakerAlertParameters] = None
    inventory: Optional[InventoryWithFilters] = None
    trunk_inventory: Optional[InventoryWithFilters] = None
    ammo_inventory: Optional[InventoryWithFilters] = None
    extra_data: Dict[str, Any] = field(default_factory=lambda: {})

    MODELED_FIELDS = (
        "entity_number",
        "name",
        "position",
        "direction",
        "mirror",
        "quality",
        "items",
        "tags",
        "recipe",
        "recipe_quality",
        "filters",
        "request_filters",
        "burner_fuel_inventory",
        "grid",
        "control_behavior",
        "filter",
        "chunk-filter",
        "priority-list",
        "infinity_settings",
        "fluid_filter",
        "icon",
        "parameters",
        "alert_parameters",
        "inventory",
        "trunk_inventory",
        "ammo_inventory",
    )

    INVENTORY_FIELDS = ("burner_fuel_inventory", "inventory", "trunk_inventory", "ammo_inventory")

    @classmethod
    def from_dict(cls, raw: Any, path: str = "entity") -> "Entity":
        """Parse an entity.

        Unlike other nodes, unknown fields are accepted and kept in
        ``extra_data``: the entity schema depends on the entity type.
        """
        reader = FieldReader(raw, path, None)
        inventories = {
            name: reader.optional_node(name, InventoryWithFilters.from_dict)
            for name in cls.INVENTORY_FIELDS
        }
        return cls(
            entity_number=reader.integer("entity_number"),
            name=reader.text("name"),
            position=reader.node("position", Position.from_dict),
            direction=reader.integer("direction", 0),
            mirror=reader.boolean("mirror", False),
            quality=reader.text("quality", NORMAL_QUALITY),
            items=reader.array("items", InsertPlan.from_dict),
            tags=reader.optional_node("tags", parse_tag_table) or {},
            recipe=reader.text("recipe", None),
            recipe_quality=reader.text("recipe_quality", NORMAL_QUALITY),
            filters=reader.indexed("filters", parse_item_filter),
            request_filters=reader.optional_node("request_filters", LogisticSections.from_dict),
            grid=reader.array("grid", BlueprintEquipment.from_dict),
            control_behavior=reader.optional_node("control_behavior", ControlBehavior.from_dict),
            filter=reader.optional_node("filter", parse_entity_filter),
            chunk_filter=reader.indexed("chunk-filter", parse_name_string),
            priority_list=reader.indexed("priority-list", parse_name_string),
            infinity_settings=reader.optional_node("infinity_settings", parse_infinity_settings),
            fluid_filter=reader.text("fluid_filter", None),
            icon=reader.optional_node("icon", parse_signal),
            parameters=reader.optional_node("parameters", SpeakerParameters.from_dict),
            alert_parameters=reader.optional_node(
                "alert_parameters", SpeakerAlertParameters.from_dict
            ),
            extra_data=reader.extras(cls.MODELED_FIELDS),
            **inventories,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "entity_number": self.entity_number,
            "name": self.name,
            "position": self.position.to_dict(),
        }
        put_if(data, "direction", self.direction, self.direction != 0)
        put_if(data, "mirror", True, self.mirror)
        put_if(data, "quality", self.quality, self.quality != NORMAL_QUALITY)
        put_if(data, "items", [plan.to_dict() for plan in self.items], bool(self.items))
        put_if(data, "tags", dump_tag_table(self.tags), bool(self.tags))
        put_if(data, "recipe", self.recipe, self.recipe is not None)
        put_if(
            data,
            "recipe_quality",
            self.recipe_quality,
            self.recipe_quality != NORMAL_QUALITY,
        )
        dump_indexed(data, "filters", self.filters, ItemFilter.to_dict)
        if self.request_filters is not None:
            data["request_filters"] = self.request_filters.to_dict()
        put_if(data, "grid", [eq.to_dict() for eq in self.grid], bool(self.grid))

        for name in (
            "control_behavior",
            "filter",
            "infinity_settings",
            "icon",
            "parameters",
            "alert_parameters",
        ) + self.INVENTORY_FIELDS:
            node = getattr(self, name)
            if node is not None:
                data[name] = node.to_dict()
        dump_indexed(data, "chunk-filter", self.chunk_filter, NameString.to_dict)
        dump_indexed(data, "priority-list", self.priority_list, NameString.to_dict)
        put_if(data, "fluid_filter", self.fluid_filter, self.fluid_filter is not None)
        data.update(self.extra_data)
        return data

    def get_ids(self) -> UsedIDs:
        ids = collect_ids(
            self.items,
            self.filters,
            self.request_filters,
            self.grid,
            self.control_behavior,
            self.filter,
            self.infinity_settings,
            self.icon,
            self.parameters,
            self.alert_parameters,
            self.burner_fuel_inventory,
            self.inventory,
            self.trunk_inventory,
            self.ammo_inventory,
        )
        ids.add(ReferenceCategory.ENTITY, self.name)
        ids.add(ReferenceCategory.QUALITY, self.quality)
        if self.recipe is not None:
            ids.add(ReferenceCategory.RECIPE, self.recipe)
            ids.add(ReferenceCategory.QUALITY, self.recipe_quality)
        for key in self.tags:
            ids.add(ReferenceCategory.OTHER, key)
        for chunk in self.chunk_filter:
            ids.add(ReferenceCategory.ASTEROID_CHUNK, chunk.name)
        for target in self.priority_list:
            ids.add(ReferenceCategory.ENTITY, target.name)
        if self.fluid_filter is not None:
            ids.add(ReferenceCategory.FLUID, self.fluid_filter)
        return ids


@dataclass
class Tile(GetIDs):
    name: str
    position: Position

    @classmethod
    def from_dict(cls, raw: Any, path: str = "tile") -> "Tile":
        reader = FieldReader(raw, path, ("name", "position"))
        return cls(
            name=reader.text("name"),
            position=reader.node("position", Position.from_dict),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "position": self.position.to_dict()}

    def get_ids(self) -> UsedIDs:
        ids = UsedIDs()
        ids.add(ReferenceCategory.TILE, self.name)
        return ids
